import asyncio

import pytest

from dvault.reveal import LoopScheduler, RevealSessionManager


@pytest.mark.asyncio
async def test_loop_timer_fires_once():
    fired = []
    scheduler = LoopScheduler()

    timer = scheduler.call_after(0.01, lambda: fired.append(True))
    assert timer.active

    await asyncio.sleep(0.05)

    assert fired == [True]
    assert not timer.active
    assert timer.fired


@pytest.mark.asyncio
async def test_loop_timer_cancel_is_idempotent():
    fired = []
    timer = LoopScheduler().call_after(0.01, lambda: fired.append(True))

    timer.cancel()
    timer.cancel()
    await asyncio.sleep(0.05)

    assert fired == []
    assert not timer.fired


@pytest.mark.asyncio
async def test_cancel_after_fire_is_noop():
    fired = []
    timer = LoopScheduler().call_after(0, lambda: fired.append(True))
    await asyncio.sleep(0.01)

    timer.cancel()
    timer.cancel()

    assert fired == [True]


@pytest.mark.asyncio
async def test_now_follows_loop_clock():
    scheduler = LoopScheduler()
    assert scheduler.now() == pytest.approx(asyncio.get_running_loop().time(), abs=0.01)


@pytest.mark.asyncio
async def test_reveal_auto_masks_on_real_loop(decryption):
    decryption.expires_in = None
    mgr = RevealSessionManager(decryption, default_ttl=0.05, record_id="entry-42")

    await mgr.reveal_field("entry-42", "password")
    assert mgr.copy_field("password") == "s3cr3t"

    await asyncio.sleep(0.15)

    assert not mgr.is_revealed("password")
    await mgr.shutdown()


@pytest.mark.asyncio
async def test_mask_before_expiry_on_real_loop(decryption):
    decryption.expires_in = None
    mgr = RevealSessionManager(decryption, default_ttl=0.05, record_id="entry-42")
    changes = []
    mgr.subscribe(changes.append)

    await mgr.reveal_field("entry-42", "password")
    mgr.mask_field("password")
    await asyncio.sleep(0.15)

    assert [c.reason for c in changes] == ["revealed", "masked"]
