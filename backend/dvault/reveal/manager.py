"""RevealSessionManager - time-boxed plaintext for the currently displayed record."""

import asyncio
from collections.abc import Callable
from typing import Optional

from ..config import DEFAULT_REVEAL_TTL, RevealConfig
from ..logging import get_logger
from ..services.audit import AuditEvent, AuditLogService
from ..services.auth import AuthContext
from ..services.decryption import DecryptionService
from ..errors import (
    AlreadyInProgress,
    AuditLogFailed,
    DecryptionFailed,
    FieldNotRevealed,
    RecordNotDisplayed,
)
from .session import ChangeReason, RevealChange, RevealSession
from .timers import LoopScheduler, Scheduler

logger = get_logger("reveal")

Listener = Callable[[RevealChange], None]


class RevealSessionManager:
    """
    Owns the reveal session table of one displayed record.

    Each field slot is either masked (absent from the table) or revealed
    (present, with a live auto-mask timer). Every path back to masked goes
    through ``_teardown``, which cancels the timer before dropping the
    session. Switching the displayed record or closing the manager tears
    down every session.
    """

    def __init__(
        self,
        decryption: DecryptionService,
        audit: Optional[AuditLogService] = None,
        *,
        actor_id: str = "current_user",
        default_ttl: float = DEFAULT_REVEAL_TTL,
        scheduler: Optional[Scheduler] = None,
        record_id: Optional[str] = None,
    ):
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self.decryption = decryption
        self.audit = audit
        self.actor_id = actor_id
        self.default_ttl = default_ttl
        self.scheduler: Scheduler = scheduler or LoopScheduler()
        self._record_id = record_id
        self._sessions: dict[str, RevealSession] = {}
        # (generation, field_name) of reveals waiting on the decryption service
        self._in_flight: set[tuple[int, str]] = set()
        self._generation = 0
        self._closed = False
        self._listeners: list[Listener] = []
        self._audit_tasks: set[asyncio.Task] = set()

    @classmethod
    def from_config(
        cls,
        config: RevealConfig,
        decryption: DecryptionService,
        audit: Optional[AuditLogService] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> "RevealSessionManager":
        return cls(
            decryption,
            audit if config.audit_enabled else None,
            actor_id=config.actor_id,
            default_ttl=config.default_ttl_seconds,
            scheduler=scheduler,
        )

    # --- Displayed record ---

    @property
    def record_id(self) -> Optional[str]:
        return self._record_id

    @property
    def closed(self) -> bool:
        return self._closed

    def display(self, record_id: Optional[str]) -> None:
        """Select the displayed record. A different record tears down every session first."""
        if self._closed:
            raise RecordNotDisplayed(record_id, "manager is closed")
        if record_id == self._record_id:
            return
        self.teardown_all()
        self._generation += 1
        previous, self._record_id = self._record_id, record_id
        logger.debug(f"Displayed record changed: {previous} -> {record_id}")

    # --- Operations ---

    async def reveal_field(
        self,
        record_id: str,
        field_name: str,
        auth: Optional[AuthContext] = None,
    ) -> RevealSession:
        """
        Decrypt a field and keep its plaintext for the reveal window.

        An already revealed field keeps its current session until the new
        plaintext arrives, which then replaces it with a fresh timer. If the
        decryption fails the current session is left as it was.

        Raises:
            RecordNotDisplayed: record_id is not the displayed record, or the
                displayed record changed while the decryption was in flight
            AlreadyInProgress: a reveal for this field is still in flight
            DecryptionFailed: the decryption service refused the request
        """
        if self._closed:
            raise RecordNotDisplayed(record_id, "manager is closed")
        if record_id is None or record_id != self._record_id:
            raise RecordNotDisplayed(record_id)
        if not field_name:
            raise ValueError("field_name must not be empty")

        slot = (self._generation, field_name)
        if slot in self._in_flight:
            raise AlreadyInProgress(field_name)

        self._in_flight.add(slot)
        try:
            result = await self.decryption.decrypt_field(record_id, field_name, auth)
        except DecryptionFailed as e:
            logger.warning(f"Reveal of {record_id}/{field_name} failed: {e.reason}")
            raise
        except Exception as e:
            logger.warning(f"Reveal of {record_id}/{field_name} failed: {type(e).__name__}: {e}")
            raise DecryptionFailed(f"decryption service error: {e}") from e
        finally:
            self._in_flight.discard(slot)

        # The view may have moved on while we were waiting
        if self._closed or slot[0] != self._generation:
            logger.info(f"Discarding decrypted {record_id}/{field_name}: record no longer displayed")
            raise RecordNotDisplayed(record_id, "record changed while decrypting")

        # Replace only once the new plaintext is in hand; a failed reveal leaves the table alone
        self._teardown(field_name, "masked")

        ttl = result.expires_in if result.expires_in and result.expires_in > 0 else self.default_ttl
        session = RevealSession(
            record_id=record_id,
            field_name=field_name,
            plaintext=result.plaintext,
            ttl_seconds=ttl,
            started_at=self.scheduler.now(),
        )
        session.timer = self.scheduler.call_after(ttl, lambda: self._expire(session))
        self._sessions[field_name] = session

        logger.info(
            f"Field {field_name} of {record_id} revealed for {ttl}s",
            extra={"record_id": record_id, "field_name": field_name},
        )
        self._notify(session, revealed=True, reason="revealed")
        self._emit_audit(record_id, field_name)
        return session

    def mask_field(self, field_name: str) -> None:
        """Mask a field. No-op when it is not revealed."""
        self._teardown(field_name, "masked")

    def copy_field(self, field_name: str) -> str:
        """
        Return the plaintext of a revealed field.

        Reading does not touch the timer: copying never extends the window.
        """
        session = self._sessions.get(field_name)
        if session is None:
            raise FieldNotRevealed(field_name)
        return session.plaintext

    def teardown_all(self) -> None:
        """Mask every revealed field and cancel every timer."""
        for field_name in list(self._sessions):
            self._teardown(field_name, "teardown")

    def close(self) -> None:
        """Tear down and refuse further reveals. Called when the owning view goes away."""
        if self._closed:
            return
        self.teardown_all()
        self._closed = True
        self._generation += 1
        logger.debug(f"Reveal manager for {self._record_id} closed")

    async def shutdown(self) -> None:
        """Close and wait for outstanding audit deliveries."""
        self.close()
        if self._audit_tasks:
            await asyncio.gather(*self._audit_tasks, return_exceptions=True)

    async def __aenter__(self) -> "RevealSessionManager":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    # --- Queries for the rendering layer ---

    @property
    def revealed_fields(self) -> frozenset[str]:
        return frozenset(self._sessions)

    def is_revealed(self, field_name: str) -> bool:
        return field_name in self._sessions

    def is_revealing(self, field_name: str) -> bool:
        """True while a reveal of this field waits on the decryption service."""
        return (self._generation, field_name) in self._in_flight

    def get_session(self, field_name: str) -> Optional[RevealSession]:
        return self._sessions.get(field_name)

    def snapshot(self) -> dict[str, float]:
        """Revealed field names with the seconds left in their window. Never contains plaintext."""
        now = self.scheduler.now()
        return {name: s.remaining(now) for name, s in self._sessions.items()}

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register for slot transitions. Returns a function that unsubscribes."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __len__(self) -> int:
        return len(self._sessions)

    # --- Internals ---

    def _teardown(self, field_name: str, reason: ChangeReason, expected: Optional[RevealSession] = None) -> bool:
        session = self._sessions.get(field_name)
        if session is None:
            return False
        if expected is not None and session is not expected:
            # Stale timer from a session that was already replaced
            return False
        session.cancel_timer()
        del self._sessions[field_name]
        session.plaintext = ""
        logger.debug(f"Field {field_name} of {session.record_id} masked ({reason})")
        self._notify(session, revealed=False, reason=reason)
        return True

    def _expire(self, session: RevealSession) -> None:
        self._teardown(session.field_name, "expired", expected=session)

    def _notify(self, session: RevealSession, revealed: bool, reason: ChangeReason) -> None:
        change = RevealChange(
            record_id=session.record_id,
            field_name=session.field_name,
            revealed=revealed,
            reason=reason,
        )
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception as e:
                logger.error(f"Reveal listener crashed: {type(e).__name__}: {e}")

    def _emit_audit(self, record_id: str, field_name: str) -> None:
        if self.audit is None:
            return
        event = AuditEvent(
            event_type="decrypt",
            record_id=record_id,
            field_name=field_name,
            actor_id=self.actor_id,
        )
        task = asyncio.create_task(self._deliver_audit(event), name=f"audit-{field_name}")
        self._audit_tasks.add(task)
        task.add_done_callback(self._audit_tasks.discard)

    async def _deliver_audit(self, event: AuditEvent) -> None:
        try:
            await self.audit.log_event(event)
        except AuditLogFailed as e:
            logger.warning(f"Audit event for {event.record_id}/{event.field_name} dropped: {e}")
        except Exception as e:
            logger.warning(
                f"Audit event for {event.record_id}/{event.field_name} dropped: {type(e).__name__}: {e}"
            )
