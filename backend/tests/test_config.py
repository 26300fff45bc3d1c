import pytest

from dvault.__main__ import parse_args
from dvault.config import RevealConfig
from dvault.reveal import RevealSessionManager
from dvault.services.audit import MemoryAuditLog


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "DVAULT_API_URL",
        "DVAULT_ACTOR_ID",
        "DVAULT_REVEAL_TTL",
        "DVAULT_REQUEST_TIMEOUT",
        "DVAULT_BRIDGE_PORT",
        "DVAULT_AUDIT_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = RevealConfig()

    assert config.api_url == "http://localhost:8080"
    assert config.actor_id == "current_user"
    assert config.default_ttl_seconds == 15
    assert config.request_timeout == 10.0
    assert config.bridge_port == 8765
    assert config.audit_enabled is True


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("DVAULT_API_URL", "http://vault.internal:9000/")
    monkeypatch.setenv("DVAULT_REVEAL_TTL", "30")
    monkeypatch.setenv("DVAULT_AUDIT_ENABLED", "false")

    config = RevealConfig()

    assert config.base_url == "http://vault.internal:9000"
    assert config.default_ttl_seconds == 30
    assert config.audit_enabled is False


def test_cli_overrides_env(monkeypatch):
    monkeypatch.setenv("DVAULT_REVEAL_TTL", "30")
    monkeypatch.setenv("DVAULT_ACTOR_ID", "env-user")

    config, _ = parse_args(["--ttl", "5", "--actor-id", "cli-user", "--no-audit"])

    assert config.default_ttl_seconds == 5
    assert config.actor_id == "cli-user"
    assert config.audit_enabled is False


def test_non_positive_env_ttl_rejected(monkeypatch):
    monkeypatch.setenv("DVAULT_REVEAL_TTL", "0")

    with pytest.raises(ValueError):
        RevealConfig()


def test_manager_from_config(decryption):
    audit = MemoryAuditLog()

    mgr = RevealSessionManager.from_config(RevealConfig(actor_id="ada", default_ttl_seconds=9), decryption, audit)
    assert mgr.actor_id == "ada"
    assert mgr.default_ttl == 9
    assert mgr.audit is audit

    muted = RevealSessionManager.from_config(RevealConfig(audit_enabled=False), decryption, audit)
    assert muted.audit is None
