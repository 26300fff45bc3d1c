"""Reveal configuration with CLI > env var > defaults precedence."""

import os
from dataclasses import dataclass

DEFAULT_REVEAL_TTL = 15


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off", "")


@dataclass
class RevealConfig:
    """Configuration for the reveal core and its backend collaborators."""
    api_url: str = ""
    actor_id: str = ""
    default_ttl_seconds: int = 0
    request_timeout: float = 0.0
    bridge_host: str = "127.0.0.1"
    bridge_port: int = 0
    audit_enabled: bool = True

    def __post_init__(self):
        # Apply env var defaults before CLI overrides
        if not self.api_url:
            self.api_url = os.getenv("DVAULT_API_URL", "http://localhost:8080")
        if not self.actor_id:
            self.actor_id = os.getenv("DVAULT_ACTOR_ID", "current_user")
        if self.default_ttl_seconds <= 0:
            self.default_ttl_seconds = int(os.getenv("DVAULT_REVEAL_TTL", DEFAULT_REVEAL_TTL))
        if self.default_ttl_seconds <= 0:
            raise ValueError("default_ttl_seconds must be positive")
        if self.request_timeout <= 0:
            self.request_timeout = float(os.getenv("DVAULT_REQUEST_TIMEOUT", "10.0"))
        if not self.bridge_port:
            self.bridge_port = int(os.getenv("DVAULT_BRIDGE_PORT", "8765"))
        if self.audit_enabled:
            self.audit_enabled = _env_flag("DVAULT_AUDIT_ENABLED", True)

    @property
    def base_url(self) -> str:
        """Backend URL without a trailing slash."""
        return self.api_url.rstrip("/")
