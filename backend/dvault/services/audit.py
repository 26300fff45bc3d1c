"""Audit log collaborators - best-effort delivery of decrypt events."""

from datetime import datetime, timezone
from typing import Literal, Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..logging import get_logger
from ..errors import AuditLogFailed

logger = get_logger("audit")

AuditEventType = Literal["view", "decrypt", "create", "update", "delete"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """Immutable record of who decrypted what and when."""
    model_config = ConfigDict(frozen=True)

    event_type: AuditEventType = "decrypt"
    record_id: str = Field(..., min_length=1)
    field_name: str = Field(..., min_length=1)
    actor_id: str
    timestamp: datetime = Field(default_factory=_utcnow)

    def to_wire(self) -> dict:
        """Payload accepted by the backend's /api/audit/log endpoint."""
        return {
            "event_type": self.event_type,
            "entry_id": self.record_id,
            "field_name": self.field_name,
            "timestamp": self.timestamp.isoformat(),
            "user_id": self.actor_id,
        }


class AuditLogService(Protocol):
    async def log_event(self, event: AuditEvent) -> None: ...


class HttpAuditLogService:
    """Posts audit events to the vault backend."""

    def __init__(self, base_url: str, timeout: float = 10.0, client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self):
        if self._owns_client:
            await self._client.aclose()

    async def log_event(self, event: AuditEvent) -> None:
        try:
            resp = await self._client.post(
                f"{self.base_url}/api/audit/log",
                json=event.to_wire(),
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AuditLogFailed(f"audit log rejected event: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise AuditLogFailed(f"audit log unreachable: {type(e).__name__}: {e}") from e
        logger.debug(f"Audit event delivered: {event.event_type} {event.record_id}/{event.field_name}")


class MemoryAuditLog:
    """Keeps audit events in arrival order. Used offline and in tests."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def log_event(self, event: AuditEvent) -> None:
        self.events.append(event)
