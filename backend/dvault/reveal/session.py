"""In-memory reveal sessions - one per field currently shown in plaintext."""

from dataclasses import dataclass, field
from typing import Literal, Optional

from .timers import TimerHandle

ChangeReason = Literal["revealed", "masked", "expired", "teardown"]


@dataclass(eq=False)
class RevealSession:
    """A revealed field. The plaintext lives only as long as this object is in a table."""

    record_id: str
    field_name: str
    plaintext: str = field(repr=False)
    ttl_seconds: float
    started_at: float
    timer: Optional[TimerHandle] = field(default=None, repr=False)

    @property
    def expires_at(self) -> float:
        """Scheduler-clock time at which the field re-masks."""
        return self.started_at + self.ttl_seconds

    def remaining(self, now: float) -> float:
        """Seconds left in the reveal window (never negative)."""
        return max(0.0, self.expires_at - now)

    def cancel_timer(self) -> None:
        """Cancel the auto-mask callback. Safe to call repeatedly."""
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None

    def __getstate__(self):
        raise TypeError("RevealSession holds plaintext and cannot be serialized")


@dataclass(frozen=True)
class RevealChange:
    """Notification sent to observers on every slot transition."""
    record_id: str
    field_name: str
    revealed: bool
    reason: ChangeReason
