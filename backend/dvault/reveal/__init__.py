"""Reveal sessions, auto-mask timers and the manager that owns them."""

from ..errors import (
    AlreadyInProgress,
    AuditLogFailed,
    DecryptionFailed,
    FieldNotRevealed,
    RecordNotDisplayed,
    RevealError,
)
from .manager import RevealSessionManager
from .session import RevealChange, RevealSession
from .timers import LoopScheduler, LoopTimer, Scheduler, TimerHandle

__all__ = [
    "RevealSessionManager",
    "RevealSession",
    "RevealChange",
    "Scheduler",
    "TimerHandle",
    "LoopScheduler",
    "LoopTimer",
    "RevealError",
    "DecryptionFailed",
    "FieldNotRevealed",
    "AlreadyInProgress",
    "RecordNotDisplayed",
    "AuditLogFailed",
]
