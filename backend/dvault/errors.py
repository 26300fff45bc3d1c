"""Error taxonomy for the reveal core."""


class RevealError(Exception):
    """Base class for every error raised at the reveal manager boundary."""


class DecryptionFailed(RevealError):
    """The decryption service refused or could not complete the request."""

    def __init__(self, reason: str, status_code: int | None = None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class FieldNotRevealed(RevealError):
    """A plaintext read was attempted on a masked field."""

    def __init__(self, field_name: str):
        super().__init__(f"Field '{field_name}' is not revealed")
        self.field_name = field_name


class AlreadyInProgress(RevealError):
    """A reveal for this field is already waiting on the decryption service."""

    def __init__(self, field_name: str):
        super().__init__(f"Reveal of '{field_name}' already in progress")
        self.field_name = field_name


class RecordNotDisplayed(RevealError):
    """The record is not the one currently displayed."""

    def __init__(self, record_id: str | None, reason: str = "record is not displayed"):
        super().__init__(f"{reason}: {record_id}")
        self.record_id = record_id
        self.reason = reason


class AuditLogFailed(RevealError):
    """An audit event could not be delivered. Never surfaced to reveal callers."""
