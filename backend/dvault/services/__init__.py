"""Backend collaborators consumed by the reveal core."""

from .audit import AuditEvent, AuditLogService, HttpAuditLogService, MemoryAuditLog
from .auth import AuthContext
from .decryption import DecryptedField, DecryptionService, HttpDecryptionService
from .local import LocalDecryptionService

__all__ = [
    "AuditEvent",
    "AuditLogService",
    "HttpAuditLogService",
    "MemoryAuditLog",
    "AuthContext",
    "DecryptedField",
    "DecryptionService",
    "HttpDecryptionService",
    "LocalDecryptionService",
]
