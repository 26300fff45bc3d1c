"""
The unlocked vault key, held only in this process.

LocalDecryptionService seals and opens field values through the session, so
the raw key never leaves it. Locking zeroes the key buffer.
"""

from datetime import datetime, timezone
from typing import Optional

from .crypto import KEY_LENGTH_BYTES, derive_key, open_field, seal_field


class VaultSession:
    """Unlock state backing offline decryption."""

    def __init__(self) -> None:
        self._key: Optional[bytearray] = None
        self.user_id: Optional[str] = None
        self.unlocked_at: Optional[datetime] = None

    @classmethod
    def from_password(cls, password: str, salt_base64: str, user_id: str) -> "VaultSession":
        session = cls()
        session.unlock_with_password(password, salt_base64, user_id)
        return session

    @property
    def is_unlocked(self) -> bool:
        return self._key is not None

    def unlock(self, key: bytes, user_id: str) -> None:
        """Take ownership of a derived key. Any previous key is wiped first."""
        if len(key) != KEY_LENGTH_BYTES:
            raise ValueError(f"vault key must be {KEY_LENGTH_BYTES} bytes")
        self.lock()
        self._key = bytearray(key)
        self.user_id = user_id
        self.unlocked_at = datetime.now(timezone.utc)

    def unlock_with_password(self, password: str, salt_base64: str, user_id: str) -> None:
        self.unlock(derive_key(password, salt_base64), user_id)

    def lock(self) -> None:
        if self._key is not None:
            self._key[:] = bytes(len(self._key))
        self._key = None
        self.user_id = None
        self.unlocked_at = None

    def seal(self, record_id: str, field_name: str, plaintext: str) -> tuple[str, str]:
        """Encrypt a field value. Returns (encrypted_base64, iv_base64)."""
        return seal_field(self._require_key(), record_id, field_name, plaintext)

    def open(self, record_id: str, field_name: str, encrypted_base64: str, iv_base64: str) -> str:
        """
        Decrypt a field value sealed for this record and field.

        Raises:
            ValueError: the vault is locked
            cryptography.exceptions.InvalidTag: wrong key, tampered data, or a
                ciphertext sealed for another record/field
        """
        return open_field(self._require_key(), record_id, field_name, encrypted_base64, iv_base64)

    def _require_key(self) -> bytes:
        if self._key is None:
            raise ValueError("vault is locked")
        return bytes(self._key)

    def __repr__(self) -> str:
        return f"VaultSession(unlocked={self.is_unlocked}, user_id={self.user_id!r})"
