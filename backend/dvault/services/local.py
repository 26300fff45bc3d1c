"""
Decryption from a locally sealed copy of the vault.

Sensitive fields are kept as AES-GCM ciphertext keyed by (record_id,
field_name). Decryption needs an unlocked VaultSession; nothing is cached in
plaintext.

This is a library collaborator for embedders that hold vault data in process.
The ``python -m dvault`` bridge always talks to the backend over HTTP.
"""

from typing import Optional

from cryptography.exceptions import InvalidTag

from ..logging import get_logger
from ..errors import DecryptionFailed
from ..vault.models import BaseEntry
from ..vault.session import VaultSession
from .auth import AuthContext
from .decryption import DecryptedField

logger = get_logger("decrypt")


class LocalDecryptionService:
    """DecryptionService backed by sealed field values held in memory."""

    def __init__(self, session: VaultSession, expires_in: Optional[int] = None):
        self.session = session
        self.expires_in = expires_in
        self._sealed: dict[tuple[str, str], tuple[str, str]] = {}
        self._signers: dict[str, bytes] = {}

    def seal(self, record_id: str, field_name: str, plaintext: str) -> None:
        """Encrypt and store a field value under the session key."""
        self._sealed[(record_id, field_name)] = self.session.seal(record_id, field_name, plaintext)

    def seal_entry(self, entry: BaseEntry) -> list[str]:
        """Seal every non-empty sensitive field of an entry. Returns the sealed field names."""
        sealed = []
        for field_name in entry.SENSITIVE_FIELDS:
            value = entry.field_value(field_name)
            if value:
                self.seal(entry.id, field_name, str(value))
                sealed.append(field_name)
        return sealed

    def require_signature(self, record_id: str, signer_public_key: bytes) -> None:
        """Shared record: reveals need a challenge signed by the recipient holding this key."""
        self._signers[record_id] = signer_public_key

    async def decrypt_field(
        self,
        record_id: str,
        field_name: str,
        auth: Optional[AuthContext] = None,
    ) -> DecryptedField:
        if not self.session.is_unlocked:
            raise DecryptionFailed("vault is locked")

        signer_key = self._signers.get(record_id)
        if signer_key is not None:
            if auth is None:
                raise DecryptionFailed("signed challenge required")
            if not auth.verify(signer_key):
                raise DecryptionFailed("invalid challenge or signature")

        sealed = self._sealed.get((record_id, field_name))
        if sealed is None:
            raise DecryptionFailed("record not found")

        try:
            plaintext = self.session.open(record_id, field_name, *sealed)
        except InvalidTag as e:
            logger.warning(f"Local decrypt of {record_id}/{field_name} failed integrity check")
            raise DecryptionFailed("integrity check failed") from e

        return DecryptedField(plaintext=plaintext, expires_in=self.expires_in, field_name=field_name)
