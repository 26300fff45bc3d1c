"""Decryption collaborators - turn (record, field) into a short-lived plaintext."""

from typing import Optional, Protocol

import httpx
from pydantic import BaseModel, ValidationError

from ..logging import get_logger
from ..errors import DecryptionFailed
from .auth import AuthContext

logger = get_logger("decrypt")

# HTTP status -> human readable reason shown to the user
STATUS_REASONS = {
    400: "invalid challenge or signature",
    401: "unauthorized",
    403: "permission denied",
    404: "record not found",
    422: "invalid challenge or signature",
}


class DecryptedField(BaseModel):
    """Decrypted value and the backend's suggested reveal window."""
    plaintext: str
    expires_in: Optional[int] = None
    field_name: Optional[str] = None

    def __repr__(self) -> str:
        return f"DecryptedField(field_name={self.field_name!r}, expires_in={self.expires_in!r})"

    __str__ = __repr__


class DecryptionService(Protocol):
    async def decrypt_field(
        self,
        record_id: str,
        field_name: str,
        auth: Optional[AuthContext] = None,
    ) -> DecryptedField: ...


class HttpDecryptionService:
    """Asks the vault backend to decrypt a single field."""

    def __init__(self, base_url: str, timeout: float = 10.0, client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self):
        if self._owns_client:
            await self._client.aclose()

    async def decrypt_field(
        self,
        record_id: str,
        field_name: str,
        auth: Optional[AuthContext] = None,
    ) -> DecryptedField:
        payload = {"entry_id": record_id, "field_name": field_name}
        if auth is not None:
            payload.update(auth.to_wire())

        try:
            resp = await self._client.post(f"{self.base_url}/api/entry/decrypt", json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"Decrypt request for {record_id}/{field_name} failed: {type(e).__name__}")
            raise DecryptionFailed(f"network error: {e}") from e

        if resp.status_code >= 400:
            reason = STATUS_REASONS.get(resp.status_code, f"backend error (HTTP {resp.status_code})")
            logger.warning(f"Decrypt of {record_id}/{field_name} rejected: {reason}")
            raise DecryptionFailed(reason, status_code=resp.status_code)

        try:
            return DecryptedField.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise DecryptionFailed("invalid response from decryption service") from e
