"""
Challenge/signature pairs for records owned by another party.

Shared entries are decrypted for a recipient only after the recipient signs
a backend-issued challenge with their Stellar account key. Stellar keys are
Ed25519, so signing uses the raw 32-byte seed.
"""

import base64
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)


@dataclass(frozen=True)
class AuthContext:
    """A challenge and the base64 signature over it."""
    challenge: str
    signature: str

    def __post_init__(self):
        if not self.challenge:
            raise ValueError("challenge must not be empty")
        if not self.signature:
            raise ValueError("signature must not be empty")

    @classmethod
    def sign(cls, challenge: str, private_key: bytes) -> "AuthContext":
        """
        Sign a challenge with a raw Ed25519 seed.

        Args:
            challenge: Challenge string issued by the backend
            private_key: 32-byte Ed25519 seed

        Returns:
            AuthContext carrying the base64-encoded signature
        """
        key = Ed25519PrivateKey.from_private_bytes(private_key)
        signature = key.sign(challenge.encode("utf-8"))
        return cls(
            challenge=challenge,
            signature=base64.b64encode(signature).decode("ascii"),
        )

    def verify(self, public_key: bytes) -> bool:
        """Check the signature against a raw 32-byte Ed25519 public key."""
        try:
            key = Ed25519PublicKey.from_public_bytes(public_key)
            key.verify(base64.b64decode(self.signature), self.challenge.encode("utf-8"))
        except (InvalidSignature, ValueError):
            return False
        return True

    def to_wire(self) -> dict:
        return {"challenge": self.challenge, "signature": self.signature}
