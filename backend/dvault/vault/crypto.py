"""
Field-level vault encryption using PBKDF2 + AES-GCM.

Each sensitive field is sealed on its own, with the record id and field name
bound as associated data so a ciphertext cannot be replayed into another
record or field.
"""

import base64
import hashlib
import os

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

# PBKDF2 configuration (must match the desktop backend)
PBKDF2_ITERATIONS = 100000
PBKDF2_HASH = 'sha256'
KEY_LENGTH_BYTES = 32  # 256 bits

# AES-GCM configuration
IV_LENGTH_BYTES = 12  # 96 bits, recommended for AES-GCM


def derive_key(password: str, salt_base64: str) -> bytes:
    """
    Derive a 256-bit AES key from password and salt using PBKDF2.

    Args:
        password: The master password
        salt_base64: Base64-encoded salt stored with the vault

    Returns:
        32-byte key suitable for AES-256-GCM
    """
    salt = base64.b64decode(salt_base64)
    return hashlib.pbkdf2_hmac(
        PBKDF2_HASH,
        password.encode('utf-8'),
        salt,
        PBKDF2_ITERATIONS,
        dklen=KEY_LENGTH_BYTES
    )


def _field_aad(record_id: str, field_name: str) -> bytes:
    return f"{record_id}:{field_name}".encode('utf-8')


def seal_field(key: bytes, record_id: str, field_name: str, plaintext: str) -> tuple[str, str]:
    """
    Encrypt one field value using AES-256-GCM.

    Returns:
        Tuple of (encrypted_base64, iv_base64)
    """
    iv = os.urandom(IV_LENGTH_BYTES)
    ciphertext = AESGCM(key).encrypt(iv, plaintext.encode('utf-8'), _field_aad(record_id, field_name))

    return (
        base64.b64encode(ciphertext).decode('ascii'),
        base64.b64encode(iv).decode('ascii')
    )


def open_field(key: bytes, record_id: str, field_name: str, encrypted_base64: str, iv_base64: str) -> str:
    """
    Decrypt one field value sealed by ``seal_field``.

    Raises:
        cryptography.exceptions.InvalidTag if the key is wrong, the data was
        tampered with, or the ciphertext belongs to another record/field.
    """
    ciphertext = base64.b64decode(encrypted_base64)
    iv = base64.b64decode(iv_base64)

    plaintext = AESGCM(key).decrypt(iv, ciphertext, _field_aad(record_id, field_name))
    return plaintext.decode('utf-8')
