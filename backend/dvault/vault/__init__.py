"""Vault module: entry kinds, field sealing and the in-memory vault key."""

from .crypto import derive_key, seal_field, open_field
from .models import (
    BaseEntry,
    CardEntry,
    EntryType,
    IdentityEntry,
    LoginEntry,
    NoteEntry,
    SSHKeyEntry,
    VaultEntry,
    parse_entry,
)
from .session import VaultSession

__all__ = [
    'derive_key',
    'seal_field',
    'open_field',
    'BaseEntry',
    'CardEntry',
    'EntryType',
    'IdentityEntry',
    'LoginEntry',
    'NoteEntry',
    'SSHKeyEntry',
    'VaultEntry',
    'parse_entry',
    'VaultSession',
]
