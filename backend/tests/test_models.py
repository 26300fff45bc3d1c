import pytest
from pydantic import ValidationError

from dvault.vault import (
    CardEntry,
    EntryType,
    IdentityEntry,
    LoginEntry,
    NoteEntry,
    SSHKeyEntry,
    parse_entry,
)


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"type": "login", "password": "pw"}, LoginEntry),
        ({"type": "card", "number": "4111111111111111"}, CardEntry),
        ({"type": "identity", "firstname": "Ada"}, IdentityEntry),
        ({"type": "note"}, NoteEntry),
        ({"type": "sshkey", "private_key": "k"}, SSHKeyEntry),
    ],
)
def test_parse_entry_dispatches_on_type(payload, expected):
    entry = parse_entry({"id": "e1", "entry_name": "x", **payload})

    assert isinstance(entry, expected)
    assert entry.kind == EntryType(payload["type"])


def test_parse_entry_rejects_unknown_type():
    with pytest.raises(ValidationError):
        parse_entry({"id": "e1", "entry_name": "x", "type": "wallet"})


def test_field_value_reads_fixed_and_custom_fields():
    entry = LoginEntry(
        id="e1",
        entry_name="GitHub",
        user_name="octo",
        password="pw",
        custom_fields={"recovery_code": "abcd"},
    )

    assert entry.field_value("user_name") == "octo"
    assert entry.field_value("password") == "pw"
    assert entry.field_value("recovery_code") == "abcd"
    with pytest.raises(KeyError):
        entry.field_value("cvc")


def test_sensitive_fields_per_kind():
    assert LoginEntry.is_sensitive("password")
    assert not LoginEntry.is_sensitive("user_name")
    assert CardEntry.is_sensitive("cvc")
    assert IdentityEntry.is_sensitive("social_security_number")
    assert SSHKeyEntry.is_sensitive("private_key")
    assert not SSHKeyEntry.is_sensitive("public_key")
    assert NoteEntry.SENSITIVE_FIELDS == ("additionnal_note",)
