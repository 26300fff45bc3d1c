"""Vault entry kinds as delivered by the desktop backend."""

from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class EntryType(str, Enum):
    """Kind of vault entry."""
    LOGIN = "login"
    CARD = "card"
    IDENTITY = "identity"
    NOTE = "note"
    SSHKEY = "sshkey"


class BaseEntry(BaseModel):
    """Fields shared by every entry kind."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    entry_name: str
    folder_id: Optional[str] = None
    additionnal_note: Optional[str] = None
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    trashed: bool = False
    is_draft: bool = False
    is_favorite: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    # Fields the UI masks by default; overridden per kind
    SENSITIVE_FIELDS: ClassVar[tuple[str, ...]] = ("additionnal_note",)

    def field_value(self, field_name: str) -> Any:
        """
        Generic field accessor. Custom fields are looked up after the fixed set.

        Raises:
            KeyError if the entry has no such field
        """
        if field_name in type(self).model_fields:
            return getattr(self, field_name)
        if field_name in self.custom_fields:
            return self.custom_fields[field_name]
        raise KeyError(field_name)

    @property
    def kind(self) -> EntryType:
        return EntryType(getattr(self, "type"))

    @classmethod
    def is_sensitive(cls, field_name: str) -> bool:
        return field_name in cls.SENSITIVE_FIELDS


class LoginEntry(BaseEntry):
    type: Literal["login"] = "login"
    user_name: str = ""
    password: str = ""
    web_site: Optional[str] = None

    SENSITIVE_FIELDS = ("password", "additionnal_note")


class CardEntry(BaseEntry):
    type: Literal["card"] = "card"
    owner: str = ""
    number: str = ""
    expiration: str = ""
    cvc: str = ""

    SENSITIVE_FIELDS = ("number", "cvc", "additionnal_note")


class IdentityEntry(BaseEntry):
    type: Literal["identity"] = "identity"
    genre: Optional[str] = None
    firstname: Optional[str] = None
    second_firstname: Optional[str] = None
    lastname: Optional[str] = None
    username: Optional[str] = None
    company: Optional[str] = None
    social_security_number: Optional[str] = None
    ID_number: Optional[str] = None
    driver_license: Optional[str] = None
    mail: Optional[str] = None
    telephone: Optional[str] = None
    address_one: Optional[str] = None
    address_two: Optional[str] = None
    address_three: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

    SENSITIVE_FIELDS = (
        "social_security_number",
        "ID_number",
        "driver_license",
        "additionnal_note",
    )


class NoteEntry(BaseEntry):
    type: Literal["note"] = "note"


class SSHKeyEntry(BaseEntry):
    type: Literal["sshkey"] = "sshkey"
    private_key: str = ""
    public_key: str = ""
    e_fingerprint: str = ""

    SENSITIVE_FIELDS = ("private_key", "additionnal_note")


VaultEntry = Annotated[
    Union[LoginEntry, CardEntry, IdentityEntry, NoteEntry, SSHKeyEntry],
    Field(discriminator="type"),
]

_entry_adapter = TypeAdapter(VaultEntry)


def parse_entry(data: dict) -> BaseEntry:
    """Build the right entry kind from a backend payload (dispatches on ``type``)."""
    return _entry_adapter.validate_python(data)
