"""Upstream person/list records and the normalized contact row."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

NEEDS_MESSAGE = "needsMessage"


class PostalAddress(BaseModel):
    """Postal address attached to an upstream person."""

    model_config = ConfigDict(extra="allow")

    primary: bool = False
    postal_code: Optional[str] = None


class Person(BaseModel):
    """Person resource (people/<id>) as returned by Action Network."""

    model_config = ConfigDict(extra="allow")

    identifiers: list[str] = Field(default_factory=list)
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    postal_addresses: list[PostalAddress] = Field(default_factory=list)


class ListItem(BaseModel):
    """List-membership item; not every item references a full person record."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    person_id: Optional[str] = Field(default=None, alias="action_network:person_id")


class UpstreamList(BaseModel):
    """List resource as returned by the lists collection."""

    model_config = ConfigDict(extra="allow")

    identifiers: list[str] = Field(default_factory=list)
    name: Optional[str] = None
    title: Optional[str] = None


class ContactList(BaseModel):
    """A list the user can choose to import."""

    name: str
    identifier: str


class NormalizedContact(BaseModel):
    """Row for the campaign_contact table."""

    first_name: str = ""
    last_name: str = ""
    cell: str
    zip: str
    timezone_offset: str = ""
    message_status: Literal["needsMessage"] = NEEDS_MESSAGE
    campaign_id: int
