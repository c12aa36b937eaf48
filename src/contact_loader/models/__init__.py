"""Data models for upstream records, contacts and load jobs."""

from contact_loader.models.contact import (
    NEEDS_MESSAGE,
    ContactList,
    ListItem,
    NormalizedContact,
    Person,
    PostalAddress,
    UpstreamList,
)
from contact_loader.models.envelope import PageEnvelope
from contact_loader.models.job import ClientChoiceData, ContactLoadJob, JobPayload, Organization

__all__ = [
    "NEEDS_MESSAGE",
    "ClientChoiceData",
    "ContactList",
    "ContactLoadJob",
    "JobPayload",
    "ListItem",
    "NormalizedContact",
    "Organization",
    "PageEnvelope",
    "Person",
    "PostalAddress",
    "UpstreamList",
]
