"""Exception types raised by contact loaders."""

from typing import Optional


class ContactLoaderError(Exception):
    """Base class for all contact loader failures."""


class ConfigurationError(ContactLoaderError):
    """Raised when a configuration value is missing or malformed."""


class RetrievalError(ContactLoaderError):
    """
    Transport or decode failure for one page or one single resource.
    page is None for single-resource lookups (e.g. a person).
    """

    def __init__(self, resource: str, page: Optional[int], reason: str):
        self.resource = resource
        self.page = page
        self.reason = reason
        where = f"{resource} page {page}" if page is not None else resource
        super().__init__(f"Error retrieving {where} from ActionNetwork: {reason}")


class MissingFieldError(ContactLoaderError):
    """Raised when an upstream record lacks a field required for normalization."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Contact missing {field} field")


class ParseError(ContactLoaderError):
    """Raised when a contact load job payload cannot be parsed."""
