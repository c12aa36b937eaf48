"""Local storage for campaign contacts, load jobs and zip code timezones."""

from contact_loader.store.contact_store import ContactStore
from contact_loader.store.zip_store import ZipCodeStore

__all__ = ["ContactStore", "ZipCodeStore"]
