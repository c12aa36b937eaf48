"""Contact loaders for campaign contact ingestion."""

from contact_loader.loaders.base import BaseContactLoader, ContactSink, JobReporter, TimezoneLookup
from contact_loader.loaders.registry import LoaderRegistry

__all__ = ["BaseContactLoader", "ContactSink", "JobReporter", "LoaderRegistry", "TimezoneLookup"]
