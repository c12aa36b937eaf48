"""Abstract base class for contact loaders and the host collaborators they use."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, Sequence

from contact_loader.models.contact import NormalizedContact
from contact_loader.models.job import ClientChoiceData, ContactLoadJob, Organization


class ContactSink(Protocol):
    """Persistence for campaign contacts."""

    def delete_contacts_for_campaign(self, campaign_id: int) -> int: ...

    def bulk_insert(self, contacts: Sequence[NormalizedContact], batch_size: int) -> int: ...


class JobReporter(Protocol):
    """Host job system; complete_load is called exactly once per load."""

    def complete_load(
        self,
        job: ContactLoadJob,
        error: Optional[str],
        requested_count: str,
        result_json: Optional[str],
    ) -> None: ...


class TimezoneLookup(Protocol):
    """Maps a postal code to a "<offset>_<has_dst>" string ("" when unknown)."""

    def timezone_for_postal_code(self, postal_code: str) -> str: ...


class BaseContactLoader(ABC):
    """
    Standard interface for contact loaders.
    A loader offers choices to the picker, then loads the chosen source into a campaign.
    """

    name: str = ""

    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name for the picker."""
        pass

    def server_administrator_instructions(self) -> dict[str, Any]:
        """Setup notes for server administrators."""
        return {
            "environment_variables": [],
            "description": "",
            "setup_instructions": "Nothing is necessary to setup since this is default functionality",
        }

    def available(self, organization: Optional[Organization] = None) -> dict[str, Any]:
        """
        Whether the loader is usable for the organization.
        expires_seconds says how long the answer may be cached.
        """
        return {"result": True, "expires_seconds": 0}

    def client_choice_data_cache_key(self, campaign_id: int) -> str:
        """Cache key for get_client_choice_data results."""
        return f"{campaign_id}"

    @abstractmethod
    async def get_client_choice_data(self, organization: Optional[Organization]) -> ClientChoiceData:
        """Data the picker renders; never raises for upstream failures."""
        pass

    @abstractmethod
    async def process_contact_load(
        self,
        job: ContactLoadJob,
        max_contacts: Optional[int],
        organization: Optional[Organization],
    ) -> int:
        """
        Replace the campaign's contacts with the chosen source.
        Must report completion (or failure) to the job system. Returns final count.
        """
        pass
