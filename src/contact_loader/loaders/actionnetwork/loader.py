"""Action Network contact loader.

Offers the organization's Action Network lists as choices and loads the
people on a chosen list into a campaign:
1. Parse the job payload (nothing is touched when it is malformed)
2. Delete the campaign's existing contacts
3. Page through lists/<id>/items under the rate limit, then fetch each
   referenced person; one bad person never aborts the batch
4. Bulk insert contacts in batches of 100 and report completion
"""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import httpx
from pydantic import ValidationError

from contact_loader.config import ConfigLookup, get_config
from contact_loader.errors import ConfigurationError, ContactLoaderError
from contact_loader.loaders.base import BaseContactLoader, ContactSink, JobReporter, TimezoneLookup
from contact_loader.models.contact import ContactList, ListItem, NormalizedContact
from contact_loader.models.job import ClientChoiceData, ContactLoadJob, Organization

from . import constants as c
from .client import ActionNetworkClient
from .pagination import Clock, PacedPaginator, RequestScheduler, Sleep
from .parsers import contact_lists_from_items, make_contact, parse_job_payload
from .settings import ActionNetworkSettings

logger = logging.getLogger(__name__)

CHOICES_ERROR = "Failed to load choices from ActionNetwork"


@dataclass
class _Session:
    """Client, scheduler and paginator shared by every request of one operation."""

    client: ActionNetworkClient
    scheduler: RequestScheduler
    paginator: PacedPaginator


class ActionNetworkLoader(BaseContactLoader):
    """Loads campaign contacts from an Action Network list."""

    name = "actionnetwork"

    def __init__(
        self,
        *,
        sink: Optional[ContactSink] = None,
        reporter: Optional[JobReporter] = None,
        timezones: Optional[TimezoneLookup] = None,
        config: ConfigLookup = get_config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleep] = None,
    ):
        """
        Args:
            sink: Contact persistence (required for process_contact_load)
            reporter: Job system completion callback (required for process_contact_load)
            timezones: Postal code -> timezone lookup; contacts get "" when omitted
            config: Organization-scoped config lookup
            transport: Optional httpx transport (tests use httpx.MockTransport)
            clock, sleep: Scheduler time source and sleeper; tests inject fakes
        """
        self._sink = sink
        self._reporter = reporter
        self._timezones = timezones
        self._config = config
        self._transport = transport
        self._clock = clock
        self._sleep = sleep

    def display_name(self) -> str:
        return "Action Network"

    def settings_for(self, organization: Optional[Organization]) -> ActionNetworkSettings:
        return ActionNetworkSettings.from_organization(organization, self._config)

    def server_administrator_instructions(self) -> dict:
        return {
            "environment_variables": [c.API_KEY, c.DOMAIN, c.BASE_URL, c.CACHE_TTL],
            "description": "Imports people from an Action Network list.",
            "setup_instructions": (
                f"Set {c.API_KEY} for each organization (organization feature or environment variable)."
            ),
        }

    def available(self, organization: Optional[Organization] = None) -> dict:
        return {
            "result": bool(self.settings_for(organization).api_key),
            "expires_seconds": 0,
        }

    def _timezone_for(self, postal_code: str) -> str:
        if self._timezones is None:
            return ""
        return self._timezones.timezone_for_postal_code(postal_code)

    @asynccontextmanager
    async def _session(self, organization: Optional[Organization]) -> AsyncIterator[_Session]:
        settings = self.settings_for(organization)
        scheduler_kwargs = {}
        if self._clock is not None:
            scheduler_kwargs["clock"] = self._clock
        if self._sleep is not None:
            scheduler_kwargs["sleep"] = self._sleep
        scheduler = RequestScheduler(
            settings.requests_per_second,
            settings.cooldown_seconds,
            **scheduler_kwargs,
        )
        http_client = None
        if self._transport is not None:
            http_client = httpx.AsyncClient(
                transport=self._transport,
                timeout=settings.timeout_seconds,
                headers=ActionNetworkClient.DEFAULT_HEADERS,
            )
        async with ActionNetworkClient(settings, client=http_client) as client:
            paginator = PacedPaginator(
                client,
                scheduler,
                settings.retry,
                retry_sleep=self._sleep or asyncio.sleep,
            )
            yield _Session(client=client, scheduler=scheduler, paginator=paginator)

    async def get_contact_lists(self, organization: Optional[Organization]) -> list[ContactList]:
        """All of the organization's lists as {name, identifier}, sorted by name."""
        async with self._session(organization) as session:
            items = await session.paginator.fetch_items("lists", "lists")
        return contact_lists_from_items(items)

    async def get_client_choice_data(self, organization: Optional[Organization]) -> ClientChoiceData:
        """List choices for the picker, or a non-cacheable error payload."""
        try:
            settings = self.settings_for(organization)
            lists = await self.get_contact_lists(organization)
        except (ContactLoaderError, ValidationError) as e:
            logger.error("Error loading choices from ActionNetwork: %s", e)
            return ClientChoiceData(data=json.dumps({"error": CHOICES_ERROR}))
        return ClientChoiceData(
            data=json.dumps({"items": [choice.model_dump() for choice in lists]}),
            expires_seconds=settings.cache_ttl,
        )

    async def resolve_contacts(
        self,
        organization: Optional[Organization],
        campaign_id: int,
        list_identifier: str,
        max_contacts: Optional[int] = None,
    ) -> list[NormalizedContact]:
        """
        Contacts for the people on a list.
        Page failures abort; person failures are logged and skipped.
        """
        bounded = max_contacts is not None and max_contacts > 0
        async with self._session(organization) as session:
            items = await session.paginator.fetch_items(
                f"lists/{list_identifier}/items",
                "items",
                max_contacts if bounded else None,
            )
            if bounded:
                items = items[:max_contacts]

            contacts: list[NormalizedContact] = []
            for raw in items:
                try:
                    person_id = ListItem.model_validate(raw).person_id
                    if not person_id:
                        logger.debug("List item has no person reference; skipping")
                        continue
                    await session.scheduler.acquire(1)
                    person = await session.client.fetch_person(person_id)
                    contacts.append(make_contact(person, campaign_id, self._timezone_for))
                except (ContactLoaderError, ValidationError) as e:
                    logger.warning("person error: %s", e)
        return contacts

    def _require_store(self) -> tuple[ContactSink, JobReporter]:
        if self._sink is None or self._reporter is None:
            raise ConfigurationError("Contact loads need a contact sink and a job reporter")
        return self._sink, self._reporter

    async def process_contact_load(
        self,
        job: ContactLoadJob,
        max_contacts: Optional[int],
        organization: Optional[Organization],
    ) -> int:
        """Replace the campaign's contacts with the chosen list; returns the final count."""
        sink, reporter = self._require_store()
        requested_count = ""
        try:
            payload = parse_job_payload(job.payload)
            requested_count = str(payload.requestContactCount)

            deleted = await asyncio.to_thread(sink.delete_contacts_for_campaign, job.campaign_id)
            logger.info("Deleted %d existing contacts for campaign %d", deleted, job.campaign_id)

            contacts = await self.resolve_contacts(
                organization,
                job.campaign_id,
                payload.listIdentifier,
                max_contacts,
            )
            logger.info("num contacts: %d", len(contacts))

            await asyncio.to_thread(sink.bulk_insert, contacts, c.INSERT_BATCH_SIZE)
        except Exception as e:
            logger.exception("Contact load failed for job %d", job.id)
            await asyncio.to_thread(
                reporter.complete_load, job, str(e) or type(e).__name__, requested_count, None
            )
            raise

        await asyncio.to_thread(
            reporter.complete_load,
            job,
            None,
            requested_count,
            json.dumps({"finalCount": len(contacts)}),
        )
        return len(contacts)
