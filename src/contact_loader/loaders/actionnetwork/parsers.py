"""Parsers turning Action Network records into list choices and contact rows."""

import json
import logging
import re
from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError

from contact_loader.errors import MissingFieldError, ParseError
from contact_loader.models.contact import ContactList, NormalizedContact, Person, UpstreamList
from contact_loader.models.job import JobPayload

from .constants import COUNTRY_CODE_PREFIX, FALLBACK_POSTAL_CODE, IDENTIFIER_PATTERN, PHONE_FIELD

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(IDENTIFIER_PATTERN)
_E164_US_RE = re.compile(r"^\+1\d{10}$")


def extract_identifier(identifiers: Iterable[str]) -> Optional[str]:
    """
    Return the Action Network ID from the first "action_network:<id>" identifier.
    Other systems' identifiers (e.g. "osdi_sample_system:...") are ignored.
    """
    for candidate in identifiers:
        m = _IDENTIFIER_RE.search(candidate or "")
        if m and m.group(1):
            return m.group(1)
    return None


def contact_lists_from_items(items: Iterable[dict[str, Any]]) -> list[ContactList]:
    """Build list choices sorted case-insensitively by name; lists without name or ID are dropped."""
    choices: list[ContactList] = []
    for item in items:
        upstream = UpstreamList.model_validate(item)
        identifier = extract_identifier(upstream.identifiers)
        if not identifier or not upstream.name:
            continue
        choices.append(ContactList(name=upstream.name, identifier=identifier))
    return sorted(choices, key=lambda choice: choice.name.casefold())


def primary_postal_code(person: Person) -> str:
    """Postal code of the first primary address; Boston when none is flagged primary."""
    for address in person.postal_addresses:
        if address.primary and address.postal_code:
            return address.postal_code
    return FALLBACK_POSTAL_CODE


def make_contact(
    person: Person,
    campaign_id: int,
    timezone_lookup: Callable[[str], str],
) -> NormalizedContact:
    """
    Convert a person into a campaign contact.
    The cell is "+1" + the Phone custom field verbatim; no digit stripping.
    """
    phone = person.custom_fields.get(PHONE_FIELD)
    if phone is None or not str(phone).strip():
        raise MissingFieldError(PHONE_FIELD)

    cell = f"{COUNTRY_CODE_PREFIX}{phone}"
    if not _E164_US_RE.match(cell):
        logger.warning("Cell %r is not a +1 ten-digit number; loading as-is", cell)

    postal_code = primary_postal_code(person)
    return NormalizedContact(
        first_name=person.given_name or "",
        last_name=person.family_name or "",
        cell=cell,
        zip=postal_code,
        timezone_offset=timezone_lookup(postal_code),
        campaign_id=campaign_id,
    )


def parse_job_payload(payload: str) -> JobPayload:
    """Parse the picker's JSON payload; ParseError when it is not usable."""
    try:
        data = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as e:
        raise ParseError(f"Job payload is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseError("Job payload must be a JSON object")
    try:
        return JobPayload.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"Job payload is invalid: {e.error_count()} errors") from e
