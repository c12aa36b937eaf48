"""Authenticated GETs against the Action Network OSDI API.

One call, one request: pages of a collection (lists, lists/<id>/items) and
single person resources. Failures surface as RetrievalError; retrying is the
caller's decision.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from contact_loader.errors import RetrievalError
from contact_loader.models.contact import Person
from contact_loader.models.envelope import PageEnvelope

from .constants import AUTH_HEADER
from .settings import ActionNetworkSettings

logger = logging.getLogger(__name__)


class ActionNetworkClient:
    """
    Thin async client over httpx.
    The API token comes from the organization's resolved settings.
    """

    DEFAULT_HEADERS = {
        "User-Agent": "contact-loader/0.1 (Action Network list import)",
        "Accept": "application/hal+json, application/json",
    }

    def __init__(
        self,
        settings: ActionNetworkSettings,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            settings: Resolved per-organization settings (token, domain, base path)
            client: Optional httpx async client; tests pass one with a MockTransport
        """
        self._settings = settings
        self._client = client or httpx.AsyncClient(
            timeout=settings.timeout_seconds,
            follow_redirects=True,
            headers=self.DEFAULT_HEADERS,
        )

    async def __aenter__(self) -> "ActionNetworkClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def make_url(self, path: str) -> str:
        return f"{self._settings.api_root}/{path.lstrip('/')}"

    def _auth_headers(self) -> dict[str, str]:
        return {AUTH_HEADER: self._settings.api_key or ""}

    async def _get_json(
        self,
        resource: str,
        page: Optional[int],
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        url = self.make_url(resource)
        logger.info("HTTP GET %s%s", url, f"?page={page}" if page is not None else "")
        try:
            resp = await self._client.get(url, params=params, headers=self._auth_headers())
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            logger.error("Error retrieving %s page %s: HTTP %d", resource, page, e.response.status_code)
            raise RetrievalError(resource, page, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Error retrieving %s page %s: %s", resource, page, e)
            raise RetrievalError(resource, page, str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.error("Error decoding %s page %s: %s", resource, page, e)
            raise RetrievalError(resource, page, f"invalid JSON: {e}") from e

    async def fetch_page(self, resource: str, page: int) -> PageEnvelope:
        """Fetch one page of a collection, e.g. fetch_page("lists", 2)."""
        payload = await self._get_json(resource, page, params={"page": page})
        try:
            return PageEnvelope.model_validate(payload)
        except ValidationError as e:
            raise RetrievalError(resource, page, f"unexpected envelope: {e.error_count()} errors") from e

    async def fetch_person(self, identifier: str) -> Person:
        """Fetch people/<identifier>."""
        resource = f"people/{identifier}"
        payload = await self._get_json(resource, None)
        try:
            return Person.model_validate(payload)
        except ValidationError as e:
            raise RetrievalError(resource, None, f"unexpected person: {e.error_count()} errors") from e
