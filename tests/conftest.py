"""Pytest fixtures for contact-loader tests."""

import asyncio
from typing import Any, Optional

import httpx
import pytest

from contact_loader.loaders.actionnetwork import ActionNetworkClient, ActionNetworkSettings
from contact_loader.models.job import Organization

API_ROOT = "/api/v2/"


def make_person(
    person_id: str = "p-1",
    phone: Optional[str] = "5551234567",
    given_name: str = "Ada",
    family_name: str = "Lovelace",
    addresses: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    """Person resource shaped like people/<id>."""
    custom_fields: dict[str, Any] = {"Employer": "Analytical Engines"}
    if phone is not None:
        custom_fields["Phone"] = phone
    return {
        "identifiers": [f"action_network:{person_id}"],
        "given_name": given_name,
        "family_name": family_name,
        "custom_fields": custom_fields,
        "postal_addresses": addresses
        if addresses is not None
        else [{"primary": True, "postal_code": "60601", "locality": "Chicago"}],
    }


def make_list_item(person_id: Optional[str]) -> dict[str, Any]:
    """List-membership item; None gives an item without a person reference."""
    item: dict[str, Any] = {"identifiers": [f"action_network:item-{person_id}"]}
    if person_id is not None:
        item["action_network:person_id"] = person_id
    return item


def make_list(name: Optional[str], identifier: Optional[str]) -> dict[str, Any]:
    """List resource as embedded under osdi:lists."""
    identifiers = ["osdi_sample_system:123"]
    if identifier is not None:
        identifiers.append(f"action_network:{identifier}")
    data: dict[str, Any] = {"identifiers": identifiers, "title": "Untitled"}
    if name is not None:
        data["name"] = name
    return data


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeActionNetwork:
    """
    In-memory OSDI API for httpx.MockTransport.
    collections maps a resource path (e.g. "lists/abc/items") to its pages of items.
    """

    def __init__(
        self,
        collections: Optional[dict[str, list[list[dict[str, Any]]]]] = None,
        people: Optional[dict[str, dict[str, Any]]] = None,
        *,
        per_page: int = 25,
        clock: Optional[FakeClock] = None,
    ) -> None:
        self.collections = collections or {}
        self.people = people or {}
        self.per_page = per_page
        self.clock = clock
        self.requests: list[httpx.Request] = []
        self.dispatch_times: list[float] = []
        self.fail_pages: set[tuple[str, int]] = set()
        self.fail_people: set[str] = set()
        self.in_flight = 0
        self.max_in_flight = 0

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def page_requests(self, resource: str) -> list[int]:
        return [
            int(r.url.params["page"])
            for r in self.requests
            if r.url.path == API_ROOT + resource and "page" in r.url.params
        ]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.clock is not None:
            self.dispatch_times.append(self.clock())
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            for _ in range(3):
                await asyncio.sleep(0)
            return self._respond(request)
        finally:
            self.in_flight -= 1

    def _respond(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if not path.startswith(API_ROOT):
            return httpx.Response(404, json={"error": "not found"})
        resource = path[len(API_ROOT):]

        if resource.startswith("people/"):
            person_id = resource[len("people/"):]
            if person_id in self.fail_people or person_id not in self.people:
                return httpx.Response(500, json={"error": "boom"})
            return httpx.Response(200, json=self.people[person_id])

        if resource not in self.collections:
            return httpx.Response(404, json={"error": "not found"})
        page = int(request.url.params.get("page", "1"))
        if (resource, page) in self.fail_pages:
            return httpx.Response(503, text="Service Unavailable")
        pages = self.collections[resource]
        items = pages[page - 1] if page <= len(pages) else []
        body: dict[str, Any] = {
            "total_pages": max(1, len(pages)),
            "per_page": self.per_page,
            "page": page,
        }
        if items:
            key = resource.rsplit("/", 1)[-1]
            body["_embedded"] = {f"osdi:{key}": items}
        return httpx.Response(200, json=body)


@pytest.fixture
def organization() -> Organization:
    """Organization carrying its own API token."""
    return Organization(id=7, name="Test Org", features={"ACTION_NETWORK_API_KEY": "secret-token"})


@pytest.fixture
def settings() -> ActionNetworkSettings:
    return ActionNetworkSettings(api_key="secret-token")


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


def client_for(api: FakeActionNetwork, settings: ActionNetworkSettings) -> ActionNetworkClient:
    """ActionNetworkClient talking to the fake API."""
    return ActionNetworkClient(settings, client=httpx.AsyncClient(transport=api.transport()))
