"""Tests for ActionNetworkClient."""

import asyncio

import httpx
import pytest

from contact_loader.errors import RetrievalError
from contact_loader.loaders.actionnetwork import ActionNetworkClient, ActionNetworkSettings

from conftest import FakeActionNetwork, client_for, make_list_item, make_person


def _run(coro):
    return asyncio.run(coro)


class TestActionNetworkClientFetchPage:
    """Tests for fetch_page."""

    def test_builds_url_with_page_and_auth_header(self, settings: ActionNetworkSettings) -> None:
        api = FakeActionNetwork({"lists": [[{"name": "A"}]]})

        async def run():
            async with client_for(api, settings) as client:
                return await client.fetch_page("lists", 1)

        envelope = _run(run())
        request = api.requests[0]
        assert str(request.url) == "https://actionnetwork.org/api/v2/lists?page=1"
        assert request.headers["OSDI-API-Token"] == "secret-token"
        assert request.method == "GET"
        assert envelope.total_pages == 1
        assert envelope.items("lists") == [{"name": "A"}]

    def test_domain_and_base_url_overrides(self) -> None:
        settings = ActionNetworkSettings(
            api_key="k",
            domain="https://an.example.org/",
            base_url="/osdi/v9/",
        )
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"total_pages": 1, "per_page": 25})

        async def run():
            http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            async with ActionNetworkClient(settings, client=http) as client:
                await client.fetch_page("lists/xyz/items", 3)

        _run(run())
        assert seen == ["https://an.example.org/osdi/v9/lists/xyz/items?page=3"]

    def test_http_error_raises_retrieval_error(self, settings: ActionNetworkSettings) -> None:
        api = FakeActionNetwork({"lists": [[make_list_item("a")]]})
        api.fail_pages.add(("lists", 1))

        async def run():
            async with client_for(api, settings) as client:
                await client.fetch_page("lists", 1)

        with pytest.raises(RetrievalError, match="lists page 1") as exc_info:
            _run(run())
        assert exc_info.value.reason == "HTTP 503"

    def test_non_json_body_raises_retrieval_error(self, settings: ActionNetworkSettings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        async def run():
            http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            async with ActionNetworkClient(settings, client=http) as client:
                await client.fetch_page("lists", 2)

        with pytest.raises(RetrievalError) as exc_info:
            _run(run())
        assert exc_info.value.page == 2
        assert "invalid JSON" in exc_info.value.reason

    def test_transport_error_raises_retrieval_error(self, settings: ActionNetworkSettings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async def run():
            http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            async with ActionNetworkClient(settings, client=http) as client:
                await client.fetch_page("lists", 1)

        with pytest.raises(RetrievalError, match="connection refused"):
            _run(run())

    def test_unexpected_envelope_raises_retrieval_error(self, settings: ActionNetworkSettings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=["not", "an", "envelope"])

        async def run():
            http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            async with ActionNetworkClient(settings, client=http) as client:
                await client.fetch_page("lists", 1)

        with pytest.raises(RetrievalError, match="unexpected envelope"):
            _run(run())


class TestActionNetworkClientFetchPerson:
    """Tests for fetch_person."""

    def test_fetches_person(self, settings: ActionNetworkSettings) -> None:
        api = FakeActionNetwork(people={"p-1": make_person("p-1")})

        async def run():
            async with client_for(api, settings) as client:
                return await client.fetch_person("p-1")

        person = _run(run())
        assert str(api.requests[0].url) == "https://actionnetwork.org/api/v2/people/p-1"
        assert person.given_name == "Ada"
        assert person.custom_fields["Phone"] == "5551234567"
        assert person.postal_addresses[0].primary is True

    def test_missing_person_raises_retrieval_error(self, settings: ActionNetworkSettings) -> None:
        api = FakeActionNetwork()

        async def run():
            async with client_for(api, settings) as client:
                await client.fetch_person("nobody")

        with pytest.raises(RetrievalError) as exc_info:
            _run(run())
        assert exc_info.value.resource == "people/nobody"
        assert exc_info.value.page is None

    def test_invalid_url_raises_retrieval_error(self, settings: ActionNetworkSettings) -> None:
        api = FakeActionNetwork()

        async def run():
            async with client_for(api, settings) as client:
                await client.fetch_person("bad\x00id")

        with pytest.raises(RetrievalError) as exc_info:
            _run(run())
        assert exc_info.value.resource == "people/bad\x00id"
        assert api.requests == []
