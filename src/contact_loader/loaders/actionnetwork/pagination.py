"""Rate-limited pagination over OSDI collections.

Action Network enforces a hard requests-per-second quota. Page 1 is fetched
alone to learn total_pages/per_page; the remaining pages go out in tranches
of at most `requests_per_window` concurrent requests, and the scheduler holds
each new window back until the cooldown since the previous window's last
dispatch has elapsed.
"""

import asyncio
import logging
import math
import time
from typing import Any, Awaitable, Callable, Iterable, Optional

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from contact_loader.errors import RetrievalError
from contact_loader.models.envelope import PageEnvelope

from .client import ActionNetworkClient
from .constants import DEFAULT_COOLDOWN_SECONDS, DEFAULT_REQUESTS_PER_SECOND
from .settings import RetryPolicy

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]


class RequestScheduler:
    """
    Owns the "next allowed dispatch time" for one upstream quota.

    acquire(n) reserves n request slots in the current window. When the window
    cannot hold n more, it sleeps until cooldown_seconds after the window's last
    dispatch and opens a new window, so any one-second interval sees at most
    requests_per_window dispatches (given cooldown_seconds >= 1).
    """

    def __init__(
        self,
        requests_per_window: int = DEFAULT_REQUESTS_PER_SECOND,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        if requests_per_window < 1:
            raise ValueError("requests_per_window must be at least 1")
        self.requests_per_window = requests_per_window
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._used = 0
        self._next_window_at = 0.0
        self.dispatched = 0

    async def acquire(self, count: int = 1) -> None:
        if count < 1:
            return
        if count > self.requests_per_window:
            raise ValueError(
                f"Cannot reserve {count} slots; window holds {self.requests_per_window}"
            )
        async with self._lock:
            if self._used + count > self.requests_per_window:
                delay = self._next_window_at - self._clock()
                if delay > 0:
                    logger.debug("Rate window full; waiting %.2fs", delay)
                    await self._sleep(delay)
                self._used = 0
            self._used += count
            self.dispatched += count
            self._next_window_at = self._clock() + self.cooldown_seconds


def pages_needed(total_pages: int, per_page: int, max_items: Optional[int] = None) -> int:
    """
    Pages to fetch for a collection. Unbounded when max_items is None or <= 0;
    otherwise enough whole pages to cover max_items, at least 1, at most total_pages.
    """
    if max_items is None or max_items <= 0:
        return total_pages
    return min(total_pages, max(1, math.ceil(max_items / per_page)))


def extract_embedded(extract_key: str, envelopes: Iterable[PageEnvelope]) -> list[dict[str, Any]]:
    """Concatenate embedded items for extract_key; pages without them contribute nothing."""
    items: list[dict[str, Any]] = []
    for envelope in envelopes:
        items.extend(envelope.items(extract_key))
    return items


class PacedPaginator:
    """Fetches every page of a collection under a RequestScheduler."""

    def __init__(
        self,
        client: ActionNetworkClient,
        scheduler: RequestScheduler,
        retry_policy: Optional[RetryPolicy] = None,
        *,
        retry_sleep: Sleep = asyncio.sleep,
    ):
        self._client = client
        self._scheduler = scheduler
        self._retry_policy = retry_policy or RetryPolicy()
        self._retry_sleep = retry_sleep

    @property
    def width(self) -> int:
        return self._scheduler.requests_per_window

    async def _fetch(self, resource: str, page: int) -> PageEnvelope:
        """Fetch one page; retries (if configured) each take a fresh scheduler slot."""
        policy = self._retry_policy
        retrying = AsyncRetrying(
            stop=stop_after_attempt(policy.attempts),
            wait=wait_exponential(multiplier=policy.backoff_seconds),
            retry=retry_if_exception_type(RetrievalError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._retry_sleep,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    await self._scheduler.acquire(1)
                return await self._client.fetch_page(resource, page)
        raise AssertionError("unreachable")  # pragma: no cover

    async def fetch_all_pages(
        self,
        resource: str,
        max_items: Optional[int] = None,
    ) -> list[PageEnvelope]:
        """
        Fetch page 1, then pages 2..pages_needed in tranches.
        Returns envelopes ordered by page number. Any page failure raises
        RetrievalError once its tranche has settled; no partial result.
        """
        await self._scheduler.acquire(1)
        first = await self._fetch(resource, 1)
        needed = pages_needed(first.total_pages, first.per_page, max_items)
        logger.info("%s: fetching %d of %d pages", resource, needed, first.total_pages)

        envelopes: dict[int, PageEnvelope] = {1: first}
        todo = list(range(2, needed + 1))
        for start in range(0, len(todo), self.width):
            tranche = todo[start:start + self.width]
            await self._scheduler.acquire(len(tranche))
            results = await asyncio.gather(
                *(self._fetch(resource, page) for page in tranche),
                return_exceptions=True,
            )
            failures = [r for r in results if isinstance(r, BaseException)]
            if failures:
                logger.error(
                    "Error loading %s from ActionNetwork: %d of %d pages failed in tranche %s",
                    resource,
                    len(failures),
                    len(tranche),
                    tranche,
                )
                raise failures[0]
            envelopes.update(zip(tranche, results))

        return [envelopes[page] for page in sorted(envelopes)]

    async def fetch_items(
        self,
        resource: str,
        extract_key: str,
        max_items: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """fetch_all_pages + extract_embedded."""
        return extract_embedded(extract_key, await self.fetch_all_pages(resource, max_items))
