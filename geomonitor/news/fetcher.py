"""RSS feed fetching for news aggregation.

Fetches every configured feed concurrently. Each fetch is isolated: a
timeout, HTTP error or malformed payload on one feed is logged and yields
an empty list without affecting the others.
"""

import asyncio
import logging
from typing import Optional

import feedparser
import httpx

from ..config.settings import settings
from .models import FeedDescriptor, RawFeedItem
from .normalizer import extract_entry, parse_timestamp

logger = logging.getLogger(__name__)


class FeedFetchError(Exception):
    """A feed responded but its payload could not be parsed."""


class NewsFetcher:
    """
    Fetches raw entries from a list of feed descriptors.

    Concurrency is bounded by a semaphore; every fetch carries its own
    timeout and there is no cross-feed cancellation.
    """

    def __init__(
        self,
        feeds: list[FeedDescriptor],
        timeout: float = settings.fetch_timeout_seconds,
        concurrency: int = settings.fetch_concurrency,
        max_items_per_feed: int = settings.max_items_per_feed,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize news fetcher.

        Args:
            feeds: Feed descriptors, in declaration order
            timeout: Per-feed timeout in seconds
            concurrency: Maximum number of feeds fetched at once
            max_items_per_feed: Most recent entries kept per feed
            client: Optional shared HTTP client (a new one is opened per call otherwise)
        """
        self.feeds = feeds
        self.timeout = timeout
        self.concurrency = concurrency
        self.max_items_per_feed = max_items_per_feed
        self._client = client

    async def fetch_all(self) -> list[RawFeedItem]:
        """
        Fetch entries from all configured feeds concurrently.

        Results are written only after each fetch resolves and are flattened
        in descriptor order, so the output order does not depend on which
        feed finished first.

        Returns:
            Raw items from all feeds that succeeded
        """
        if not self.feeds:
            return []

        semaphore = asyncio.Semaphore(self.concurrency)

        if self._client is not None:
            results = await self._gather(self._client, semaphore)
        else:
            async with httpx.AsyncClient(
                follow_redirects=True,
                headers={"User-Agent": settings.user_agent},
            ) as client:
                results = await self._gather(client, semaphore)

        items: list[RawFeedItem] = []
        failed_feeds = 0
        for feed_items in results:
            if feed_items is None:
                failed_feeds += 1
                continue
            items.extend(feed_items)

        logger.info(
            "[FETCHER] Fetched %d raw items from %d feeds (%d failed)",
            len(items),
            len(self.feeds) - failed_feeds,
            failed_feeds,
        )
        return items

    async def _gather(
        self,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
    ) -> list[Optional[list[RawFeedItem]]]:
        tasks = [self._fetch_guarded(client, semaphore, feed) for feed in self.feeds]
        return await asyncio.gather(*tasks)

    async def _fetch_guarded(
        self,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
        feed: FeedDescriptor,
    ) -> Optional[list[RawFeedItem]]:
        """Fetch one feed; returns None on any handled failure."""
        async with semaphore:
            try:
                return await asyncio.wait_for(
                    self.fetch_feed(client, feed), timeout=self.timeout
                )
            except asyncio.TimeoutError:
                logger.warning("[FETCHER] Timed out fetching %s (%s)", feed.source_name, feed.endpoint)
            except httpx.HTTPError as e:
                logger.warning("[FETCHER] Failed to fetch %s: %s", feed.source_name, e)
            except FeedFetchError as e:
                logger.warning("[FETCHER] Malformed feed from %s: %s", feed.source_name, e)
            except Exception:
                logger.exception("[FETCHER] Unexpected error fetching %s", feed.source_name)
            return None

    async def fetch_feed(self, client: httpx.AsyncClient, feed: FeedDescriptor) -> list[RawFeedItem]:
        """
        Fetch and parse a single RSS/Atom feed.

        Args:
            client: HTTP client
            feed: Feed descriptor

        Returns:
            Up to max_items_per_feed most recent raw items

        Raises:
            httpx.HTTPError: On transport or status errors
            FeedFetchError: If the payload is not a usable feed
        """
        response = await client.get(feed.endpoint, timeout=self.timeout)
        response.raise_for_status()

        loop = asyncio.get_running_loop()
        parsed = await loop.run_in_executor(None, feedparser.parse, response.content)

        if parsed.bozo and not parsed.entries:
            raise FeedFetchError(str(parsed.get("bozo_exception", "unparsable payload")))

        return self._most_recent(parsed.entries, feed)

    def _most_recent(self, entries: list, feed: FeedDescriptor) -> list[RawFeedItem]:
        """Extract entries and keep the newest ones (undated entries sort last)."""
        raw = [item for item in (extract_entry(e, feed) for e in entries) if item is not None]

        def sort_key(item: RawFeedItem) -> float:
            dt = parse_timestamp(item.published)
            return -dt.timestamp() if dt else float("inf")

        raw.sort(key=sort_key)
        return raw[: self.max_items_per_feed]

    def fetch_sync(self) -> list[RawFeedItem]:
        """Synchronous wrapper for fetch_all()."""
        return asyncio.run(self.fetch_all())
