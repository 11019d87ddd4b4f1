"""Turns raw feed entries into the scored, deduplicated news corpus."""

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from ..config.settings import settings
from . import scorer
from .fetcher import NewsFetcher
from .models import SCOPE_LOCAL, NewsItem, RawFeedItem
from .normalizer import Deduplicator, make_news_id, normalize_timestamp

logger = logging.getLogger(__name__)


class NewsAggregator:
    """
    Builds one cycle's news corpus.

    Per raw item, in order: title check, timestamp window, title-prefix
    dedup, relevance scoring, scope threshold, novelty. The accepted items
    are then sorted newest first and truncated.
    """

    def __init__(
        self,
        fetcher: Optional[NewsFetcher] = None,
        min_relevance: float = settings.min_relevance_score,
        max_items: int = settings.max_corpus_size,
    ):
        self.fetcher = fetcher
        self.min_relevance = min_relevance
        self.max_items = max_items

    async def get_latest(self, now: Optional[datetime] = None) -> list[NewsItem]:
        """Fetch all feeds and return the processed corpus."""
        if self.fetcher is None:
            raise RuntimeError("NewsAggregator has no fetcher configured")
        raw_items = await self.fetcher.fetch_all()
        return self.process(raw_items, now=now)

    def process(self, raw_items: Iterable[RawFeedItem], now: Optional[datetime] = None) -> list[NewsItem]:
        """
        Normalize, score and filter raw items.

        Args:
            raw_items: Raw entries in a deterministic order (descriptor order)
            now: Reference time for the timestamp window (default: current UTC)

        Returns:
            NewsItems sorted by published_at descending, at most max_items
        """
        if now is None:
            now = datetime.now(timezone.utc)

        dedup = Deduplicator()
        accepted: list[NewsItem] = []
        dropped = {"title": 0, "timestamp": 0, "duplicate": 0, "relevance": 0}

        for raw in raw_items:
            if not raw.title:
                dropped["title"] += 1
                continue

            published_at = normalize_timestamp(raw.published, now)
            if published_at is None:
                logger.debug("[AGGREGATOR] Dropping %r: timestamp %r out of window", raw.title, raw.published)
                dropped["timestamp"] += 1
                continue

            if not dedup.accept(raw.title):
                dropped["duplicate"] += 1
                continue

            item = self._build_item(raw, published_at, accepted)
            if raw.descriptor.scope != SCOPE_LOCAL and item.relevance_score < self.min_relevance:
                dropped["relevance"] += 1
                continue

            accepted.append(item)

        accepted.sort(key=lambda n: n.published_at, reverse=True)
        result = accepted[: self.max_items]

        logger.info(
            "[AGGREGATOR] Accepted %d items (dropped: %s)",
            len(result),
            ", ".join(f"{k}={v}" for k, v in dropped.items()),
        )
        return result

    def _build_item(self, raw: RawFeedItem, published_at: datetime, accepted: list[NewsItem]) -> NewsItem:
        text = f"{raw.title} {raw.summary}"
        relevance = scorer.score_relevance(raw.title, raw.summary)
        regions = scorer.detect_regions(text)
        descriptor = raw.descriptor

        return NewsItem(
            id=make_news_id(raw.title, published_at),
            title=raw.title,
            summary=raw.summary,
            source=descriptor.source_name,
            category=descriptor.category,
            link=raw.link,
            published_at=published_at,
            relevance_score=relevance,
            signal_strength=scorer.classify_signal_strength(text),
            regions=tuple(regions),
            exposed_markets=tuple(scorer.exposed_markets(regions)),
            transmission_channel=scorer.transmission_channel(text),
            why_it_matters=scorer.why_it_matters(text, relevance),
            is_novel=scorer.is_novel(raw.title, (n.title for n in accepted)),
            image=raw.image,
            scope=descriptor.scope,
            region=descriptor.region,
            cities=descriptor.cities,
        )
