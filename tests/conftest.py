from datetime import datetime, timedelta, timezone

import pytest

from geomonitor.news import scorer
from geomonitor.news.models import SCOPE_INTERNATIONAL, FeedDescriptor, NewsItem, RawFeedItem
from geomonitor.news.normalizer import make_news_id

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_item():
    """Build a scored NewsItem; relevance and classifications default to the scorer's."""

    def _make(
        title,
        summary="",
        minutes_ago=30,
        relevance=None,
        source="Reuters",
        signal_strength=None,
        scope=SCOPE_INTERNATIONAL,
        region=None,
        cities=(),
    ):
        text = f"{title} {summary}"
        published_at = NOW - timedelta(minutes=minutes_ago)
        score = scorer.score_relevance(title, summary) if relevance is None else relevance
        regions = scorer.detect_regions(text)
        return NewsItem(
            id=make_news_id(title, published_at),
            title=title,
            summary=summary,
            source=source,
            category="world",
            link=f"https://example.com/{abs(hash(title))}",
            published_at=published_at,
            relevance_score=score,
            signal_strength=signal_strength or scorer.classify_signal_strength(text),
            regions=tuple(regions),
            exposed_markets=tuple(scorer.exposed_markets(regions)),
            transmission_channel=scorer.transmission_channel(text),
            why_it_matters=scorer.why_it_matters(text, score),
            scope=scope,
            region=region,
            cities=tuple(cities),
        )

    return _make


@pytest.fixture
def make_raw():
    """Build a RawFeedItem from a throwaway descriptor."""

    def _make(title, summary="", published=None, scope=SCOPE_INTERNATIONAL, source="Reuters", **descriptor_kwargs):
        descriptor = FeedDescriptor(
            endpoint=f"https://feeds.example.com/{source.lower()}",
            source_name=source,
            category="world",
            scope=scope,
            **descriptor_kwargs,
        )
        return RawFeedItem(
            title=title,
            summary=summary,
            link="https://example.com/story",
            published=published if published is not None else NOW - timedelta(minutes=5),
            descriptor=descriptor,
        )

    return _make
