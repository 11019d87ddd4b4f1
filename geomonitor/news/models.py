"""Data models for feed descriptors, raw feed entries and scored news items."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

SCOPE_INTERNATIONAL = "international"
SCOPE_REGIONAL = "regional"
SCOPE_LOCAL = "local"
SCOPES = (SCOPE_INTERNATIONAL, SCOPE_REGIONAL, SCOPE_LOCAL)


@dataclass(frozen=True)
class FeedDescriptor:
    """A feed source from feeds.json."""

    endpoint: str
    source_name: str
    category: str
    scope: str = SCOPE_INTERNATIONAL
    region: Optional[str] = None
    cities: tuple[str, ...] = ()
    quick: bool = False


@dataclass
class RawFeedItem:
    """Unprocessed entry from a single feed fetch."""

    title: str
    summary: str
    link: str
    published: Any  # struct_time, datetime or string, validated later
    descriptor: FeedDescriptor
    image: Optional[str] = None


@dataclass(frozen=True)
class NewsItem:
    """Normalized, scored news item. Never mutated after creation."""

    id: str
    title: str
    summary: str
    source: str
    category: str
    link: str
    published_at: datetime
    relevance_score: float
    signal_strength: str  # confirmed | building | early
    regions: tuple[str, ...] = ()
    exposed_markets: tuple[str, ...] = ()
    transmission_channel: str = ""
    why_it_matters: str = ""
    is_novel: bool = True
    image: Optional[str] = None
    scope: str = SCOPE_INTERNATIONAL
    region: Optional[str] = None
    cities: tuple[str, ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        """Title and summary joined, as scanned by every keyword table."""
        return f"{self.title} {self.summary}"

    @property
    def is_signal(self) -> bool:
        return self.relevance_score >= 5

    def to_dict(self) -> dict:
        """Convert to the JSON shape served to consumers."""
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "source": self.source,
            "category": self.category,
            "link": self.link,
            "publishedAt": self.published_at.isoformat(),
            "relevanceScore": self.relevance_score,
            "signalStrength": self.signal_strength,
            "regions": list(self.regions),
            "exposedMarkets": list(self.exposed_markets),
            "transmissionChannel": self.transmission_channel,
            "whyItMatters": self.why_it_matters,
            "isNovel": self.is_novel,
            "isSignal": self.is_signal,
            "image": self.image,
            "scope": self.scope,
            "region": self.region,
            "cities": list(self.cities),
        }
