"""Data models for signal templates and synthesized signals."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

DIRECTION_INCREASING = "increasing"
DIRECTION_DECREASING = "decreasing"
DIRECTION_NEUTRAL = "neutral"


@dataclass(frozen=True)
class SignalTemplate:
    """One entry of the signal template registry."""

    id: str
    name: str
    description: str
    keywords: tuple[str, ...]
    markets: tuple[str, ...]
    historical_response: str


@dataclass
class Signal:
    """A scored indicator derived from template matches against the corpus."""

    id: str
    name: str
    description: str
    strength: int
    direction: str
    confidence: int
    affected_markets: list[str] = field(default_factory=list)
    affected_regions: list[str] = field(default_factory=list)
    related_news_ids: list[str] = field(default_factory=list)
    news_count: int = 0
    recent_news_count: int = 0
    strength_label: str = "emerging"
    what_changed: str = ""
    why_it_matters: str = ""
    last_update: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to the JSON shape served to consumers."""
        return {
            "id": self.id,
            "type": self.id,
            "name": self.name,
            "description": self.description,
            "strength": self.strength,
            "direction": self.direction,
            "confidence": self.confidence,
            "affectedMarkets": self.affected_markets,
            "affectedRegions": self.affected_regions,
            "relatedNewsIds": self.related_news_ids,
            "newsCount": self.news_count,
            "recentNewsCount": self.recent_news_count,
            "strengthLabel": self.strength_label,
            "whatChanged": self.what_changed,
            "whyItMatters": self.why_it_matters,
            "lastUpdate": self.last_update.isoformat() if self.last_update else None,
        }
