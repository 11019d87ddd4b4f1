"""Data models for scenario definitions and their per-cycle state."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class MarketImplications:
    bullish: tuple[str, ...] = ()
    bearish: tuple[str, ...] = ()
    neutral: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "bullish": list(self.bullish),
            "bearish": list(self.bearish),
            "neutral": list(self.neutral),
        }


@dataclass(frozen=True)
class PathDefinition:
    """Static definition of one scenario path."""

    id: str
    name: str
    description: str
    base_probability: int
    triggers: tuple[str, ...]
    signposts: tuple[str, ...] = ()
    market_implications: MarketImplications = field(default_factory=MarketImplications)


@dataclass(frozen=True)
class ScenarioDefinition:
    """Static definition of a scenario and its mutually exclusive paths."""

    id: str
    theme: str
    title: str
    paths: tuple[PathDefinition, ...]


@dataclass
class ScenarioPath:
    """A path with its probability for the current cycle."""

    definition: PathDefinition
    current_probability: int
    match_count: int = 0

    @property
    def id(self) -> str:
        return self.definition.id

    def to_dict(self) -> dict:
        d = self.definition
        return {
            "id": d.id,
            "name": d.name,
            "description": d.description,
            "baseProbability": d.base_probability,
            "currentProbability": self.current_probability,
            "triggers": list(d.triggers),
            "signposts": list(d.signposts),
            "marketImplications": d.market_implications.to_dict(),
            "matchCount": self.match_count,
        }


@dataclass
class Scenario:
    """Scenario state produced by one reweighting pass."""

    id: str
    theme: str
    title: str
    paths: list[ScenarioPath]
    leading_path: str
    related_news: list[dict] = field(default_factory=list)
    active_signals: list[str] = field(default_factory=list)
    last_update: Optional[datetime] = None

    def path(self, path_id: str) -> Optional[ScenarioPath]:
        for p in self.paths:
            if p.id == path_id:
                return p
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "theme": self.theme,
            "title": self.title,
            "paths": [p.to_dict() for p in self.paths],
            "leadingPath": self.leading_path,
            "relatedNews": self.related_news,
            "activeSignals": self.active_signals,
            "lastUpdate": self.last_update.isoformat() if self.last_update else None,
        }
