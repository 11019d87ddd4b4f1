"""What-matters-now summary assembled from news, signals and scenarios."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from ..news.models import NewsItem
from ..scenarios.models import Scenario
from ..signals.models import DIRECTION_INCREASING, Signal
from .themes import SUMMARY_THEMES

logger = logging.getLogger(__name__)

LOW_FLOW_SUMMARY = (
    "Limited high-relevance news flow. Markets may be driven by technical factors and positioning."
)
MAX_KEY_DEVELOPMENTS = 4
MAX_DOMINANT_THEMES = 3
TOP_SIGNALS = 3
STRONG_SIGNAL_THRESHOLD = 50
ELEVATED_UNCERTAINTY_COUNT = 10


@dataclass
class KeyDevelopment:
    theme: str
    headline: str
    item_count: int
    top_source: str
    relevance: float

    def to_dict(self) -> dict:
        return {
            "theme": self.theme,
            "headline": self.headline,
            "itemCount": self.item_count,
            "topSource": self.top_source,
            "relevance": self.relevance,
        }


@dataclass
class Summary:
    """Synthesized report for one cycle."""

    timestamp: datetime
    summary: str
    key_developments: list[KeyDevelopment] = field(default_factory=list)
    dominant_themes: list[str] = field(default_factory=list)
    active_signals: list[dict] = field(default_factory=list)
    what_would_change_view: list[str] = field(default_factory=list)
    overall_confidence: str = "moderate"
    uncertainty_level: str = "normal"
    news_analyzed: int = 0
    signals_active: int = 0
    scenarios_active: int = 0

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "summary": self.summary,
            "keyDevelopments": [d.to_dict() for d in self.key_developments],
            "dominantThemes": self.dominant_themes,
            "activeSignals": self.active_signals,
            "whatWouldChangeView": self.what_would_change_view,
            "overallConfidence": self.overall_confidence,
            "uncertaintyLevel": self.uncertainty_level,
            "newsAnalyzed": self.news_analyzed,
            "signalsActive": self.signals_active,
            "scenariosActive": self.scenarios_active,
        }


def rank_themes(items: Sequence[NewsItem]) -> list[tuple[str, list[NewsItem]]]:
    """Themes with at least one item, by item count descending (stable on ties)."""
    ranked = []
    for rule in SUMMARY_THEMES:
        members = [item for item in items if rule.matches(item.text)]
        if members:
            ranked.append((rule.name, members))
    ranked.sort(key=lambda pair: len(pair[1]), reverse=True)
    return ranked


def narrative_paragraph(developments: Sequence[KeyDevelopment], signals: Sequence[Signal]) -> str:
    """
    Short narrative: lead theme, strong signals, then secondary themes.

    Falls back to a fixed low-flow sentence when no theme matched.
    """
    if not developments:
        return LOW_FLOW_SUMMARY

    lead = developments[0]
    parts = [f"{lead.theme} remains a key focus with {lead.item_count} relevant items."]

    strong = [s for s in signals if s.strength >= STRONG_SIGNAL_THRESHOLD]
    if strong:
        parts.append(f"Active signals include {', '.join(s.name.lower() for s in strong)}.")

    if len(developments) > 1:
        secondary = " and ".join(d.theme for d in developments[1:3])
        parts.append(f"Also monitor {secondary} for potential catalysts.")

    return " ".join(parts)


def view_changers(signals: Sequence[Signal]) -> list[str]:
    changers = []
    for signal in signals:
        name = signal.name.lower()
        if signal.direction == DIRECTION_INCREASING:
            changers.append(f"De-escalation in {name} would reduce risk premium")
        else:
            changers.append(f"Escalation in {name} would increase risk")
    return changers


def generate_summary(
    items: Sequence[NewsItem],
    signals: Sequence[Signal],
    scenarios: Sequence[Scenario] = (),
    now: Optional[datetime] = None,
) -> Summary:
    """
    Build the what-matters-now report.

    Args:
        items: Scored corpus
        signals: Signals sorted by strength descending
        scenarios: Current scenarios
        now: Report timestamp (default: current UTC)

    Returns:
        Summary
    """
    if now is None:
        now = datetime.now(timezone.utc)

    ranked = rank_themes(items)
    top_signals = list(signals[:TOP_SIGNALS])

    developments = []
    for theme, members in ranked[:MAX_KEY_DEVELOPMENTS]:
        top = members[0]
        developments.append(KeyDevelopment(
            theme=theme,
            headline=top.title,
            item_count=len(members),
            top_source=top.source,
            relevance=top.relevance_score,
        ))

    confirmed = sum(1 for item in items if item.signal_strength == "confirmed")
    early = sum(1 for item in items if item.signal_strength == "early")

    summary = Summary(
        timestamp=now,
        summary=narrative_paragraph(developments, top_signals),
        key_developments=developments,
        dominant_themes=[theme for theme, _ in ranked[:MAX_DOMINANT_THEMES]],
        active_signals=[
            {"name": s.name, "strength": s.strength_label, "direction": s.direction}
            for s in top_signals
        ],
        what_would_change_view=view_changers(top_signals),
        overall_confidence="moderate-high" if confirmed > early else "moderate",
        uncertainty_level="elevated" if early > ELEVATED_UNCERTAINTY_COUNT else "normal",
        news_analyzed=len(items),
        signals_active=len(signals),
        scenarios_active=sum(1 for s in scenarios if s.related_news),
    )
    logger.debug("[SUMMARY] %d themes, %d signals", len(ranked), len(signals))
    return summary
