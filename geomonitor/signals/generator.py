"""Signal synthesis - derives ranked signals from the scored news corpus."""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence

from ..config.settings import settings
from ..news.models import NewsItem
from ..utils.matching import contains_any
from .models import (
    DIRECTION_DECREASING,
    DIRECTION_INCREASING,
    DIRECTION_NEUTRAL,
    Signal,
    SignalTemplate,
)
from .templates import default_templates

logger = logging.getLogger(__name__)

MAX_RELATED_ITEMS = 5
MATCH_WEIGHT = 15
MATCH_CAP = 60
RELEVANCE_WEIGHT = 5
RECENCY_WEIGHT = 10

# Scanned in this order; a later class that matches overrides an earlier one
INTENSIFY_PATTERNS = ("increase", "escalate", "expand", "new", "additional", "further", "more")
EASE_PATTERNS = ("avoid", "prevent", "reduce", "ease", "relief", "end", "resolve")
DIRECTION_SCAN_ORDER = (
    (INTENSIFY_PATTERNS, DIRECTION_INCREASING),
    (EASE_PATTERNS, DIRECTION_DECREASING),
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_strength(match_count: int, avg_relevance: float, recent_matches: int) -> int:
    """
    Signal strength from match statistics.

    strength = min(count * 15, 60) + avg_relevance * 5 + recent * 10,
    rounded and clamped to [0, 100].
    """
    strength = min(match_count * MATCH_WEIGHT, MATCH_CAP)
    strength += avg_relevance * RELEVANCE_WEIGHT
    strength += recent_matches * RECENCY_WEIGHT
    return max(0, min(_round_half_up(strength), 100))


def strength_label(strength: int) -> str:
    if strength >= 70:
        return "strong"
    if strength >= 40:
        return "moderate"
    return "emerging"


def determine_direction(text: str) -> str:
    """
    Direction of a signal from the combined matched text.

    Both pattern classes are always scanned in declared order; the last
    class that matches wins, so ease/negate language overrides intensify
    language when both are present.
    """
    direction = DIRECTION_NEUTRAL
    for patterns, value in DIRECTION_SCAN_ORDER:
        if contains_any(text, patterns):
            direction = value
    return direction


def what_changed(related: Sequence[NewsItem]) -> str:
    """Short description of the items behind a signal."""
    if not related:
        return "No specific trigger identified"

    sources: list[str] = []
    for item in related:
        if item.source not in sources:
            sources.append(item.source)
    topics = "; ".join(item.title[:50] for item in related)
    return f"{len(related)} related items from {', '.join(sources)}. Key: {topics}"


def should_alert(signal: Signal, previous: Optional[Signal]) -> bool:
    """
    Decide whether a signal transition warrants an alert.

    Args:
        signal: Signal from the current cycle
        previous: Signal with the same id from the previous cycle, if any

    Returns:
        True for a new signal with strength >= 50, a strength rise of at
        least 15, or a direction change to increasing
    """
    if previous is None:
        return signal.strength >= 50

    if signal.strength - previous.strength >= 15:
        return True

    return signal.direction != previous.direction and signal.direction == DIRECTION_INCREASING


def detect_alerts(signals: Iterable[Signal], previous_signals: Iterable[Signal]) -> list[Signal]:
    """Return the current signals that should raise alerts, in input order."""
    previous_by_id = {s.id: s for s in previous_signals}
    return [s for s in signals if should_alert(s, previous_by_id.get(s.id))]


class SignalGenerator:
    """Matches the news corpus against the signal template registry."""

    def __init__(
        self,
        templates: Optional[Sequence[SignalTemplate]] = None,
        noise_floor: int = settings.signal_noise_floor,
        recent_window: timedelta = timedelta(minutes=settings.recent_window_minutes),
    ):
        """
        Initialize signal generator.

        Args:
            templates: Template registry (default: signal_templates.yaml)
            noise_floor: Signals weaker than this are suppressed
            recent_window: How far back a match counts as recent
        """
        self.templates = tuple(templates) if templates is not None else default_templates()
        self.noise_floor = noise_floor
        self.recent_window = recent_window

    def generate_from_news(self, news: Sequence[NewsItem], now: Optional[datetime] = None) -> list[Signal]:
        """
        Produce the active signals for one cycle.

        Args:
            news: Scored corpus
            now: Reference time for recency (default: current UTC)

        Returns:
            Signals sorted by strength descending
        """
        if now is None:
            now = datetime.now(timezone.utc)

        signals = []
        for template in self.templates:
            try:
                signal = self._build_signal(template, news, now)
            except Exception:
                logger.exception("[SIGNALS] Template %s failed, skipping", template.id)
                continue
            if signal is not None:
                signals.append(signal)

        signals.sort(key=lambda s: s.strength, reverse=True)
        logger.info("[SIGNALS] %d active signals from %d items", len(signals), len(news))
        return signals

    def _build_signal(self, template: SignalTemplate, news: Sequence[NewsItem], now: datetime) -> Optional[Signal]:
        matches = [item for item in news if contains_any(item.text, template.keywords)]
        if not matches:
            return None

        match_count = len(matches)
        avg_relevance = sum(item.relevance_score for item in matches) / match_count
        recent_cutoff = now - self.recent_window
        recent_matches = sum(1 for item in matches if item.published_at > recent_cutoff)

        strength = calculate_strength(match_count, avg_relevance, recent_matches)
        if strength < self.noise_floor:
            return None

        related = matches[:MAX_RELATED_ITEMS]
        combined_text = " ".join(item.text for item in matches)

        affected_regions: list[str] = []
        for item in matches:
            for region in item.regions:
                if region not in affected_regions:
                    affected_regions.append(region)

        return Signal(
            id=template.id,
            name=template.name,
            description=template.description,
            strength=strength,
            direction=determine_direction(combined_text),
            confidence=min(strength + 10, 95),
            affected_markets=list(template.markets),
            affected_regions=affected_regions,
            related_news_ids=[item.id for item in related],
            news_count=match_count,
            recent_news_count=recent_matches,
            strength_label=strength_label(strength),
            what_changed=what_changed(related),
            why_it_matters=template.historical_response,
            last_update=now,
        )

    def market_correlation(self, template_id: str) -> Optional[dict]:
        """Markets a template directly affects and its historical response."""
        for template in self.templates:
            if template.id == template_id:
                return {
                    "directlyAffected": list(template.markets),
                    "historicalResponse": template.historical_response,
                }
        return None
