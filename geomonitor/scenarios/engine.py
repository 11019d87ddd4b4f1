"""Scenario Engine - reweights scenario path probabilities from the news flow.

Single pass per cycle: no iteration and no carried-over state. Each
scenario is processed independently.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Optional, Sequence

from ..config.settings import settings
from ..news.models import NewsItem
from ..signals.models import Signal
from ..utils.matching import contains_any, count_matches
from .models import PathDefinition, Scenario, ScenarioDefinition, ScenarioPath
from .registry import default_scenarios

logger = logging.getLogger(__name__)

ADJUSTMENT_POOL = 30
MIN_PROBABILITY = 5
MAX_PROBABILITY = 80
MAX_RELATED_NEWS = 5


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def reweight(paths: Sequence[PathDefinition], match_counts: Sequence[int]) -> list[int]:
    """
    Distribute a 30-point pool across paths by trigger-match share.

    Each path gets base + share * 30, clamped to [5, 80]; the clamped values
    are then rescaled to sum to 100 and rounded. With no matches at all the
    base probabilities are returned unchanged.

    Args:
        paths: Path definitions in declared order
        match_counts: Distinct trigger matches per path, same order

    Returns:
        Integer probabilities, summing to 100 within rounding drift
    """
    total_matches = sum(match_counts)
    if total_matches == 0:
        return [p.base_probability for p in paths]

    clamped = []
    for path, matches in zip(paths, match_counts):
        adjustment = matches / total_matches * ADJUSTMENT_POOL
        clamped.append(min(max(path.base_probability + adjustment, MIN_PROBABILITY), MAX_PROBABILITY))

    clamped_total = sum(clamped)
    return [_round_half_up(value / clamped_total * 100) for value in clamped]


def leading_path(paths: Sequence[ScenarioPath]) -> ScenarioPath:
    """Path with the highest probability; ties go to the first declared."""
    best = paths[0]
    for path in paths[1:]:
        if path.current_probability > best.current_probability:
            best = path
    return best


def _overlaps(a: str, b: str) -> bool:
    return bool(a) and bool(b) and (a in b or b in a)


def matching_signal_ids(definition: ScenarioDefinition, signals: Sequence[Signal]) -> list[str]:
    """
    Ids of signals related to a scenario.

    A signal is related when its id, name or any affected region overlaps
    (substring either way, case-insensitive) the scenario theme or any path
    trigger.
    """
    needles = [definition.theme.lower()]
    for path in definition.paths:
        needles.extend(path.triggers)

    related = []
    for signal in signals:
        haystacks = [signal.id.lower(), signal.name.lower()] + [r.lower() for r in signal.affected_regions]
        if any(_overlaps(h, n) for h in haystacks for n in needles):
            related.append(signal.id)
    return related


class ScenarioEngine:
    """Applies the reweighting pass to every scenario in the registry."""

    def __init__(
        self,
        definitions: Optional[Sequence[ScenarioDefinition]] = None,
        window: int = settings.scenario_window,
    ):
        """
        Initialize scenario engine.

        Args:
            definitions: Scenario registry (default: scenarios.yaml)
            window: Number of most recent items used for trigger matching
        """
        self.definitions = tuple(definitions) if definitions is not None else default_scenarios()
        self.window = window

    def update_scenarios(
        self,
        news: Sequence[NewsItem],
        signals: Sequence[Signal] = (),
        now: Optional[datetime] = None,
    ) -> list[Scenario]:
        """
        Recompute every scenario from the current corpus.

        Args:
            news: Scored corpus, most recent first
            signals: Signals from the same cycle
            now: Timestamp recorded on the results

        Returns:
            Scenarios in registry order
        """
        if now is None:
            now = datetime.now(timezone.utc)

        window_text = " ".join(item.text for item in news[: self.window]).lower()

        scenarios = []
        for definition in self.definitions:
            try:
                scenario = self._evaluate(definition, window_text, news, signals, now)
            except Exception:
                logger.exception("[SCENARIOS] Scenario %s failed, using base probabilities", definition.id)
                scenario = self.baseline(definition, now)
            scenarios.append(scenario)

        logger.info("[SCENARIOS] Updated %d scenarios from %d items", len(scenarios), len(news))
        return scenarios

    def _evaluate(
        self,
        definition: ScenarioDefinition,
        window_text: str,
        news: Sequence[NewsItem],
        signals: Sequence[Signal],
        now: datetime,
    ) -> Scenario:
        match_counts = [count_matches(window_text, path.triggers) for path in definition.paths]
        probabilities = reweight(definition.paths, match_counts)

        paths = [
            ScenarioPath(definition=path, current_probability=prob, match_count=matches)
            for path, prob, matches in zip(definition.paths, probabilities, match_counts)
        ]

        all_triggers = [t for path in definition.paths for t in path.triggers]
        related_news = [
            {
                "id": item.id,
                "title": item.title,
                "source": item.source,
                "publishedAt": item.published_at.isoformat(),
            }
            for item in news
            if contains_any(item.text, all_triggers)
        ][:MAX_RELATED_NEWS]

        return Scenario(
            id=definition.id,
            theme=definition.theme,
            title=definition.title,
            paths=paths,
            leading_path=leading_path(paths).id,
            related_news=related_news,
            active_signals=matching_signal_ids(definition, signals),
            last_update=now,
        )

    @staticmethod
    def baseline(definition: ScenarioDefinition, now: Optional[datetime] = None) -> Scenario:
        """Scenario state with base probabilities and no evidence."""
        paths = [ScenarioPath(definition=p, current_probability=p.base_probability) for p in definition.paths]
        return Scenario(
            id=definition.id,
            theme=definition.theme,
            title=definition.title,
            paths=paths,
            leading_path=leading_path(paths).id,
            last_update=now,
        )


def scenario_by_theme(scenarios: Sequence[Scenario], theme: str) -> Optional[Scenario]:
    """First scenario whose theme contains the given text (case-insensitive)."""
    needle = theme.lower()
    for scenario in scenarios:
        if needle in scenario.theme.lower():
            return scenario
    return None


def market_exposure(scenarios: Sequence[Scenario]) -> dict:
    """
    Probability-weighted market tilt implied by each scenario's leading path.

    Returns:
        {"bullish": [(market, weight), ...], "bearish": [...]} sorted by weight
    """
    bullish: dict[str, float] = {}
    bearish: dict[str, float] = {}

    for scenario in scenarios:
        path = scenario.path(scenario.leading_path)
        if path is None:
            continue
        weight = path.current_probability / 100
        implications = path.definition.market_implications
        for market in implications.bullish:
            bullish[market] = bullish.get(market, 0.0) + weight
        for market in implications.bearish:
            bearish[market] = bearish.get(market, 0.0) + weight

    return {
        "bullish": sorted(bullish.items(), key=lambda kv: kv[1], reverse=True),
        "bearish": sorted(bearish.items(), key=lambda kv: kv[1], reverse=True),
    }
