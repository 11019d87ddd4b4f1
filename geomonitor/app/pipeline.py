"""Monitor pipeline - one fetch/score/synthesize cycle and its cached state."""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from ..analysis.clustering import cluster_by_narrative
from ..analysis.summary import Summary, generate_summary
from ..config.settings import settings
from ..news.aggregator import NewsAggregator
from ..news.feed_loader import get_feeds
from ..news.fetcher import NewsFetcher
from ..news.models import NewsItem
from ..scenarios.engine import ScenarioEngine
from ..scenarios.models import Scenario
from ..signals.generator import SignalGenerator, detect_alerts
from ..signals.models import Signal
from ..utils.cache import TTLCache

logger = logging.getLogger(__name__)

STATE_KEY = "monitor_state"


@dataclass
class CycleResult:
    """Complete output of one cycle. Replaced wholesale, never patched."""

    news: list[NewsItem]
    signals: list[Signal]
    scenarios: list[Scenario]
    clusters: dict[str, list[NewsItem]]
    summary: Summary
    alerts: list[Signal] = field(default_factory=list)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    duration_seconds: float = 0.0

    def to_dict(self) -> dict:
        return {
            "generatedAt": self.generated_at.isoformat(),
            "durationSeconds": round(self.duration_seconds, 2),
            "news": [n.to_dict() for n in self.news],
            "signals": [s.to_dict() for s in self.signals],
            "scenarios": [s.to_dict() for s in self.scenarios],
            "clusters": {name: [n.id for n in items] for name, items in self.clusters.items()},
            "summary": self.summary.to_dict(),
            "alerts": [s.to_dict() for s in self.alerts],
        }


class MonitorPipeline:
    """
    Runs cycles and serves the latest complete result.

    Registries are loaded when the pipeline is built, so a malformed
    template or scenario fails here rather than mid-cycle.
    """

    def __init__(
        self,
        aggregator: NewsAggregator,
        signal_generator: Optional[SignalGenerator] = None,
        scenario_engine: Optional[ScenarioEngine] = None,
        cache: Optional[TTLCache] = None,
    ):
        self.aggregator = aggregator
        self.signal_generator = signal_generator or SignalGenerator()
        self.scenario_engine = scenario_engine or ScenarioEngine()
        self.cache = cache or TTLCache(ttl_seconds=settings.news_cache_ttl_seconds)
        self._last_result: Optional[CycleResult] = None

    @classmethod
    def from_settings(cls, quick: bool = False) -> "MonitorPipeline":
        """Build a pipeline over the configured feeds."""
        fetcher = NewsFetcher(get_feeds(quick=quick))
        return cls(NewsAggregator(fetcher))

    @property
    def last_result(self) -> Optional[CycleResult]:
        return self._last_result

    async def run_cycle(self, now: Optional[datetime] = None) -> CycleResult:
        """
        Run fetch, scoring, signals, scenarios, clustering and summary.

        Alerts compare this cycle's signals with the last completed cycle.
        Does not update the stored result; see refresh().
        """
        if now is None:
            now = datetime.now(timezone.utc)
        t0 = time.time()

        logger.info("[PIPELINE] Starting cycle")
        news = await self.aggregator.get_latest(now=now)
        signals = self.signal_generator.generate_from_news(news, now=now)
        scenarios = self.scenario_engine.update_scenarios(news, signals, now=now)
        clusters = cluster_by_narrative(news)
        summary = generate_summary(news, signals, scenarios, now=now)

        previous_signals = self._last_result.signals if self._last_result else []
        alerts = detect_alerts(signals, previous_signals)

        duration = time.time() - t0
        logger.info(
            "[PIPELINE] Cycle complete in %.1fs: %d items, %d signals, %d alerts",
            duration,
            len(news),
            len(signals),
            len(alerts),
        )
        return CycleResult(
            news=news,
            signals=signals,
            scenarios=scenarios,
            clusters=clusters,
            summary=summary,
            alerts=alerts,
            generated_at=now,
            duration_seconds=duration,
        )

    async def refresh(self) -> CycleResult:
        """
        Run a cycle and store it as the latest result.

        If the cycle raises, the previous complete result is kept and
        returned. With no previous result the error propagates.
        """
        try:
            result = await self.run_cycle()
        except Exception:
            if self._last_result is None:
                raise
            logger.exception("[PIPELINE] Cycle failed, serving previous result")
            return self._last_result

        self._last_result = result
        return result

    async def get_state(self) -> CycleResult:
        """Latest result, refreshed at most once per cache TTL."""
        return await self.cache.get_or_populate(STATE_KEY, self.refresh)
