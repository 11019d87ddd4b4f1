import asyncio

import pytest

from geomonitor.app.pipeline import MonitorPipeline
from geomonitor.news.models import SCOPE_LOCAL
from geomonitor.scenarios import ScenarioEngine
from geomonitor.signals import SignalGenerator, SignalTemplate
from geomonitor.utils.cache import TTLCache

SANCTIONS = SignalTemplate("sanctions", "Sanctions Risk", "", ("sanction",), ("oil",), "")


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class FakeAggregator:
    """Returns queued batches; queued exceptions are raised instead."""

    def __init__(self, *batches):
        self.batches = list(batches)
        self.calls = 0

    async def get_latest(self, now=None):
        self.calls += 1
        batch = self.batches.pop(0) if len(self.batches) > 1 else self.batches[0]
        if isinstance(batch, Exception):
            raise batch
        return batch


@pytest.fixture
def corpus(make_item):
    return [
        make_item(f"New sanction package {i} targets Russian banks", relevance=3.0) for i in range(4)
    ] + [
        make_item("Ceasefire talks resume in Geneva", relevance=2.0),
        make_item("Council repaves high street", relevance=0.0, scope=SCOPE_LOCAL, cities=("london",)),
    ]


def _pipeline(aggregator, clock=None):
    return MonitorPipeline(
        aggregator,
        signal_generator=SignalGenerator([SANCTIONS]),
        scenario_engine=ScenarioEngine(),
        cache=TTLCache(ttl_seconds=300, clock=clock or FakeClock()),
    )


def test_refresh_runs_every_stage(corpus):
    pipeline = _pipeline(FakeAggregator(corpus))

    result = asyncio.run(pipeline.refresh())

    assert result.news == corpus
    assert [s.id for s in result.signals] == ["sanctions"]
    assert result.signals[0].strength == 75
    assert len(result.scenarios) == 8
    assert "Russia-Ukraine Conflict" in result.clusters
    assert result.summary.news_analyzed == len(corpus)
    assert pipeline.last_result is result

    data = result.to_dict()
    assert set(data) >= {"news", "signals", "scenarios", "clusters", "summary", "alerts", "generatedAt"}


def test_alerts_compare_against_previous_cycle(corpus):
    pipeline = _pipeline(FakeAggregator(corpus))

    first = asyncio.run(pipeline.refresh())
    second = asyncio.run(pipeline.refresh())

    assert [s.id for s in first.alerts] == ["sanctions"]
    assert second.alerts == []


def test_failed_cycle_keeps_previous_result(corpus):
    aggregator = FakeAggregator(corpus, RuntimeError("feeds down"))
    pipeline = _pipeline(aggregator)

    first = asyncio.run(pipeline.refresh())
    second = asyncio.run(pipeline.refresh())

    assert second is first
    assert aggregator.calls == 2


def test_failed_first_cycle_propagates():
    pipeline = _pipeline(FakeAggregator(RuntimeError("feeds down")))
    with pytest.raises(RuntimeError):
        asyncio.run(pipeline.refresh())


def test_get_state_is_cached_for_ttl(corpus):
    clock = FakeClock()
    aggregator = FakeAggregator(corpus)
    pipeline = _pipeline(aggregator, clock)

    first = asyncio.run(pipeline.get_state())
    assert asyncio.run(pipeline.get_state()) is first
    assert aggregator.calls == 1

    clock.now = 301
    asyncio.run(pipeline.get_state())
    assert aggregator.calls == 2


def test_from_settings_uses_quick_feeds():
    pipeline = MonitorPipeline.from_settings(quick=True)
    feeds = pipeline.aggregator.fetcher.feeds
    assert feeds and all(f.quick for f in feeds)
