import asyncio
from datetime import timedelta

import pytest

from geomonitor.news.aggregator import NewsAggregator
from geomonitor.news.models import SCOPE_LOCAL


def test_process_filters_dedups_and_sorts(make_raw, now):
    raws = [
        make_raw("Sanctions hit Russian oil exports", published=now - timedelta(hours=3)),
        make_raw("SANCTIONS HIT RUSSIAN OIL EXPORTS", published=now - timedelta(hours=1)),
        make_raw("Fed signals interest rate pause", published=now - timedelta(minutes=10)),
        make_raw("Tariff row deepens", published=now - timedelta(days=9)),
        make_raw("Tariff row deepens again", published="not a date"),
        make_raw("", published=now),
    ]

    items = NewsAggregator().process(raws, now=now)

    assert [i.title for i in items] == [
        "Fed signals interest rate pause",
        "Sanctions hit Russian oil exports",
    ]
    assert all(i.published_at.tzinfo is not None for i in items)


def test_low_relevance_items_need_local_scope(make_raw, now):
    raws = [
        make_raw("Bakery opens downtown", source="Wire"),
        make_raw("Council repaves high street", scope=SCOPE_LOCAL, source="Local", cities=("london",)),
    ]

    items = NewsAggregator(min_relevance=1.0).process(raws, now=now)

    assert [i.source for i in items] == ["Local"]
    assert items[0].relevance_score == 0.0
    assert items[0].cities == ("london",)


def test_items_carry_scores_regions_and_novelty(make_raw, now):
    raws = [
        make_raw("Russia launches major military offensive near Kharkiv region", published=now - timedelta(minutes=1)),
        make_raw("Major military offensive launched by Russia near Kharkiv", published=now - timedelta(minutes=2)),
    ]

    items = NewsAggregator().process(raws, now=now)

    first, second = items
    assert first.regions == ("russia",)
    assert "oil" in first.exposed_markets
    assert first.relevance_score == 3.0
    assert first.is_novel
    assert not second.is_novel
    assert len(first.id) == 16 and first.id != second.id


def test_corpus_is_truncated_to_max_items(make_raw, now):
    raws = [make_raw(f"Tariff update number {i}", published=now - timedelta(minutes=i)) for i in range(10)]

    items = NewsAggregator(max_items=3).process(raws, now=now)

    assert [i.title for i in items] == [f"Tariff update number {i}" for i in range(3)]


def test_get_latest_runs_the_fetcher(make_raw, now):
    class FakeFetcher:
        async def fetch_all(self):
            return [make_raw("Military drills near Taiwan")]

    items = asyncio.run(NewsAggregator(FakeFetcher()).get_latest(now=now))
    assert [i.title for i in items] == ["Military drills near Taiwan"]


def test_get_latest_without_fetcher_raises():
    with pytest.raises(RuntimeError):
        asyncio.run(NewsAggregator().get_latest())


def test_bad_offset_drops_only_that_item(make_raw, now):
    raws = [
        make_raw("Sanctions hit oil exports"),
        make_raw("Tariff war widens", published="2026-03-02T10:00:00+99:00"),
    ]

    items = NewsAggregator().process(raws, now=now)

    assert [i.title for i in items] == ["Sanctions hit oil exports"]


def test_process_is_idempotent_on_the_same_corpus(make_raw, now):
    long_title = "Sanctions hit Russian oil exports as the EU tightens its price cap"
    raws = [
        make_raw(long_title, published=now - timedelta(hours=2)),
        make_raw(long_title + " again", published=now - timedelta(hours=1)),
        make_raw(long_title.upper(), published=now - timedelta(minutes=20)),
        make_raw("Fed signals interest rate pause", published=now - timedelta(minutes=10)),
        make_raw("Military drills near Taiwan", published=now - timedelta(minutes=40)),
    ]
    aggregator = NewsAggregator()

    first = aggregator.process(raws, now=now)
    second = aggregator.process(raws, now=now)

    assert [i.id for i in first] == [i.id for i in second]
    assert len(first) == 3
