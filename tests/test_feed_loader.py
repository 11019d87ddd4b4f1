import json

import pytest

from geomonitor.errors import ConfigurationError
from geomonitor.news.feed_loader import get_feeds, load_feeds
from geomonitor.news.models import SCOPE_INTERNATIONAL, SCOPE_LOCAL, SCOPE_REGIONAL


def _write(tmp_path, feeds):
    path = tmp_path / "feeds.json"
    path.write_text(json.dumps({"feeds": feeds}))
    return path


def test_load_feeds_parses_scopes_and_skips_disabled(tmp_path):
    path = _write(tmp_path, [
        {"url": "https://a/rss", "source": "A", "category": "world", "quick": True},
        {"url": "https://b/rss", "source": "B", "category": "europe", "scope": "regional", "region": "europe"},
        {"url": "https://c/rss", "source": "C", "category": "local", "scope": "local", "cities": ["London"]},
        {"url": "https://d/rss", "source": "D", "category": "world", "enabled": False},
    ])

    feeds = load_feeds(path)

    assert [f.source_name for f in feeds] == ["A", "B", "C"]
    assert feeds[0].scope == SCOPE_INTERNATIONAL
    assert feeds[1].scope == SCOPE_REGIONAL and feeds[1].region == "europe"
    assert feeds[2].scope == SCOPE_LOCAL and feeds[2].cities == ("london",)

    assert [f.source_name for f in get_feeds(quick=True, path=path)] == ["A"]


@pytest.mark.parametrize(
    "entry",
    [
        {"source": "A", "category": "world"},
        {"url": "https://a/rss", "source": "A", "category": "world", "scope": "planetary"},
        {"url": "https://a/rss", "source": "A", "category": "world", "scope": "regional"},
        {"url": "https://a/rss", "source": "A", "category": "world", "scope": "local"},
    ],
)
def test_load_feeds_rejects_malformed_entries(tmp_path, entry):
    with pytest.raises(ConfigurationError):
        load_feeds(_write(tmp_path, [entry]))


def test_load_feeds_missing_file_or_no_enabled_feeds(tmp_path):
    with pytest.raises(ConfigurationError):
        load_feeds(tmp_path / "missing.json")
    with pytest.raises(ConfigurationError):
        load_feeds(_write(tmp_path, [{"url": "u", "source": "s", "category": "c", "enabled": False}]))


def test_bundled_feed_file_is_valid():
    feeds = load_feeds()
    assert len(feeds) > 30
    assert any(f.scope == SCOPE_LOCAL for f in feeds)
    assert any(f.quick for f in feeds)
