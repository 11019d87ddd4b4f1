"""Load feed descriptors from JSON configuration."""

import json
import logging
from pathlib import Path
from typing import Optional

from ..config.settings import settings
from ..errors import ConfigurationError
from .models import SCOPE_LOCAL, SCOPE_REGIONAL, SCOPES, FeedDescriptor

logger = logging.getLogger(__name__)


def _parse_entry(index: int, entry: dict) -> FeedDescriptor:
    """Build one descriptor, rejecting entries that cannot be served."""
    for key in ("url", "source", "category"):
        if not entry.get(key):
            raise ConfigurationError(f"Feed #{index} is missing '{key}'")

    scope = entry.get("scope", "international")
    if scope not in SCOPES:
        raise ConfigurationError(f"Feed #{index} ({entry['source']}) has unknown scope '{scope}'")

    region = entry.get("region")
    cities = tuple(c.lower() for c in entry.get("cities", []))
    if scope == SCOPE_REGIONAL and not region:
        raise ConfigurationError(f"Regional feed {entry['source']} needs a region")
    if scope == SCOPE_LOCAL and not cities:
        raise ConfigurationError(f"Local feed {entry['source']} needs at least one city")

    return FeedDescriptor(
        endpoint=entry["url"],
        source_name=entry["source"],
        category=entry["category"],
        scope=scope,
        region=region,
        cities=cities,
        quick=entry.get("quick", False),
    )


def load_feeds(path: Optional[Path] = None) -> list[FeedDescriptor]:
    """
    Load feed descriptors from JSON file.

    Args:
        path: Path to feeds.json. Defaults to settings.feeds_file.

    Returns:
        List of enabled FeedDescriptor objects, in declaration order.

    Raises:
        ConfigurationError: If the file is missing or an entry is malformed
    """
    if path is None:
        path = settings.feeds_file

    if not path.exists():
        raise ConfigurationError(f"Feed file not found: {path}")

    with open(path) as f:
        data = json.load(f)

    feeds = []
    for index, entry in enumerate(data.get("feeds", [])):
        if not entry.get("enabled", True):
            continue
        feeds.append(_parse_entry(index, entry))

    if not feeds:
        raise ConfigurationError(f"No enabled feeds in {path}")

    logger.info("[FEEDS] Loaded %d enabled feeds from %s", len(feeds), path.name)
    return feeds


def get_feeds(quick: bool = False, path: Optional[Path] = None) -> list[FeedDescriptor]:
    """
    Get feed descriptors.

    Args:
        quick: If True, return only quick-mode feeds.
        path: Path to feeds.json.
    """
    feeds = load_feeds(path)
    if quick:
        return [f for f in feeds if f.quick]
    return feeds
