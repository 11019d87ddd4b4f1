"""Field extraction, timestamp validation and deduplication for feed entries."""

import hashlib
import logging
import re
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from dateutil import parser as dateparser

from ..config.settings import settings
from .models import FeedDescriptor, RawFeedItem

logger = logging.getLogger(__name__)

_IMG_SRC_RE = re.compile(r"<img[^>]+src=[\"']([^\"']+)[\"']", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif")


def clean_summary(summary: str, max_length: int = 500) -> str:
    """Clean HTML and truncate summary."""
    clean = _TAG_RE.sub("", summary or "")
    clean = _WS_RE.sub(" ", clean).strip()
    if len(clean) > max_length:
        clean = clean[:max_length] + "..."
    return clean


def _is_image_enclosure(enclosure: Mapping[str, Any]) -> bool:
    mime = (enclosure.get("type") or "").lower()
    href = (enclosure.get("href") or enclosure.get("url") or "").lower()
    return mime.startswith("image/") or href.split("?")[0].endswith(_IMAGE_EXTENSIONS)


def extract_image(entry: Mapping[str, Any]) -> Optional[str]:
    """
    Find a representative image URL for a feed entry.

    Checked in priority order:
    1. media:content
    2. media:thumbnail
    3. enclosure with an image MIME type or extension
    4. first <img src> in any HTML content field
    """
    for media in entry.get("media_content") or []:
        if media.get("url"):
            return media["url"]

    for thumb in entry.get("media_thumbnail") or []:
        if thumb.get("url"):
            return thumb["url"]

    for enclosure in entry.get("enclosures") or []:
        if _is_image_enclosure(enclosure):
            return enclosure.get("href") or enclosure.get("url")

    html_fields = [c.get("value", "") for c in entry.get("content") or []]
    html_fields += [entry.get("summary") or "", entry.get("description") or ""]
    for html in html_fields:
        match = _IMG_SRC_RE.search(html)
        if match:
            return match.group(1)

    return None


def _timestamp_candidate(entry: Mapping[str, Any]) -> Any:
    """Prefer feedparser's parsed struct_time, fall back to raw strings."""
    for key in ("published_parsed", "updated_parsed"):
        if entry.get(key):
            return entry[key]
    for key in ("published", "updated", "pubDate", "isoDate"):
        if entry.get(key):
            return entry[key]
    return None


def extract_entry(entry: Mapping[str, Any], descriptor: FeedDescriptor) -> Optional[RawFeedItem]:
    """
    Map one feedparser entry to a RawFeedItem.

    Returns:
        The raw item, or None when the entry has no title
    """
    title = _WS_RE.sub(" ", entry.get("title") or "").strip()
    if not title:
        return None

    summary = entry.get("summary") or entry.get("description") or ""
    return RawFeedItem(
        title=title,
        summary=clean_summary(summary),
        link=entry.get("link") or "",
        published=_timestamp_candidate(entry),
        descriptor=descriptor,
        image=extract_image(entry),
    )


# Two fill-in dates; a string whose date parses differently under each is missing fields
_DEFAULT_DATES = (datetime(1900, 1, 1), datetime(1904, 2, 2))


def _parse_date_string(candidate: str) -> Optional[datetime]:
    first, second = (dateparser.parse(candidate, default=d) for d in _DEFAULT_DATES)
    if first.date() != second.date():
        return None
    return first


def parse_timestamp(candidate: Any) -> Optional[datetime]:
    """Parse a struct_time, datetime or date string into an aware UTC datetime.

    Strings without a full date, or with an out-of-range offset, count as unparsable.
    """
    if candidate is None or candidate == "":
        return None

    try:
        if isinstance(candidate, datetime):
            dt = candidate
        elif isinstance(candidate, time.struct_time):
            # feedparser normalizes struct_time to UTC
            dt = datetime(*candidate[:6], tzinfo=timezone.utc)
        elif isinstance(candidate, str):
            dt = _parse_date_string(candidate)
        else:
            return None

        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def normalize_timestamp(
    candidate: Any,
    now: datetime,
    max_age: timedelta = timedelta(days=settings.max_age_days),
    future_tolerance: timedelta = timedelta(minutes=settings.future_tolerance_minutes),
) -> Optional[datetime]:
    """
    Validate and normalize a publish timestamp.

    Args:
        candidate: Raw timestamp from the feed entry
        now: Reference time of the ingestion cycle
        max_age: Staleness window
        future_tolerance: Allowed clock skew into the future

    Returns:
        UTC datetime within [now - max_age, now + future_tolerance], or None
    """
    dt = parse_timestamp(candidate)
    if dt is None:
        return None
    if dt > now + future_tolerance or dt < now - max_age:
        return None
    return dt


def make_news_id(title: str, published_at: datetime) -> str:
    """Deterministic 16-character id from title and normalized timestamp."""
    key = f"{title}|{published_at.isoformat()}".encode("utf-8", "ignore")
    return hashlib.sha1(key).hexdigest()[:16]


class Deduplicator:
    """
    Single-pass title-prefix deduplication.

    The key is the case-folded first ``prefix_length`` characters of the
    title; the first occurrence of a key wins.
    """

    def __init__(self, prefix_length: int = settings.dedup_prefix_length):
        self.prefix_length = prefix_length
        self._seen: set[str] = set()

    def key(self, title: str) -> str:
        return title.casefold()[: self.prefix_length]

    def accept(self, title: str) -> bool:
        """Record the title and return False if its key was already seen."""
        key = self.key(title)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True
