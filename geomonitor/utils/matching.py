"""Keyword matching helpers used by every heuristic table.

All matching is case-insensitive substring containment. Each helper makes
its match policy explicit (first match in declaration order, union of all
matches, or a count of distinct keywords) so call sites never hand-roll
their own loops over keyword lists.
"""

from typing import Iterable, Optional, Sequence, TypeVar

T = TypeVar("T")


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Return True if any keyword occurs in text."""
    lowered = text.lower()
    return any(kw in lowered for kw in keywords)


def matching_keywords(text: str, keywords: Iterable[str]) -> list[str]:
    """Return every keyword found in text, in declaration order."""
    lowered = text.lower()
    return [kw for kw in keywords if kw in lowered]


def count_matches(text: str, keywords: Iterable[str]) -> int:
    """Count distinct keywords present in text (frequency is ignored)."""
    return len(set(matching_keywords(text, keywords)))


def first_match(text: str, table: Sequence[tuple[Sequence[str], T]]) -> Optional[T]:
    """
    Return the value of the first table row whose keywords occur in text.

    Args:
        text: Text to scan
        table: Ordered (keywords, value) rows

    Returns:
        The first matching row's value, or None
    """
    lowered = text.lower()
    for keywords, value in table:
        if any(kw in lowered for kw in keywords):
            return value
    return None


def union_matches(text: str, table: Sequence[tuple[Sequence[str], T]]) -> list[T]:
    """Return the values of all matching rows, deduplicated, first-seen order."""
    lowered = text.lower()
    found: list[T] = []
    for keywords, value in table:
        if value not in found and any(kw in lowered for kw in keywords):
            found.append(value)
    return found
