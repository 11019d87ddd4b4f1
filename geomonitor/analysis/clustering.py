"""Narrative clustering of the news corpus."""

from typing import Iterable

from ..news.models import NewsItem
from .themes import NARRATIVE_RULES, OTHER_DEVELOPMENTS


def cluster_by_narrative(items: Iterable[NewsItem]) -> dict[str, list[NewsItem]]:
    """
    Group items into mutually exclusive narratives.

    Each item goes to the first rule that matches its text, or to
    "Other Developments". Narratives with no items are omitted; the rest
    keep rule order, and items keep input order.
    """
    clusters: dict[str, list[NewsItem]] = {rule.name: [] for rule in NARRATIVE_RULES}
    clusters[OTHER_DEVELOPMENTS] = []

    for item in items:
        text = item.text
        for rule in NARRATIVE_RULES:
            if rule.matches(text):
                clusters[rule.name].append(item)
                break
        else:
            clusters[OTHER_DEVELOPMENTS].append(item)

    return {name: members for name, members in clusters.items() if members}
