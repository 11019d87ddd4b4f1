"""Narrative clustering and report synthesis."""

from .clustering import cluster_by_narrative
from .summary import Summary, generate_summary

__all__ = ["Summary", "cluster_by_narrative", "generate_summary"]
