"""Geopolitical situation monitor: news ingestion, signals, scenarios and a knowledge graph."""

__version__ = "0.1.0"
