"""News ingestion, normalization and scoring."""
