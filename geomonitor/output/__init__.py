"""Report output."""
