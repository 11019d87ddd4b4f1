"""Configuration and static registries."""
