"""Startup-time configuration errors.

Both are fatal: they are raised while loading feed descriptors or the
signal/scenario/graph registries, before any cycle is served.
"""


class ConfigurationError(ValueError):
    """A feed descriptor or settings value is malformed."""


class RegistryError(ValueError):
    """A signal template, scenario or graph record is malformed."""
