"""Signal template registry, loaded once from YAML and validated."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

from ..config.settings import settings
from ..errors import RegistryError
from .models import SignalTemplate

logger = logging.getLogger(__name__)


def _parse_template(template_id: str, data: dict) -> SignalTemplate:
    if not isinstance(data, dict):
        raise RegistryError(f"Signal template '{template_id}' must be a mapping")
    for key in ("name", "keywords", "markets"):
        if not data.get(key):
            raise RegistryError(f"Signal template '{template_id}' is missing '{key}'")

    keywords = tuple(str(kw).lower() for kw in data["keywords"])
    if any(not kw.strip() for kw in keywords):
        raise RegistryError(f"Signal template '{template_id}' has an empty keyword")

    return SignalTemplate(
        id=template_id,
        name=data["name"],
        description=data.get("description", ""),
        keywords=keywords,
        markets=tuple(data["markets"]),
        historical_response=data.get("historical_response", ""),
    )


def load_signal_templates(path: Optional[Path] = None) -> tuple[SignalTemplate, ...]:
    """
    Load and validate signal templates.

    Args:
        path: YAML file (default: settings.signal_templates_file)

    Returns:
        Templates in declaration order

    Raises:
        RegistryError: If the file is empty or any template is malformed
    """
    path = path or settings.signal_templates_file
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict) or not data:
        raise RegistryError(f"No signal templates defined in {path}")

    templates = tuple(_parse_template(str(tid), tdata) for tid, tdata in data.items())
    logger.info("[SIGNALS] Loaded %d signal templates", len(templates))
    return templates


@lru_cache(maxsize=1)
def default_templates() -> tuple[SignalTemplate, ...]:
    """Default registry. Cached, loaded once per process."""
    return load_signal_templates()
