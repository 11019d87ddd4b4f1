"""Scenario registry, loaded once from YAML and validated at startup."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

from ..config.settings import settings
from ..errors import RegistryError
from .models import MarketImplications, PathDefinition, ScenarioDefinition

logger = logging.getLogger(__name__)

MIN_PATHS = 2
MAX_PATHS = 4


def _parse_path(scenario_id: str, data: dict) -> PathDefinition:
    for key in ("id", "name", "base_probability", "triggers"):
        if data.get(key) in (None, "", []):
            raise RegistryError(f"Scenario '{scenario_id}' has a path missing '{key}'")

    base = data["base_probability"]
    if not isinstance(base, int) or not 0 < base < 100:
        raise RegistryError(
            f"Scenario '{scenario_id}' path '{data['id']}' base probability must be an int in (0, 100)"
        )

    implications = data.get("market_implications") or {}
    return PathDefinition(
        id=str(data["id"]),
        name=data["name"],
        description=data.get("description", ""),
        base_probability=base,
        triggers=tuple(str(t).lower() for t in data["triggers"]),
        signposts=tuple(data.get("signposts") or ()),
        market_implications=MarketImplications(
            bullish=tuple(implications.get("bullish") or ()),
            bearish=tuple(implications.get("bearish") or ()),
            neutral=tuple(implications.get("neutral") or ()),
        ),
    )


def _parse_scenario(data: dict) -> ScenarioDefinition:
    if not isinstance(data, dict):
        raise RegistryError("Each scenario must be a mapping")
    for key in ("id", "theme"):
        if not data.get(key):
            raise RegistryError(f"Scenario is missing '{key}'")

    scenario_id = data["id"]
    raw_paths = data.get("paths") or []
    if not MIN_PATHS <= len(raw_paths) <= MAX_PATHS:
        raise RegistryError(
            f"Scenario '{scenario_id}' must have {MIN_PATHS}-{MAX_PATHS} paths, got {len(raw_paths)}"
        )

    paths = tuple(_parse_path(scenario_id, p) for p in raw_paths)

    ids = [p.id for p in paths]
    if len(set(ids)) != len(ids):
        raise RegistryError(f"Scenario '{scenario_id}' has duplicate path ids")

    total = sum(p.base_probability for p in paths)
    if total != 100:
        raise RegistryError(f"Scenario '{scenario_id}' base probabilities sum to {total}, not 100")

    return ScenarioDefinition(
        id=scenario_id,
        theme=data["theme"],
        title=data.get("title") or data["theme"],
        paths=paths,
    )


def load_scenarios(path: Optional[Path] = None) -> tuple[ScenarioDefinition, ...]:
    """
    Load and validate the scenario registry.

    Args:
        path: YAML file (default: settings.scenarios_file)

    Returns:
        Scenario definitions in declaration order

    Raises:
        RegistryError: If the registry is empty or any scenario is malformed
    """
    path = path or settings.scenarios_file
    with open(path) as f:
        data = yaml.safe_load(f) or []

    if not isinstance(data, list) or not data:
        raise RegistryError(f"No scenarios defined in {path}")

    scenarios = tuple(_parse_scenario(s) for s in data)
    ids = [s.id for s in scenarios]
    if len(set(ids)) != len(ids):
        raise RegistryError("Duplicate scenario ids in registry")

    logger.info("[SCENARIOS] Loaded %d scenarios", len(scenarios))
    return scenarios


@lru_cache(maxsize=1)
def default_scenarios() -> tuple[ScenarioDefinition, ...]:
    """Default registry. Cached, loaded once per process."""
    return load_scenarios()
