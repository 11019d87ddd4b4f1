"""Scenario probability engine."""

from .engine import ScenarioEngine, market_exposure, reweight, scenario_by_theme
from .models import Scenario, ScenarioDefinition, ScenarioPath
from .registry import load_scenarios

__all__ = [
    "Scenario",
    "ScenarioDefinition",
    "ScenarioEngine",
    "ScenarioPath",
    "load_scenarios",
    "market_exposure",
    "reweight",
    "scenario_by_theme",
]
