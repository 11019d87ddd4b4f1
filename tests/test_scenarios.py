import pytest

from geomonitor.errors import RegistryError
from geomonitor.scenarios import engine as engine_module
from geomonitor.scenarios import ScenarioEngine, load_scenarios, market_exposure, reweight, scenario_by_theme
from geomonitor.scenarios.models import MarketImplications, PathDefinition, ScenarioDefinition
from geomonitor.scenarios.registry import default_scenarios
from geomonitor.signals.models import Signal


def _path(id, base, triggers=("x",), bullish=(), bearish=()):
    return PathDefinition(
        id=id,
        name=id.title(),
        description="",
        base_probability=base,
        triggers=tuple(triggers),
        market_implications=MarketImplications(bullish=tuple(bullish), bearish=tuple(bearish)),
    )


def _russia_ukraine():
    return next(s for s in default_scenarios() if s.id == "russia-ukraine")


def test_reweight_without_matches_keeps_base():
    paths = [_path("a", 30), _path("b", 50), _path("c", 20)]
    assert reweight(paths, [0, 0, 0]) == [30, 50, 20]


def test_reweight_distributes_pool_and_rescales():
    paths = [_path("a", 30), _path("b", 50), _path("c", 20)]
    assert reweight(paths, [1, 0, 0]) == [46, 38, 15]


def test_reweight_clamps_before_rescaling():
    assert reweight([_path("a", 78), _path("b", 22)], [1, 0]) == [78, 22]
    assert reweight([_path("a", 2), _path("b", 98)], [0, 1]) == [6, 94]


def test_ceasefire_news_moves_negotiation_path_to_lead(make_item, now):
    news = [make_item("Leaders agree to ceasefire, ready to negotiate")]

    scenarios = ScenarioEngine([_russia_ukraine()]).update_scenarios(news, now=now)

    scenario = scenarios[0]
    negotiation = scenario.path("negotiation")
    assert scenario.leading_path == "negotiation"
    assert negotiation.current_probability > negotiation.definition.base_probability
    assert negotiation.match_count == 2
    assert [p.current_probability for p in scenario.paths] == [19, 38, 42]
    assert abs(sum(p.current_probability for p in scenario.paths) - 100) <= len(scenario.paths) - 1
    assert scenario.related_news == [{
        "id": news[0].id,
        "title": news[0].title,
        "source": "Reuters",
        "publishedAt": news[0].published_at.isoformat(),
    }]


def test_default_registry_invariants_hold_for_every_scenario(make_item, now):
    news = [
        make_item("Tariff retaliation follows chip ban"),
        make_item("Iran strike raises oil fears"),
        make_item("Fed rate hike talk as inflation persists"),
        make_item("Ceasefire talks stall, stalemate continued"),
    ]

    scenarios = ScenarioEngine().update_scenarios(news, now=now)

    assert [s.id for s in scenarios] == [d.id for d in default_scenarios()]
    for scenario in scenarios:
        probs = [p.current_probability for p in scenario.paths]
        assert abs(sum(probs) - 100) <= len(probs) - 1
        assert scenario.path(scenario.leading_path).current_probability == max(probs)


def test_leading_path_ties_go_to_first_declared(now):
    definition = ScenarioDefinition("tie", "Tie", "Tie", (_path("a", 50), _path("b", 50)))
    scenario = ScenarioEngine([definition]).update_scenarios([], now=now)[0]
    assert scenario.leading_path == "a"


def test_only_recent_window_drives_probabilities_but_related_news_uses_full_corpus(make_item, now):
    definition = ScenarioDefinition(
        "s", "Theme", "Title", (_path("up", 50, ["ceasefire"]), _path("down", 50, ["stalemate"]))
    )
    news = [make_item(f"Filler story {i}") for i in range(3)]
    news += [make_item(f"Ceasefire story {i}") for i in range(7)]

    scenario = ScenarioEngine([definition], window=3).update_scenarios(news, now=now)[0]

    assert [p.current_probability for p in scenario.paths] == [50, 50]
    assert [r["title"] for r in scenario.related_news] == [f"Ceasefire story {i}" for i in range(5)]


def test_active_signals_overlap_theme_triggers_or_regions(now):
    signals = [
        Signal(id="escalation", name="Conflict Escalation", description="", strength=60, direction="neutral", confidence=70),
        Signal(id="tariffs", name="Trade War", description="", strength=60, direction="neutral", confidence=70),
        Signal(
            id="energyShock", name="Energy Shock", description="", strength=60, direction="neutral",
            confidence=70, affected_regions=["russia"],
        ),
    ]

    scenario = ScenarioEngine([_russia_ukraine()]).update_scenarios([], signals, now=now)[0]

    assert scenario.active_signals == ["escalation", "energyShock"]


def test_failing_scenario_falls_back_to_base(make_item, now, monkeypatch):
    def boom(paths, counts):
        raise ZeroDivisionError

    monkeypatch.setattr(engine_module, "reweight", boom)
    scenario = ScenarioEngine([_russia_ukraine()]).update_scenarios([make_item("Ceasefire agreed")], now=now)[0]

    assert [p.current_probability for p in scenario.paths] == [25, 50, 25]
    assert scenario.leading_path == "frozen"


def test_scenario_by_theme_and_market_exposure(now):
    definitions = [
        ScenarioDefinition("a", "US-China Relations", "A", (_path("x", 60, bullish=["gold"]), _path("y", 40))),
        ScenarioDefinition(
            "b", "Middle East Tensions", "B",
            (_path("x", 80, bullish=["gold", "oil"], bearish=["airlines"]), _path("y", 20)),
        ),
    ]
    scenarios = ScenarioEngine(definitions).update_scenarios([], now=now)

    assert scenario_by_theme(scenarios, "middle east").id == "b"
    assert scenario_by_theme(scenarios, "arctic") is None

    exposure = market_exposure(scenarios)
    assert exposure["bullish"] == [("gold", pytest.approx(1.4)), ("oil", pytest.approx(0.8))]
    assert exposure["bearish"] == [("airlines", pytest.approx(0.8))]


VALID_PATH = """
    - id: {id}
      name: Path {id}
      base_probability: {base}
      triggers: [word]
"""


def _registry(tmp_path, paths):
    body = "- id: s\n  theme: Theme\n  paths:" + "".join(VALID_PATH.format(id=i, base=b) for i, b in paths)
    path = tmp_path / "scenarios.yaml"
    path.write_text(body)
    return path


def test_registry_loads_valid_file(tmp_path):
    scenarios = load_scenarios(_registry(tmp_path, [("a", 40), ("b", 60)]))
    assert scenarios[0].title == "Theme"
    assert scenarios[0].paths[1].triggers == ("word",)


@pytest.mark.parametrize(
    "paths",
    [
        [("a", 100)],
        [("a", 40), ("b", 50)],
        [("a", 50), ("a", 50)],
        [("a", 20), ("b", 20), ("c", 20), ("d", 20), ("e", 20)],
    ],
)
def test_registry_rejects_invalid_scenarios(tmp_path, paths):
    with pytest.raises(RegistryError):
        load_scenarios(_registry(tmp_path, paths))


def test_bundled_registry_is_valid():
    assert len(default_scenarios()) == 8
