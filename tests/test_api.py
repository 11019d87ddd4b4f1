import pytest
from fastapi.testclient import TestClient

from geomonitor.app.main import app, get_pipeline
from geomonitor.app.pipeline import MonitorPipeline
from geomonitor.news.models import SCOPE_LOCAL, SCOPE_REGIONAL
from geomonitor.utils.cache import TTLCache


class StaticAggregator:
    def __init__(self, items):
        self.items = items

    async def get_latest(self, now=None):
        return self.items


@pytest.fixture
def client(make_item):
    items = [
        make_item("Oil sanctions tighten on Russia", relevance=6.0),
        make_item("EU summit on tariffs", scope=SCOPE_REGIONAL, region="europe"),
        make_item("Sydney ferry strike", scope=SCOPE_LOCAL, cities=("sydney",)),
    ]
    pipeline = MonitorPipeline(StaticAggregator(items), cache=TTLCache())
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_news_is_filtered_by_city(client):
    london = client.get("/api/news", params={"city": "London"}).json()
    assert [i["title"] for i in london["items"]] == ["Oil sanctions tighten on Russia", "EU summit on tariffs"]

    anywhere = client.get("/api/news").json()
    assert anywhere["total"] == 1


def test_cycle_endpoints(client):
    signals = client.get("/api/signals").json()
    assert any(s["id"] == "sanctions" for s in signals["signals"])

    scenarios = client.get("/api/scenarios").json()
    assert len(scenarios) == 8
    assert all("leadingPath" in s for s in scenarios)

    summary = client.get("/api/summary").json()
    assert summary["newsAnalyzed"] == 3
    assert "clusters" in summary

    exposure = client.get("/api/exposure").json()
    assert set(exposure) == {"bullish", "bearish"}

    state = client.get("/api/state").json()
    assert len(state["news"]) == 3


def test_cities(client):
    assert "london" in client.get("/api/cities").json()["cities"]


def test_relationship_endpoints(client):
    graph = client.get("/api/relationships").json()
    assert len(graph["nodes"]) == 25

    taiwan = client.get("/api/relationships/taiwan").json()
    assert taiwan["node"]["name"] == "Taiwan"
    assert [c["connectedNode"] for c in taiwan["connections"]] == ["us", "china", "semiconductors"]

    assert client.get("/api/relationships/atlantis").status_code == 404


def test_supply_chain_endpoint(client):
    oil = client.get("/api/supply-chain/oil").json()
    assert [p["id"] for p in oil["producers"]] == ["russia", "saudi"]

    unknown = client.get("/api/supply-chain/unobtainium").json()
    assert unknown["producers"] == []
    assert unknown["risks"] == ["Supply disruption", "Demand shock", "Policy intervention"]


def test_risk_path_endpoint(client):
    found = client.get("/api/risk-path", params={"from": "us", "to": "oil"}).json()
    assert found["found"] is True
    assert [h["nodeId"] for h in found["path"]] == ["us", "russia", "oil"]
    assert found["path"][0]["connectionType"] is None

    missing = client.get("/api/risk-path", params={"from": "us", "to": "atlantis"}).json()
    assert missing == {"source": "us", "target": "atlantis", "found": False, "path": []}
