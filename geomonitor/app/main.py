"""FastAPI web application for the geopolitical situation monitor."""

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query

from .models import (
    ConnectionsResponse,
    ExposureResponse,
    GraphResponse,
    RiskPathResponse,
    SupplyChainResponse,
)
from .pipeline import MonitorPipeline
from ..config.settings import settings
from ..graph.knowledge_graph import KnowledgeGraph
from ..news.locations import filter_by_location, supported_cities
from ..scenarios.engine import market_exposure

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_pipeline() -> MonitorPipeline:
    return MonitorPipeline.from_settings()


@lru_cache(maxsize=1)
def get_graph() -> KnowledgeGraph:
    return KnowledgeGraph.from_yaml()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fail fast on malformed feeds, registries or graph data
    get_pipeline()
    get_graph()
    logger.info("[APP] Registries loaded, serving on port %d", settings.port)
    yield


app = FastAPI(title="Geopolitical Situation Monitor", lifespan=lifespan)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# ============================================================================
# Cycle State Endpoints
# ============================================================================


@app.get("/api/state")
async def get_state(pipeline: MonitorPipeline = Depends(get_pipeline)):
    """Full result of the latest cycle."""
    state = await pipeline.get_state()
    return state.to_dict()


@app.get("/api/news")
async def get_news(
    city: Optional[str] = None,
    limit: int = Query(100, ge=1, le=1000),
    pipeline: MonitorPipeline = Depends(get_pipeline),
):
    """News corpus, optionally filtered to what a reader in a city would see."""
    state = await pipeline.get_state()
    items = filter_by_location(state.news, city)
    return {
        "city": city,
        "total": len(items),
        "items": [item.to_dict() for item in items[:limit]],
    }


@app.get("/api/signals")
async def get_signals(pipeline: MonitorPipeline = Depends(get_pipeline)):
    state = await pipeline.get_state()
    return {
        "signals": [s.to_dict() for s in state.signals],
        "alerts": [s.to_dict() for s in state.alerts],
    }


@app.get("/api/scenarios")
async def get_scenarios(pipeline: MonitorPipeline = Depends(get_pipeline)):
    state = await pipeline.get_state()
    return [s.to_dict() for s in state.scenarios]


@app.get("/api/summary")
async def get_summary(pipeline: MonitorPipeline = Depends(get_pipeline)):
    state = await pipeline.get_state()
    return {
        **state.summary.to_dict(),
        "clusters": {name: len(items) for name, items in state.clusters.items()},
    }


@app.get("/api/exposure", response_model=ExposureResponse)
async def get_exposure(pipeline: MonitorPipeline = Depends(get_pipeline)):
    """Market tilt implied by the leading path of every scenario."""
    state = await pipeline.get_state()
    exposure = market_exposure(state.scenarios)
    return ExposureResponse(
        bullish=[{"market": m, "weight": round(w, 3)} for m, w in exposure["bullish"]],
        bearish=[{"market": m, "weight": round(w, 3)} for m, w in exposure["bearish"]],
    )


@app.get("/api/cities")
async def list_cities():
    return {"cities": supported_cities()}


# ============================================================================
# Knowledge Graph Endpoints
# ============================================================================


@app.get("/api/relationships", response_model=GraphResponse)
async def get_relationships(graph: KnowledgeGraph = Depends(get_graph)):
    return graph.get_graph()


@app.get("/api/relationships/{node_id}", response_model=ConnectionsResponse)
async def get_node_connections(node_id: str, graph: KnowledgeGraph = Depends(get_graph)):
    node = graph.node(node_id)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Unknown node '{node_id}'")
    return {"node": node.to_dict(), "connections": graph.connections(node_id)}


@app.get("/api/supply-chain/{commodity}", response_model=SupplyChainResponse)
async def get_supply_chain(commodity: str, graph: KnowledgeGraph = Depends(get_graph)):
    return graph.supply_chain_exposure(commodity)


@app.get("/api/risk-path", response_model=RiskPathResponse)
async def get_risk_path(
    source: str = Query(..., alias="from"),
    target: str = Query(..., alias="to"),
    graph: KnowledgeGraph = Depends(get_graph),
):
    """Shortest transmission path between two nodes."""
    path = graph.risk_transmission_path(source, target)
    return RiskPathResponse(
        source=source,
        target=target,
        found=path is not None,
        path=[hop.to_dict() for hop in path or []],
    )


if __name__ == "__main__":
    uvicorn.run(
        "geomonitor.app.main:app",
        host=settings.host,
        port=settings.port,
    )
