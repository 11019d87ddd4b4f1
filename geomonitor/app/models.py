"""Pydantic response models for the web API."""

from pydantic import BaseModel
from typing import Optional


class GraphNodeData(BaseModel):
    """A node of the relationship map."""

    id: str
    name: str
    type: str
    importance: int
    bloc: Optional[str] = None


class GraphEdgeData(BaseModel):
    """A typed, weighted relationship between two nodes."""

    source: str
    target: str
    type: str
    strength: int
    label: str


class GraphResponse(BaseModel):
    nodes: list[GraphNodeData]
    edges: list[GraphEdgeData]


class ConnectionData(GraphEdgeData):
    """Edge annotated with the node on the other end."""

    connectedNode: str
    connectedNodeName: Optional[str] = None


class ConnectionsResponse(BaseModel):
    node: GraphNodeData
    connections: list[ConnectionData] = []


class ProducerData(BaseModel):
    id: str
    country: str
    share: str


class ConsumerData(BaseModel):
    id: str
    country: str
    importance: str


class SupplyChainResponse(BaseModel):
    """Producers, consumers and risk factors for one commodity."""

    commodity: str
    producers: list[ProducerData] = []
    consumers: list[ConsumerData] = []
    risks: list[str] = []


class PathHopData(BaseModel):
    nodeId: str
    nodeName: str
    nodeType: str
    connectionType: Optional[str] = None
    connectionLabel: Optional[str] = None


class RiskPathResponse(BaseModel):
    """Shortest transmission path; found is False when the nodes are not connected."""

    source: str
    target: str
    found: bool
    path: list[PathHopData] = []


class ExposureEntry(BaseModel):
    market: str
    weight: float


class ExposureResponse(BaseModel):
    """Probability-weighted market tilt from leading scenario paths."""

    bullish: list[ExposureEntry] = []
    bearish: list[ExposureEntry] = []
