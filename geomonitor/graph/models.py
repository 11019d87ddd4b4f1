"""Data models for the knowledge graph."""

from dataclasses import dataclass
from typing import Optional

NODE_TYPES = ("country", "bloc", "industry", "commodity")


@dataclass(frozen=True)
class GraphNode:
    id: str
    name: str
    type: str
    importance: int
    bloc: Optional[str] = None

    def to_dict(self) -> dict:
        d = {"id": self.id, "name": self.name, "type": self.type, "importance": self.importance}
        if self.bloc:
            d["bloc"] = self.bloc
        return d


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    type: str
    strength: int
    label: str

    def other(self, node_id: str) -> str:
        """Endpoint opposite to node_id."""
        return self.target if self.source == node_id else self.source

    def touches(self, node_id: str) -> bool:
        return node_id in (self.source, self.target)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "strength": self.strength,
            "label": self.label,
        }


@dataclass(frozen=True)
class PathHop:
    """One node on a risk transmission path and the edge used to reach it."""

    node_id: str
    node_name: str
    node_type: str
    connection_type: Optional[str] = None
    connection_label: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "nodeId": self.node_id,
            "nodeName": self.node_name,
            "nodeType": self.node_type,
            "connectionType": self.connection_type,
            "connectionLabel": self.connection_label,
        }
