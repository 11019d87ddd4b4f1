"""Knowledge Graph - static relationship map and path queries.

Loaded once from YAML and never mutated. Query misses return None or an
empty result rather than raising.
"""

import logging
from collections import deque
from pathlib import Path
from typing import Optional

import yaml

from ..config.settings import settings
from ..errors import RegistryError
from .models import NODE_TYPES, GraphEdge, GraphNode, PathHop

logger = logging.getLogger(__name__)

DEFAULT_COMMODITY_RISKS = ("Supply disruption", "Demand shock", "Policy intervention")


def _parse_node(data: dict) -> GraphNode:
    for key in ("id", "name", "type"):
        if not data.get(key):
            raise RegistryError(f"Graph node missing '{key}': {data}")
    if data["type"] not in NODE_TYPES:
        raise RegistryError(f"Graph node '{data['id']}' has unknown type '{data['type']}'")

    importance = data.get("importance", 5)
    if not isinstance(importance, int) or not 1 <= importance <= 10:
        raise RegistryError(f"Graph node '{data['id']}' importance must be an int in 1-10")

    return GraphNode(
        id=str(data["id"]),
        name=data["name"],
        type=data["type"],
        importance=importance,
        bloc=data.get("bloc"),
    )


def _parse_edge(data: dict, node_ids: set) -> GraphEdge:
    for key in ("source", "target", "type"):
        if not data.get(key):
            raise RegistryError(f"Graph edge missing '{key}': {data}")
    for endpoint in (data["source"], data["target"]):
        if endpoint not in node_ids:
            raise RegistryError(f"Graph edge references unknown node '{endpoint}'")

    strength = data.get("strength")
    if not isinstance(strength, int) or not 1 <= strength <= 10:
        raise RegistryError(f"Graph edge {data['source']}->{data['target']} strength must be an int in 1-10")

    return GraphEdge(
        source=data["source"],
        target=data["target"],
        type=data["type"],
        strength=strength,
        label=str(data.get("label", "")),
    )


class KnowledgeGraph:
    """Read-only graph of countries, blocs, industries and commodities."""

    def __init__(
        self,
        nodes: list[GraphNode],
        edges: list[GraphEdge],
        commodity_risks: Optional[dict[str, list[str]]] = None,
    ):
        self.nodes = tuple(nodes)
        self.edges = tuple(edges)
        self.commodity_risks = {k: tuple(v) for k, v in (commodity_risks or {}).items()}
        self._nodes_by_id = {n.id: n for n in self.nodes}

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> "KnowledgeGraph":
        """
        Load and validate the graph.

        Args:
            path: YAML file (default: settings.knowledge_graph_file)

        Raises:
            RegistryError: On duplicate node ids, dangling edges or bad weights
        """
        path = path or settings.knowledge_graph_file
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        nodes = [_parse_node(n) for n in data.get("nodes") or []]
        if not nodes:
            raise RegistryError(f"No graph nodes defined in {path}")

        node_ids = {n.id for n in nodes}
        if len(node_ids) != len(nodes):
            raise RegistryError("Duplicate node ids in knowledge graph")

        edges = [_parse_edge(e, node_ids) for e in data.get("edges") or []]
        risks = data.get("commodity_risks") or {}

        logger.info("[GRAPH] Loaded %d nodes, %d edges", len(nodes), len(edges))
        return cls(nodes, edges, risks)

    def get_graph(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }

    def node(self, node_id: str) -> Optional[GraphNode]:
        return self._nodes_by_id.get(node_id)

    def connections(self, node_id: str) -> list[dict]:
        """
        Edges touching a node, annotated with the node on the other end.

        Returns:
            Edge dicts with connectedNode and connectedNodeName added;
            empty for an unknown node
        """
        result = []
        for edge in self.edges:
            if not edge.touches(node_id):
                continue
            other_id = edge.other(node_id)
            other = self.node(other_id)
            result.append({
                **edge.to_dict(),
                "connectedNode": other_id,
                "connectedNodeName": other.name if other else None,
            })
        return result

    def supply_chain_exposure(self, commodity_id: str) -> dict:
        """
        Producers and consumers of a commodity plus its known risk factors.

        Producers are sources of production edges into the commodity,
        consumers sources of demand edges. Each node is listed once.
        """
        producers = self._edge_sources(commodity_id, "production")
        consumers = self._edge_sources(commodity_id, "demand")

        return {
            "commodity": commodity_id,
            "producers": [
                {"id": node.id, "country": node.name, "share": edge.label}
                for node, edge in producers
            ],
            "consumers": [
                {"id": node.id, "country": node.name, "importance": edge.label}
                for node, edge in consumers
            ],
            "risks": list(self.commodity_risks.get(commodity_id, DEFAULT_COMMODITY_RISKS)),
        }

    def _edge_sources(self, target_id: str, edge_type: str) -> list[tuple[GraphNode, GraphEdge]]:
        seen = set()
        result = []
        for edge in self.edges:
            if edge.target != target_id or edge.type != edge_type or edge.source in seen:
                continue
            node = self.node(edge.source)
            if node is None:
                continue
            seen.add(edge.source)
            result.append((node, edge))
        return result

    def risk_transmission_path(self, from_id: str, to_id: str) -> Optional[list[PathHop]]:
        """
        Shortest path between two nodes over the undirected edge set.

        Neighbours are expanded in edge-declaration order, so the first
        shortest path found is reproducible. Each hop carries the edge used
        to reach it; the starting hop has no connection.

        Args:
            from_id: Starting node id
            to_id: Destination node id

        Returns:
            Ordered hops, or None if either node is absent or they are disconnected
        """
        start = self.node(from_id)
        if start is None or self.node(to_id) is None:
            return None

        # node id -> (predecessor id, edge used to reach it)
        came_from: dict[str, tuple[Optional[str], Optional[GraphEdge]]] = {from_id: (None, None)}
        queue = deque([from_id])

        while queue:
            current = queue.popleft()
            if current == to_id:
                return self._build_path(to_id, came_from)

            for edge in self.edges:
                if not edge.touches(current):
                    continue
                neighbour = edge.other(current)
                if neighbour in came_from:
                    continue
                came_from[neighbour] = (current, edge)
                queue.append(neighbour)

        return None

    def _build_path(
        self,
        to_id: str,
        came_from: dict[str, tuple[Optional[str], Optional[GraphEdge]]],
    ) -> list[PathHop]:
        hops = []
        node_id: Optional[str] = to_id
        while node_id is not None:
            predecessor, edge = came_from[node_id]
            node = self._nodes_by_id[node_id]
            hops.append(PathHop(
                node_id=node.id,
                node_name=node.name,
                node_type=node.type,
                connection_type=edge.type if edge else None,
                connection_label=edge.label if edge else None,
            ))
            node_id = predecessor
        hops.reverse()
        return hops
