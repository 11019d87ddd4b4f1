"""Static knowledge graph and relationship queries."""

from .knowledge_graph import KnowledgeGraph
from .models import GraphEdge, GraphNode, PathHop

__all__ = ["GraphEdge", "GraphNode", "KnowledgeGraph", "PathHop"]
