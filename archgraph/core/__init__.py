"""
Archgraph Core Module

Graph model, error hierarchy, exporters and the external layout renderer.

Graph Model:
    Vertices: Service, Database
    Edges: CALLS, READS, WRITES

Usage:
    from archgraph.core import Graph, NodeKind, EdgeKind, GraphExporter

    graph = Graph()
    a = graph.ensure_node(NodeKind.SERVICE, "orders")
    b = graph.ensure_node(NodeKind.DATABASE, "orders-db")
    graph.add_edge(a, b, EdgeKind.WRITES)
    print(GraphExporter().to_dot(graph.freeze(), title="demo"))
"""

from .errors import (
    ArchGraphError,
    ParseError,
    ValidationError,
    GraphError,
    DetectorError,
    RenderError,
    VersioningIOError,
)
from .models import (
    NodeKind,
    EdgeKind,
    CallAttrs,
    ReadAttrs,
    WriteAttrs,
    Node,
    Edge,
    Graph,
    node_id,
)
from .graph_exporter import GraphExporter
from .renderer import render_dot

__all__ = [
    # Errors
    "ArchGraphError",
    "ParseError",
    "ValidationError",
    "GraphError",
    "DetectorError",
    "RenderError",
    "VersioningIOError",
    # Model
    "NodeKind",
    "EdgeKind",
    "CallAttrs",
    "ReadAttrs",
    "WriteAttrs",
    "Node",
    "Edge",
    "Graph",
    "node_id",
    # Export / render
    "GraphExporter",
    "render_dot",
]
