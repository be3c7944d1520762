"""
Graph Model

Typed data structures for a service architecture dependency graph:

Vertices:
- SERVICE:  {handle, id, name, attrs}
- DATABASE: {handle, id, name, attrs (owner, writers)}

Edges:
- CALLS  (Service → Service/Database): CallAttrs {endpoints, rate_per_min, per_item, sync, dep_kind}
- READS  (Service → Database):         ReadAttrs
- WRITES (Service → Database):         WriteAttrs

Nodes live in an arena addressed by integer handles, with an id → handle
lookup table. Edges reference handles, and the graph refuses an edge whose
endpoint handle is not in the arena, so a dangling reference cannot be built.
The outgoing/incoming adjacency indices are only ever updated by add_edge.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import networkx as nx

from .errors import GraphError


# =============================================================================
# Enumerations
# =============================================================================

class NodeKind(str, Enum):
    """Vertex types in the graph"""
    SERVICE = "SERVICE"
    DATABASE = "DATABASE"


class EdgeKind(str, Enum):
    """Edge types in the graph"""
    CALLS = "CALLS"
    READS = "READS"
    WRITES = "WRITES"


def node_id(kind: NodeKind, name: str) -> str:
    """Deterministic node id derived from (kind, lowercased name)."""
    return f"{kind.value}:{name.strip().lower()}"


# =============================================================================
# Edge Attributes
# =============================================================================

@dataclass(frozen=True)
class CallAttrs:
    """Metadata carried by a CALLS edge."""
    endpoints: Tuple[str, ...] = ()
    rate_per_min: int = 0
    per_item: bool = False
    sync: bool = True
    dep_kind: str = ""

    @property
    def count(self) -> int:
        return len(self.endpoints)

    @property
    def weight(self) -> int:
        """Call-count weight used by coupling ratios (endpoint count, at least 1)."""
        return self.count if self.count > 0 else 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "endpoints": list(self.endpoints),
            "count": self.count,
            "rate_per_min": self.rate_per_min,
            "per_item": self.per_item,
            "sync": self.sync,
            "dep_kind": self.dep_kind,
        }


@dataclass(frozen=True)
class ReadAttrs:
    """READS edges carry no metadata."""

    def to_dict(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class WriteAttrs:
    """WRITES edges mark the writer as a (co-)owner of the database."""
    owner: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"owner": self.owner}


EdgeAttrs = Union[CallAttrs, ReadAttrs, WriteAttrs]

_ATTR_TYPES = {
    EdgeKind.CALLS: CallAttrs,
    EdgeKind.READS: ReadAttrs,
    EdgeKind.WRITES: WriteAttrs,
}


# =============================================================================
# Vertex / Edge
# =============================================================================

@dataclass
class Node:
    """Graph vertex. Only ``attrs`` may change after creation."""
    handle: int
    id: str
    name: str
    kind: NodeKind
    attrs: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_service(self) -> bool:
        return self.kind == NodeKind.SERVICE

    @property
    def is_database(self) -> bool:
        return self.kind == NodeKind.DATABASE

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self.id, "name": self.name, "kind": self.kind.value}
        if self.attrs:
            result["attrs"] = dict(self.attrs)
        return result


@dataclass(frozen=True)
class Edge:
    """Directed edge between two node handles."""
    index: int
    source: int
    target: int
    kind: EdgeKind
    attrs: EdgeAttrs

    @property
    def call(self) -> CallAttrs:
        if not isinstance(self.attrs, CallAttrs):
            raise GraphError(f"edge #{self.index} is {self.kind.value}, not CALLS")
        return self.attrs

    @property
    def is_sync_call(self) -> bool:
        return self.kind == EdgeKind.CALLS and self.call.sync


# =============================================================================
# Graph
# =============================================================================

class Graph:
    """
    Arena-backed dependency graph with adjacency indices.

    Built once by the mapper, then frozen. A fix produces a new Graph from a
    new spec instead of patching an existing one.
    """

    def __init__(self):
        self._nodes: List[Node] = []
        self._by_id: Dict[str, int] = {}
        self._edges: List[Edge] = []
        self._outgoing: Dict[int, List[Edge]] = defaultdict(list)
        self._incoming: Dict[int, List[Edge]] = defaultdict(list)
        self._frozen = False

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def ensure_node(self, kind: NodeKind, name: str) -> int:
        """Return the handle for (kind, name), creating the node if needed."""
        self._check_mutable("ensure_node")
        clean = name.strip()
        if not clean:
            raise GraphError(f"ensure_node: empty {kind.value} name")
        nid = node_id(kind, clean)
        handle = self._by_id.get(nid)
        if handle is not None:
            return handle
        handle = len(self._nodes)
        self._nodes.append(Node(handle=handle, id=nid, name=clean, kind=kind))
        self._by_id[nid] = handle
        return handle

    def add_edge(self, source: int, target: int, kind: EdgeKind,
                 attrs: Optional[EdgeAttrs] = None) -> Edge:
        """Append an edge; both endpoints must already be in the arena."""
        self._check_mutable("add_edge")
        for handle in (source, target):
            if not 0 <= handle < len(self._nodes):
                raise GraphError(f"add_edge: unknown node handle {handle}")
        expected = _ATTR_TYPES[kind]
        if attrs is None:
            attrs = expected()
        if not isinstance(attrs, expected):
            raise GraphError(
                f"add_edge: {kind.value} edge cannot carry {type(attrs).__name__}"
            )
        edge = Edge(index=len(self._edges), source=source, target=target, kind=kind, attrs=attrs)
        self._edges.append(edge)
        self._outgoing[source].append(edge)
        self._incoming[target].append(edge)
        return edge

    def annotate(self, handle: int, key: str, value: Any) -> None:
        """Attribute annotation is the only node mutation allowed."""
        self._check_mutable("annotate")
        self.node(handle).attrs[key] = value

    def freeze(self) -> "Graph":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self, op: str) -> None:
        if self._frozen:
            raise GraphError(f"{op}: graph is frozen")

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def node(self, handle: int) -> Node:
        try:
            return self._nodes[handle]
        except IndexError:
            raise GraphError(f"unknown node handle {handle}") from None

    def edge(self, index: int) -> Edge:
        if not 0 <= index < len(self._edges):
            raise GraphError(f"unknown edge index {index}")
        return self._edges[index]

    def find(self, kind: NodeKind, name: str) -> Optional[Node]:
        handle = self._by_id.get(node_id(kind, name))
        return self._nodes[handle] if handle is not None else None

    def has_node(self, nid: str) -> bool:
        return nid in self._by_id

    def name_of(self, nid: str) -> str:
        """Display name for a node id (falls back to the id itself)."""
        handle = self._by_id.get(nid)
        return self._nodes[handle].name if handle is not None else nid

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edges)

    def services(self) -> Iterator[Node]:
        return (n for n in self._nodes if n.is_service)

    def databases(self) -> Iterator[Node]:
        return (n for n in self._nodes if n.is_database)

    def edges_of_kind(self, kind: EdgeKind) -> List[Edge]:
        return [e for e in self._edges if e.kind == kind]

    def outgoing(self, handle: int, kind: Optional[EdgeKind] = None) -> List[Edge]:
        edges = self._outgoing.get(handle, [])
        return [e for e in edges if e.kind == kind] if kind else list(edges)

    def incoming(self, handle: int, kind: Optional[EdgeKind] = None) -> List[Edge]:
        edges = self._incoming.get(handle, [])
        return [e for e in edges if e.kind == kind] if kind else list(edges)

    def __len__(self) -> int:
        return len(self._nodes)

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def to_networkx(self, edge_kind: Optional[EdgeKind] = None,
                    services_only: bool = False) -> nx.DiGraph:
        """Project onto a NetworkX DiGraph keyed by node handle."""
        g = nx.DiGraph()
        for n in self._nodes:
            if services_only and not n.is_service:
                continue
            g.add_node(n.handle, id=n.id, name=n.name, kind=n.kind.value)
        for e in self._edges:
            if edge_kind and e.kind != edge_kind:
                continue
            if e.source in g and e.target in g:
                g.add_edge(e.source, e.target, index=e.index, kind=e.kind.value)
        return g

    def adjacency(self) -> Dict[str, List[Tuple[str, str]]]:
        """Outgoing adjacency keyed by node id, for structural comparison."""
        out: Dict[str, List[Tuple[str, str]]] = {}
        for n in self._nodes:
            out[n.id] = [(e.kind.value, self._nodes[e.target].id) for e in self._outgoing.get(n.handle, [])]
        return out

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "num_services": sum(1 for _ in self.services()),
            "num_databases": sum(1 for _ in self.databases()),
            "num_edges": len(self._edges),
            "edges_by_kind": {k.value: len(self.edges_of_kind(k)) for k in EdgeKind},
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self._nodes],
            "edges": [
                {
                    "index": e.index,
                    "from": self._nodes[e.source].id,
                    "to": self._nodes[e.target].id,
                    "kind": e.kind.value,
                    "attrs": e.attrs.to_dict(),
                }
                for e in self._edges
            ],
        }

    def __repr__(self) -> str:
        stats = self.get_statistics()
        return (f"Graph(services={stats['num_services']}, databases={stats['num_databases']}, "
                f"edges={stats['num_edges']})")
