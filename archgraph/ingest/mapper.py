"""
Spec → Graph Mapper

Compiles a typed ArchitectureSpec into a frozen Graph.

Two document styles are supported:

calls style (no ``dependencies``):
    one node per declared database / datastore / service, one CALLS edge per
    service call, one READS / WRITES edge per database reference.

dependency style (non-empty ``dependencies``):
    node kinds come from the declared database set or the database-name
    heuristic, and every dependency becomes a CALLS edge carrying ``sync``
    and ``dep_kind``. Service database references are still honoured.

Mapping is deterministic: nodes are created in document order and ids are
derived from (kind, lowercased name), so mapping the same spec twice yields
structurally identical graphs.
"""

import logging
from typing import Set

from archgraph.core.models import CallAttrs, EdgeKind, Graph, NodeKind, WriteAttrs
from archgraph.core.names import looks_like_database, normalize_type, strip_entity_prefix
from .spec_model import ArchitectureSpec, ServiceSpec

logger = logging.getLogger(__name__)


class SpecMapper:
    """Builds one Graph per call to ``map``; holds no state between calls."""

    def map(self, spec: ArchitectureSpec) -> Graph:
        graph = Graph()
        if spec is None:
            return graph.freeze()

        if spec.dependency_style:
            self._map_dependency_style(spec, graph)
        else:
            self._map_calls_style(spec, graph)

        logger.debug(f"Mapped spec to {graph!r}")
        return graph.freeze()

    # ------------------------------------------------------------------
    # Calls style
    # ------------------------------------------------------------------

    def _map_calls_style(self, spec: ArchitectureSpec, graph: Graph) -> None:
        self._declare_databases(spec, graph)

        # isolated services must still appear, so declare all before wiring
        for svc in spec.services:
            name = strip_entity_prefix(svc.name)
            if name:
                graph.ensure_node(self._declared_kind(svc), name)

        for svc in spec.services:
            name = strip_entity_prefix(svc.name)
            if not name or self._declared_kind(svc) == NodeKind.DATABASE:
                continue
            source = graph.ensure_node(NodeKind.SERVICE, name)

            for call in svc.calls:
                target_name = strip_entity_prefix(call.to)
                if not target_name:
                    continue
                target = self._call_target(graph, target_name)
                graph.add_edge(source, target, EdgeKind.CALLS, CallAttrs(
                    endpoints=tuple(call.endpoint_names),
                    rate_per_min=call.rate_per_min,
                    per_item=call.per_item,
                    sync=call.is_sync,
                ))

            self._map_database_refs(svc, source, graph)

    @staticmethod
    def _call_target(graph: Graph, name: str) -> int:
        """Reuse an existing service (or declared database) node, else create a service."""
        for kind in (NodeKind.SERVICE, NodeKind.DATABASE):
            node = graph.find(kind, name)
            if node is not None:
                return node.handle
        return graph.ensure_node(NodeKind.SERVICE, name)

    # ------------------------------------------------------------------
    # Dependency style
    # ------------------------------------------------------------------

    def _map_dependency_style(self, spec: ArchitectureSpec, graph: Graph) -> None:
        db_names = self._database_names(spec)

        def kind_for(name: str) -> NodeKind:
            key = name.lower()
            if key in db_names or looks_like_database(name):
                return NodeKind.DATABASE
            return NodeKind.SERVICE

        for svc in spec.services:
            name = strip_entity_prefix(svc.name)
            if name:
                graph.ensure_node(kind_for(name), name)
        self._declare_databases(spec, graph)

        for dep in spec.dependencies:
            from_name = strip_entity_prefix(dep.from_)
            to_name = strip_entity_prefix(dep.to)
            if not from_name or not to_name:
                continue
            source = graph.ensure_node(kind_for(from_name), from_name)
            target = graph.ensure_node(kind_for(to_name), to_name)
            graph.add_edge(source, target, EdgeKind.CALLS, CallAttrs(
                sync=dep.is_sync,
                dep_kind=dep.kind.strip().lower(),
            ))

        for svc in spec.services:
            name = strip_entity_prefix(svc.name)
            if name and kind_for(name) == NodeKind.SERVICE:
                self._map_database_refs(svc, graph.ensure_node(NodeKind.SERVICE, name), graph)

    @staticmethod
    def _database_names(spec: ArchitectureSpec) -> Set[str]:
        names = {strip_entity_prefix(d.name).lower() for d in spec.databases + spec.datastores}
        for svc in spec.services:
            if normalize_type(svc.type) == "database":
                names.add(strip_entity_prefix(svc.name).lower())
        names.discard("")
        return names

    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------

    @staticmethod
    def _declared_kind(svc: ServiceSpec) -> NodeKind:
        return NodeKind.DATABASE if normalize_type(svc.type) == "database" else NodeKind.SERVICE

    @staticmethod
    def _declare_databases(spec: ArchitectureSpec, graph: Graph) -> None:
        for entry in spec.databases + spec.datastores:
            name = strip_entity_prefix(entry.name)
            if name:
                graph.ensure_node(NodeKind.DATABASE, name)

    @staticmethod
    def _map_database_refs(svc: ServiceSpec, source: int, graph: Graph) -> None:
        service_name = graph.node(source).name

        for db in svc.databases.reads:
            db_name = strip_entity_prefix(db)
            if db_name:
                graph.add_edge(source, graph.ensure_node(NodeKind.DATABASE, db_name), EdgeKind.READS)

        for db in svc.databases.writes:
            db_name = strip_entity_prefix(db)
            if not db_name:
                continue
            target = graph.ensure_node(NodeKind.DATABASE, db_name)
            graph.add_edge(source, target, EdgeKind.WRITES, WriteAttrs(owner=True))

            # first writer owns the database; every writer is recorded
            node = graph.node(target)
            writers = list(node.attrs.get("writers", []))
            if service_name not in writers:
                writers.append(service_name)
            graph.annotate(target, "writers", writers)
            if "owner" not in node.attrs:
                graph.annotate(target, "owner", service_name)


def to_graph(spec: ArchitectureSpec) -> Graph:
    """Convenience wrapper around SpecMapper().map(spec)."""
    return SpecMapper().map(spec)
