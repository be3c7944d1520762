"""
Database Detectors

- shared_database:   several services calling the same database-like node
- shared_db_writes:  several services writing the same database
- cross_db_read:     a service reading a database owned by another service
"""

from typing import Dict, List

from archgraph.core.models import EdgeKind, Graph, Node
from archgraph.core.names import looks_like_database
from ..models import AntiPatternKind, Detection, Severity
from .base import Detector


def _database_like(node: Node) -> bool:
    return node.is_database or looks_like_database(node.name)


class SharedDatabaseDetector(Detector):
    """Distinct services with a CALLS edge into the same database-like node."""

    name = AntiPatternKind.SHARED_DATABASE.value

    def detect(self, graph: Graph) -> List[Detection]:
        min_clients = self.thresholds.shared_db_min_clients
        high_clients = self.thresholds.shared_db_high_clients
        detections = []

        for db in graph.nodes:
            if not _database_like(db):
                continue

            clients: List[int] = []
            edges: List[int] = []
            for e in graph.incoming(db.handle, EdgeKind.CALLS):
                caller = graph.node(e.source)
                if e.source == db.handle or not caller.is_service or _database_like(caller):
                    continue
                edges.append(e.index)
                if e.source not in clients:
                    clients.append(e.source)

            if len(clients) < min_clients:
                continue

            severity = Severity.HIGH if len(clients) >= high_clients else Severity.MEDIUM
            detections.append(Detection(
                kind=AntiPatternKind.SHARED_DATABASE,
                severity=severity,
                title="Shared database",
                summary="Multiple services depend on the same database node",
                nodes=[db.id] + [graph.node(h).id for h in clients],
                edges=edges,
                evidence={
                    "db": db.name,
                    "clients": len(clients),
                    "client_names": [graph.node(h).name for h in clients],
                    "min_clients": min_clients,
                },
            ))
        return detections


class SharedDbWritesDetector(Detector):
    """Databases written by more than one distinct service."""

    name = AntiPatternKind.SHARED_DB_WRITES.value

    def detect(self, graph: Graph) -> List[Detection]:
        writers: Dict[int, List[int]] = {}
        edges: Dict[int, List[int]] = {}
        for e in graph.edges_of_kind(EdgeKind.WRITES):
            edges.setdefault(e.target, []).append(e.index)
            ws = writers.setdefault(e.target, [])
            if e.source not in ws:
                ws.append(e.source)

        detections = []
        for db_handle, ws in writers.items():
            if len(ws) <= 1:
                continue
            db = graph.node(db_handle)
            detections.append(Detection(
                kind=AntiPatternKind.SHARED_DB_WRITES,
                severity=Severity.HIGH,
                title="Multiple writers to DB",
                summary="More than one service writes to same database",
                nodes=[db.id] + [graph.node(h).id for h in ws],
                edges=edges[db_handle],
                evidence={"db": db.name, "writers": [graph.node(h).name for h in ws]},
            ))
        return detections


class CrossDbReadDetector(Detector):
    """READS edges into a database from a service that does not write it."""

    name = AntiPatternKind.CROSS_DB_READ.value

    def detect(self, graph: Graph) -> List[Detection]:
        detections = []
        for e in graph.edges_of_kind(EdgeKind.READS):
            db = graph.node(e.target)
            owner = db.attrs.get("owner")
            if not owner:
                continue
            writers = {w.lower() for w in db.attrs.get("writers", [owner])}
            reader = graph.node(e.source)
            if reader.name.lower() in writers:
                continue

            detections.append(Detection(
                kind=AntiPatternKind.CROSS_DB_READ,
                severity=Severity.MEDIUM,
                title="Cross-DB read",
                summary="Service reads DB owned by another service",
                nodes=[reader.id, db.id],
                edges=[e.index],
                evidence={"owner": owner, "reader": reader.name, "db": db.name},
            ))
        return detections
