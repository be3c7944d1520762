"""
Coupling Detectors

- god_service:          service with excessive service-to-service call degree
- tight_coupling:       pair relying on each other through most of their sync traffic
- ping_pong_dependency: pair of services calling each other
- chatty_calls:         per-item or high-rate call edges
"""

from typing import Dict, FrozenSet, List, Set, Tuple

from archgraph.core.models import EdgeKind, Graph, Node
from archgraph.core.names import looks_like_database
from ..models import AntiPatternKind, Detection, Severity
from .base import Detector, service_call_edges


def _plain_service(node: Node) -> bool:
    return node.is_service and not looks_like_database(node.name)


class GodServiceDetector(Detector):
    """Services with unusually high incoming + outgoing CALLS degree."""

    name = AntiPatternKind.GOD_SERVICE.value

    def detect(self, graph: Graph) -> List[Detection]:
        threshold = self.thresholds.god_degree
        detections = []

        for node in graph.services():
            if not _plain_service(node):
                continue
            fan_out = sum(1 for e in graph.outgoing(node.handle, EdgeKind.CALLS)
                          if _plain_service(graph.node(e.target)))
            fan_in = sum(1 for e in graph.incoming(node.handle, EdgeKind.CALLS)
                         if _plain_service(graph.node(e.source)))
            degree = fan_in + fan_out
            if degree < threshold:
                continue

            detections.append(Detection(
                kind=AntiPatternKind.GOD_SERVICE,
                severity=Severity.MEDIUM,
                title="God service (high centrality)",
                summary="Service has unusually high incoming/outgoing dependencies",
                nodes=[node.id],
                evidence={"degree": degree, "in": fan_in, "out": fan_out, "threshold": threshold},
            ))
        return detections


class TightCouplingDetector(Detector):
    """
    For each service pair with synchronous calls in both directions, weigh
    each side's calls to the other (by endpoint count) against its total
    synchronous outgoing traffic. Both ratios and both raw counts must clear
    their thresholds.
    """

    name = AntiPatternKind.TIGHT_COUPLING.value

    def detect(self, graph: Graph) -> List[Detection]:
        ratio = self.thresholds.tight_coupling_ratio
        min_bidir = self.thresholds.tight_coupling_min_bidir

        toward: Dict[Tuple[int, int], int] = {}
        total_out: Dict[int, int] = {}
        for e in graph.edges_of_kind(EdgeKind.CALLS):
            if not e.call.sync or not graph.node(e.source).is_service:
                continue
            total_out[e.source] = total_out.get(e.source, 0) + e.call.weight
            if graph.node(e.target).is_service:
                key = (e.source, e.target)
                toward[key] = toward.get(key, 0) + e.call.weight

        detections = []
        seen: Set[FrozenSet[int]] = set()
        for (a, b) in toward:
            pair = frozenset((a, b))
            if a == b or pair in seen:
                continue
            seen.add(pair)

            ab = toward.get((a, b), 0)
            ba = toward.get((b, a), 0)
            if ab < min_bidir or ba < min_bidir:
                continue
            ra = ab / max(1, total_out.get(a, 0))
            rb = ba / max(1, total_out.get(b, 0))
            if ra < ratio or rb < ratio:
                continue

            detections.append(Detection(
                kind=AntiPatternKind.TIGHT_COUPLING,
                severity=Severity.HIGH,
                title="Tight coupling (synchronous mutual dependency)",
                summary="Services rely heavily on each other via synchronous calls",
                nodes=[graph.node(a).id, graph.node(b).id],
                evidence={
                    "ab": ab, "ba": ba,
                    "ra": round(ra, 4), "rb": round(rb, 4),
                    "min_bidir": min_bidir,
                    "ratio": ratio,
                },
            ))
        return detections


class PingPongDetector(Detector):
    """Two services that call each other; one detection per unordered pair."""

    name = AntiPatternKind.PING_PONG_DEPENDENCY.value

    def detect(self, graph: Graph) -> List[Detection]:
        directed: Dict[Tuple[int, int], List[int]] = {}
        for e in service_call_edges(graph):
            if e.source != e.target:
                directed.setdefault((e.source, e.target), []).append(e.index)

        detections = []
        seen: Set[FrozenSet[int]] = set()
        for (a, b), forward in directed.items():
            backward = directed.get((b, a))
            pair = frozenset((a, b))
            if not backward or pair in seen:
                continue
            seen.add(pair)

            a_id, b_id = graph.node(a).id, graph.node(b).id
            detections.append(Detection(
                kind=AntiPatternKind.PING_PONG_DEPENDENCY,
                severity=Severity.MEDIUM,
                title="Ping-pong dependency",
                summary="Two services depend on each other (mutual calls)",
                nodes=[a_id, b_id],
                edges=sorted(forward + backward),
                evidence={"a": a_id, "b": b_id},
            ))
        return detections


class ChattyCallsDetector(Detector):
    """Call edges made per item or at a rate at or above the threshold."""

    name = AntiPatternKind.CHATTY_CALLS.value

    def detect(self, graph: Graph) -> List[Detection]:
        threshold = self.thresholds.chatty_rate_per_min
        detections = []

        for e in graph.edges_of_kind(EdgeKind.CALLS):
            call = e.call
            if not call.per_item and call.rate_per_min < threshold:
                continue
            src, dst = graph.node(e.source), graph.node(e.target)
            detections.append(Detection(
                kind=AntiPatternKind.CHATTY_CALLS,
                severity=Severity.MEDIUM,
                title="Chatty calls",
                summary="Excessive per-request or per-item call frequency",
                nodes=[src.id, dst.id],
                edges=[e.index],
                evidence={
                    "from": src.name, "to": dst.name,
                    "rate_per_min": call.rate_per_min,
                    "per_item": call.per_item,
                    "threshold": threshold,
                },
            ))
        return detections
