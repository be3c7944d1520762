"""
Cycle and Chain Detectors

- cycles:           strongly connected components over service CALLS edges
- sync_call_chain:  longest simple path along synchronous service calls
"""

from typing import Dict, List, Set, Tuple

import networkx as nx

from archgraph.core.models import EdgeKind, Graph
from ..models import AntiPatternKind, Detection, Severity
from .base import Detector, service_calls


class CyclesDetector(Detector):
    """Services that mutually depend on each other through a CALLS cycle."""

    name = AntiPatternKind.CYCLES.value

    def detect(self, graph: Graph) -> List[Detection]:
        g = graph.to_networkx(edge_kind=EdgeKind.CALLS, services_only=True)

        components = [sorted(c) for c in nx.strongly_connected_components(g) if len(c) > 1]
        components.sort(key=lambda c: c[0])

        detections = []
        for comp in components:
            members = set(comp)
            edges = sorted(
                e.index for h in comp for e in graph.outgoing(h, EdgeKind.CALLS)
                if e.target in members
            )
            detections.append(Detection(
                kind=AntiPatternKind.CYCLES,
                severity=Severity.HIGH,
                title="Cyclic dependency",
                summary="Services mutually depend on each other",
                nodes=[graph.node(h).id for h in comp],
                edges=edges,
                evidence={"size": len(comp)},
            ))
        return detections


class SyncCallChainDetector(Detector):
    """
    Long chains of synchronous calls amplify latency and failure impact.

    By default only the single longest chain in the graph is reported. With
    ``sync_chain_report_all`` every start node's longest qualifying chain is
    reported, skipping chains whose nodes are covered by a longer one.

    An acyclic sync subgraph is solved exactly in linear time over a
    topological order. Otherwise a depth-first search runs per start node,
    pruned by how many unvisited nodes are still reachable.
    """

    name = AntiPatternKind.SYNC_CALL_CHAIN.value

    def detect(self, graph: Graph) -> List[Detection]:
        min_edges = self.thresholds.sync_chain_min_edges

        successors: Dict[int, List[Tuple[int, int]]] = {}
        for node in graph.services():
            successors[node.handle] = [
                (e.target, e.index) for e in service_calls(graph, node.handle) if e.is_sync_call
            ]

        g = nx.DiGraph()
        g.add_nodes_from(successors)
        g.add_edges_from((h, target) for h, hops in successors.items() for target, _ in hops)

        if nx.is_directed_acyclic_graph(g):
            longest = self._longest_acyclic(g, successors)
        else:
            longest = {h: self._longest_from(h, successors) for h in successors}

        per_start = [(h, longest[h]) for h in successors if len(longest[h]) >= min_edges]
        if not per_start:
            return []

        # longest first; ties keep node order
        per_start.sort(key=lambda item: -len(item[1]))

        if not self.thresholds.sync_chain_report_all:
            per_start = per_start[:1]

        detections = []
        covered: List[Set[int]] = []
        for start, hops in per_start:
            path = [start] + [target for target, _ in hops]
            members = set(path)
            if any(members <= seen for seen in covered):
                continue
            covered.append(members)
            detections.append(Detection(
                kind=AntiPatternKind.SYNC_CALL_CHAIN,
                severity=Severity.MEDIUM,
                title="Sync call chain",
                summary="Long synchronous dependency chain can amplify latency/failure impact",
                nodes=[graph.node(h).id for h in path],
                edges=[idx for _, idx in hops],
                evidence={"edges": len(hops), "min_edges": min_edges},
            ))
        return detections

    @staticmethod
    def _longest_acyclic(g: nx.DiGraph,
                         successors: Dict[int, List[Tuple[int, int]]]) -> Dict[int, List[Tuple[int, int]]]:
        """Longest path from every node of a DAG; the first successor wins ties."""
        best: Dict[int, List[Tuple[int, int]]] = {}
        for h in reversed(list(nx.topological_sort(g))):
            hops: List[Tuple[int, int]] = []
            for nxt, idx in successors.get(h, []):
                tail = best.get(nxt, [])
                if len(tail) + 1 > len(hops):
                    hops = [(nxt, idx)] + tail
            best[h] = hops
        return best

    @staticmethod
    def _longest_from(start: int, successors: Dict[int, List[Tuple[int, int]]]) -> List[Tuple[int, int]]:
        """Depth-first search for the longest simple path from ``start``."""
        best: List[Tuple[int, int]] = []
        visited = {start}
        path: List[Tuple[int, int]] = []
        limit = _reachable_count(start, successors, visited)

        def dfs(cur: int) -> bool:
            nonlocal best
            if len(path) > len(best):
                best = list(path)
                if len(best) == limit:
                    return True
            if len(path) + _reachable_count(cur, successors, visited) <= len(best):
                return False
            for nxt, idx in successors.get(cur, []):
                if nxt in visited:
                    continue
                visited.add(nxt)
                path.append((nxt, idx))
                if dfs(nxt):
                    return True
                path.pop()
                visited.discard(nxt)
            return False

        if limit:
            dfs(start)
        return best


def _reachable_count(source: int, successors: Dict[int, List[Tuple[int, int]]],
                     blocked: Set[int]) -> int:
    """Nodes reachable from ``source`` without entering ``blocked``."""
    seen: Set[int] = set()
    stack = [source]
    while stack:
        cur = stack.pop()
        for nxt, _ in successors.get(cur, []):
            if nxt not in blocked and nxt not in seen:
                seen.add(nxt)
                stack.append(nxt)
    return len(seen)
