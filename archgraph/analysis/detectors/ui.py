"""
UI Layering Detectors

UI-ness is a name heuristic (see ``archgraph.core.names.is_ui_name``).

- reverse_dependency: a backend service calling into the UI layer
- ui_orchestrator:    a UI node fanning out directly to many backend services
"""

from typing import List

from archgraph.core.models import Graph
from archgraph.core.names import is_ui_name
from ..models import AntiPatternKind, Detection, Severity
from .base import Detector, service_call_edges, service_calls


class ReverseDependencyDetector(Detector):
    name = AntiPatternKind.REVERSE_DEPENDENCY.value

    def detect(self, graph: Graph) -> List[Detection]:
        detections = []
        for e in service_call_edges(graph):
            src, dst = graph.node(e.source), graph.node(e.target)
            if is_ui_name(src.name) or not is_ui_name(dst.name):
                continue
            detections.append(Detection(
                kind=AntiPatternKind.REVERSE_DEPENDENCY,
                severity=Severity.HIGH,
                title="Reverse dependency (backend → UI)",
                summary="Backend service depends on the UI/frontend layer",
                nodes=[src.id, dst.id],
                edges=[e.index],
                evidence={"from": src.name, "to": dst.name},
            ))
        return detections


class UiOrchestratorDetector(Detector):
    name = AntiPatternKind.UI_ORCHESTRATOR.value

    def detect(self, graph: Graph) -> List[Detection]:
        min_out = self.thresholds.ui_orchestrator_min_out
        detections = []

        for ui in graph.services():
            if not is_ui_name(ui.name):
                continue

            targets: List[int] = []
            edges: List[int] = []
            sync_targets = 0
            for e in service_calls(graph, ui.handle):
                if e.target == ui.handle or is_ui_name(graph.node(e.target).name):
                    continue
                edges.append(e.index)
                if e.target not in targets:
                    targets.append(e.target)
                    if e.call.sync:
                        sync_targets += 1

            if len(targets) < min_out:
                continue

            detections.append(Detection(
                kind=AntiPatternKind.UI_ORCHESTRATOR,
                severity=Severity.MEDIUM,
                title="UI orchestrator",
                summary="UI directly orchestrates multiple backend services",
                nodes=[ui.id] + [graph.node(h).id for h in targets],
                edges=edges,
                evidence={
                    "ui": ui.name,
                    "targets": len(targets),
                    "sync_targets": sync_targets,
                    "min_out": min_out,
                },
            ))
        return detections
