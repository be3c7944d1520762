"""
UI Layering Strategies

reverse_dependency, ui_orchestrator
"""

from archgraph.analysis.models import AntiPatternKind, Detection
from archgraph.core.models import Graph
from archgraph.ingest.spec_model import ArchitectureSpec
from ..models import Suggestion
from ..spec_edit import SpecEditor, join_nice
from .base import NO_CHANGE, FixResult, Strategy, node_names


class ReverseDependencyStrategy(Strategy):
    kind = AntiPatternKind.REVERSE_DEPENDENCY

    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        names = node_names(graph, detection)
        edge = f"{names[0]} → {names[1]}" if len(names) >= 2 else "backend → UI"
        return Suggestion(
            kind=self.kind,
            title="Remove reverse dependency",
            bullets=[
                f"Backend depends on UI/frontend (wrong direction): {edge}.",
                "Fix: UI should depend on backend, not the other way.",
                "Auto-fix: remove the backend → UI link.",
            ],
        )

    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        names = node_names(graph, detection)
        if len(names) < 2:
            return NO_CHANGE
        note = SpecEditor(spec).remove_link(names[0], names[1])
        return (True, [note]) if note else NO_CHANGE


class UiOrchestratorStrategy(Strategy):
    """Route a UI's direct backend calls through one backend-for-frontend."""

    kind = AntiPatternKind.UI_ORCHESTRATOR

    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        names = node_names(graph, detection)
        ui, targets = (names[0], names[1:]) if names else ("", [])
        bullets = []
        if ui and targets:
            bullets.append(f"{ui} calls {len(targets)} backend services directly: {join_nice(targets)}.")
        else:
            bullets.append("UI calls multiple backend services directly.")
        bullets.extend([
            "Fix: add a BFF (backend-for-frontend) or gateway so the UI calls one endpoint.",
            "Auto-fix: insert a BFF node and reroute UI → targets through it.",
        ])
        return Suggestion(kind=self.kind, title="Introduce BFF for UI", bullets=bullets)

    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        names = node_names(graph, detection)
        if len(names) < 2:
            return NO_CHANGE
        ui, targets = names[0], names[1:]

        editor = SpecEditor(spec)
        if not any(editor.has_link(ui, t) for t in targets):
            return NO_CHANGE

        bff = editor.unique_name("bff")
        editor.ensure_service(bff)

        notes = []
        note = editor.add_link(ui, bff)
        if note:
            notes.append(note)
        for target in targets:
            note = editor.move_link(ui, target, bff)
            if note:
                notes.append(note)
        return True, notes
