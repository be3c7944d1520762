"""
Cycle and Chain Strategies
"""

from archgraph.analysis.models import AntiPatternKind, Detection
from archgraph.core.models import Graph
from archgraph.ingest.spec_model import ArchitectureSpec
from ..models import Suggestion
from ..spec_edit import SpecEditor
from .base import NO_CHANGE, FixResult, Strategy, node_names


class BreakCycleStrategy(Strategy):
    """Remove one link between two cycle members."""

    kind = AntiPatternKind.CYCLES

    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        names = node_names(graph, detection)
        loop = " → ".join(names + names[:1]) if names else "A → B → C → A"
        return Suggestion(
            kind=self.kind,
            title="Break the cycle (remove circular dependencies)",
            bullets=[
                f"Services call each other in a loop ({loop}).",
                "Pick one link and change it to async events (queue/pub-sub) OR remove the direct call.",
                "If two services always depend on each other, consider merging them or extracting shared logic.",
                "Auto-fix: remove one call link between two services of the cycle.",
            ],
        )

    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        names = node_names(graph, detection)
        if len(names) < 2:
            return NO_CHANGE

        editor = SpecEditor(spec)
        for source in names:
            for target in names:
                if target == source:
                    continue
                note = editor.remove_link(source, target)
                if note:
                    return True, [f"{note} (breaks the cycle)"]
        return NO_CHANGE


class SyncCallChainStrategy(Strategy):
    """Turn the middle hop of a long synchronous chain asynchronous."""

    kind = AntiPatternKind.SYNC_CALL_CHAIN

    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        names = node_names(graph, detection)
        hops = detection.evidence.get("edges", max(0, len(names) - 1))
        bullets = []
        if names:
            bullets.append(f"Synchronous chain of {hops} hops: {' → '.join(names)}.")
        bullets.extend([
            "Long synchronous chains increase latency and failure blast radius.",
            "Fix: make one hop async (sync=false) or add a BFF/cache.",
            "Auto-fix: set sync=false on a middle hop.",
        ])
        return Suggestion(kind=self.kind, title="Shorten sync call chain", bullets=bullets)

    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        names = node_names(graph, detection)
        if len(names) < 2:
            return NO_CHANGE

        mid = (len(names) - 2) // 2
        source, target = names[mid], names[mid + 1]
        note = SpecEditor(spec).set_link_sync(source, target, False)
        if not note:
            return NO_CHANGE
        return True, [note, f"Converted one hop to async: {source} → {target}"]
