"""
Coupling Strategies

god_service, tight_coupling, ping_pong_dependency, chatty_calls
"""

from typing import List

from archgraph.analysis.models import AntiPatternKind, Detection
from archgraph.core.models import EdgeKind, Graph
from archgraph.ingest.spec_model import ArchitectureSpec
from ..models import Suggestion
from ..spec_edit import SpecEditor
from .base import NO_CHANGE, FixResult, Strategy, node_names


def _call_facts(graph: Graph, source_id: str, target_id: str) -> List[str]:
    """``a → b: N endpoints, ~R rpm`` for each CALLS edge between the two ids."""
    facts = []
    for e in graph.edges_of_kind(EdgeKind.CALLS):
        src, dst = graph.node(e.source), graph.node(e.target)
        if src.id == source_id and dst.id == target_id:
            mode = "sync" if e.call.sync else "async"
            facts.append(f"{src.name} → {dst.name}: {e.call.count} endpoints, "
                         f"~{e.call.rate_per_min} rpm, {mode}.")
    return facts


class GodServiceStrategy(Strategy):
    """Move half of a god service's outgoing links to a new delegate service."""

    kind = AntiPatternKind.GOD_SERVICE

    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        names = node_names(graph, detection)
        main = names[0] if names else ""
        degree = detection.evidence.get("degree")
        threshold = detection.evidence.get("threshold")

        bullets = []
        if main and degree is not None:
            bullets.append(f"{main} has {degree} service dependencies (threshold {threshold}).")
        else:
            bullets.append("One service has too many dependencies (high centrality).")
        bullets.extend([
            "Fix: split responsibilities into smaller services.",
            f"Auto-fix: move some outgoing dependencies to a new service ({main or 'service'}_split) "
            "and add a delegate link.",
        ])
        title = f"Split god service ({main})" if main else "Split god service"
        return Suggestion(kind=self.kind, title=title, bullets=bullets)

    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        names = node_names(graph, detection)
        if not names:
            return NO_CHANGE
        main = names[0]

        editor = SpecEditor(spec)
        targets = editor.targets_of(main)
        if len(targets) < 2:
            return NO_CHANGE

        delegate = editor.unique_name(f"{main}_split")
        editor.ensure_service(delegate)

        half = max(1, len(targets) // 2)
        moved = 0
        for target in targets[half:]:
            if editor.move_link(main, target, delegate):
                moved += 1

        notes = [f"Moved {moved} outgoing dependencies from {main} to {delegate}."]
        note = editor.add_link(main, delegate)
        if note:
            notes.append(note)
        return True, notes


class TightCouplingStrategy(Strategy):
    """Flip one direction of the mutual dependency to asynchronous."""

    kind = AntiPatternKind.TIGHT_COUPLING

    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        names = node_names(graph, detection)
        if len(names) < 2:
            return Suggestion(kind=self.kind, title="Reduce tight coupling",
                              bullets=["Two services rely heavily on each other via synchronous calls."])
        a, b = names[0], names[1]
        ev = detection.evidence

        bullets = [f"Detected strong two-way dependency between {a} and {b}."]
        if "ra" in ev and "rb" in ev:
            bullets.append(
                f"{ev['ra']:.0%} of {a}'s sync traffic goes to {b}; "
                f"{ev['rb']:.0%} of {b}'s goes to {a} (threshold {ev.get('ratio', 0):.0%})."
            )
        bullets.extend(_call_facts(graph, detection.nodes[0], detection.nodes[1]))
        bullets.extend(_call_facts(graph, detection.nodes[1], detection.nodes[0]))
        bullets.extend([
            "Fix idea: keep one direction as events (pub/sub) or let a single service own the interaction.",
            "Fix idea: extract shared logic into a separate service/module so changes don't ripple both ways.",
            f"Auto-fix: set sync=false on {b} → {a}.",
        ])
        return Suggestion(kind=self.kind, title=f"Reduce tight coupling ({a} ↔ {b})", bullets=bullets)

    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        names = node_names(graph, detection)
        if len(names) < 2:
            return NO_CHANGE
        a, b = names[0], names[1]

        editor = SpecEditor(spec)
        note = editor.set_link_sync(b, a, False) or editor.set_link_sync(a, b, False)
        return (True, [note]) if note else NO_CHANGE


class PingPongStrategy(Strategy):
    """Make one direction of a mutual call pair asynchronous."""

    kind = AntiPatternKind.PING_PONG_DEPENDENCY

    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        names = node_names(graph, detection)
        pair = f"{names[0]} ↔ {names[1]}" if len(names) >= 2 else ""
        return Suggestion(
            kind=self.kind,
            title=f"Reduce ping-pong dependency ({pair})" if pair else "Reduce ping-pong dependency",
            bullets=[
                f"Two services call each other back and forth{': ' + pair if pair else ''}.",
                "Fix: keep one direction async or remove one direction.",
                "Auto-fix: set sync=false on one direction.",
            ],
        )

    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        names = node_names(graph, detection)
        if len(names) < 2:
            return NO_CHANGE
        a, b = names[0], names[1]

        editor = SpecEditor(spec)
        ab, ba = editor.link_is_sync(a, b), editor.link_is_sync(b, a)
        if ab is None or ba is None or not (ab and ba):
            # already decoupled in at least one direction
            return NO_CHANGE
        note = editor.set_link_sync(b, a, False)
        return (True, [note]) if note else NO_CHANGE


class ChattyCallsStrategy(Strategy):
    """Disable per-item calls and cut the call rate by an order of magnitude."""

    kind = AntiPatternKind.CHATTY_CALLS

    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        names = node_names(graph, detection)
        ev = detection.evidence
        title = (f"Reduce chatty calls ({names[0]} → {names[1]})"
                 if len(names) >= 2 else "Reduce chatty calls")

        bullets = []
        if ev.get("per_item"):
            bullets.append("The call is made once per item (N+1 pattern).")
        if ev.get("rate_per_min"):
            bullets.append(f"Observed rate: {ev['rate_per_min']} calls/min "
                           f"(threshold {ev.get('threshold')}).")
        bullets.extend([
            "Batch requests (send fewer, bigger requests) instead of per-item calls.",
            "Add caching where possible and avoid calling for each item in a loop.",
            "Auto-fix: set per_item=false and divide rate_per_min by 10.",
        ])
        return Suggestion(kind=self.kind, title=title, bullets=bullets)

    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        names = node_names(graph, detection)
        if len(names) < 2:
            return NO_CHANGE
        source, target = names[0], names[1]

        editor = SpecEditor(spec)
        if detection.edges:
            call = editor.find_call_for_edge(source, target, graph.edge(detection.edges[0]).call)
        else:
            call = editor.find_call(source, target)
        if call is None:
            return NO_CHANGE

        old_rate, old_per_item = call.rate_per_min, call.per_item
        call.per_item = False
        if call.rate_per_min > 0:
            call.rate_per_min = max(1, call.rate_per_min // 10)
        if (call.rate_per_min, call.per_item) == (old_rate, old_per_item):
            return NO_CHANGE
        return True, [
            f"Changed {source} → {target}: per_item {old_per_item} → {call.per_item}, "
            f"rate_per_min {old_rate} → {call.rate_per_min}"
        ]
