"""
Suggestion Engine

build_suggestions:
    one advisory Suggestion per unique (kind, node-id set), highest severity first.

apply_fixes:
    parse → apply strategies on the typed spec (sequentially, severity order)
    → serialize → sanitize → merge onto a full copy of the original tree.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from archgraph.analysis.models import AntiPatternKind, Detection
from archgraph.core.models import Graph
from archgraph.ingest.parser import parse_with_tree
from archgraph.spec import dump_tree, merge, sanitize
from .models import Suggestion
from .strategies import Strategy, default_strategies

logger = logging.getLogger(__name__)

NO_STRATEGY_BULLET = "No suggestion strategy found for this anti-pattern yet."


def order_for_fixing(detections: Iterable[Detection]) -> List[Detection]:
    """Severity descending, then kind name; duplicates of one issue collapse."""
    ordered = sorted(detections, key=lambda d: (-d.severity.rank, d.kind.value))
    seen = set()
    unique = []
    for d in ordered:
        if d.dedup_key in seen:
            continue
        seen.add(d.dedup_key)
        unique.append(d)
    return unique


class SuggestionEngine:
    """Maps detections onto strategies; holds no per-run state."""

    def __init__(self, strategies: Optional[Iterable[Strategy]] = None):
        self._strategies: Dict[AntiPatternKind, Strategy] = {}
        for strategy in default_strategies() if strategies is None else strategies:
            self._strategies[strategy.kind] = strategy

    def strategy_for(self, kind: AntiPatternKind) -> Optional[Strategy]:
        return self._strategies.get(kind)

    # ------------------------------------------------------------------
    # Advisory
    # ------------------------------------------------------------------

    def build_suggestions(self, graph: Graph, detections: Iterable[Detection]) -> List[Suggestion]:
        suggestions = []
        for d in order_for_fixing(detections):
            strategy = self.strategy_for(d.kind)
            if strategy is None:
                logger.warning(f"No strategy registered for {d.kind.value}")
                suggestions.append(Suggestion(kind=d.kind, title=d.title, bullets=[NO_STRATEGY_BULLET]))
                continue
            suggestions.append(strategy.suggest(graph, d))
        return suggestions

    # ------------------------------------------------------------------
    # Auto-fix
    # ------------------------------------------------------------------

    def apply_fixes(self, spec_bytes: bytes, graph: Graph, detections: Iterable[Detection],
                    fmt: str = "yaml") -> Tuple[bytes, List[Suggestion]]:
        """
        Apply every applicable strategy to a fresh parse of ``spec_bytes``.

        Returns the merged document bytes and the suggestions whose fix
        actually changed the spec.

        Raises:
            ParseError: if ``spec_bytes`` is not a valid document
        """
        spec, original_tree = parse_with_tree(spec_bytes, fmt)

        applied: List[Suggestion] = []
        for d in order_for_fixing(detections):
            strategy = self.strategy_for(d.kind)
            if strategy is None:
                continue
            changed, notes = strategy.apply(spec, graph, d)
            if not changed:
                logger.debug(f"No change from {d.kind.value} fix on {d.nodes}")
                continue
            for note in notes:
                logger.debug(f"  {d.kind.value}: {note}")
            suggestion = strategy.suggest(graph, d)
            suggestion.auto_fix_applied = True
            suggestion.auto_fix_notes = list(notes)
            applied.append(suggestion)

        fixed_tree = sanitize(spec.to_dict())

        merged = merge(original_tree, fixed_tree)
        logger.info(f"Applied {len(applied)} fixes")
        return dump_tree(merged, fmt), applied
