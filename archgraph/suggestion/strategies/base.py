"""
Strategy Base

A strategy pairs advisory text (``suggest``) with one conservative automatic
fix (``apply``) for a single anti-pattern kind.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

from archgraph.analysis.models import AntiPatternKind, Detection
from archgraph.core.models import Graph
from archgraph.ingest.spec_model import ArchitectureSpec
from ..models import Suggestion

FixResult = Tuple[bool, List[str]]

NO_CHANGE: FixResult = (False, [])


class Strategy(ABC):
    """Base class for fix strategies"""

    kind: AntiPatternKind

    @abstractmethod
    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        """Advisory bullets for ``detection``. Must not raise."""

    @abstractmethod
    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        """Edit ``spec`` in place; return (changed, notes)."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r})"


def node_names(graph: Graph, detection: Detection) -> List[str]:
    """Display names of the detection's nodes, in detection order."""
    return [graph.name_of(nid) for nid in detection.nodes]
