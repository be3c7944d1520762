"""
Detector Base

A detector is a named, pure function ``Graph -> List[Detection]``. It holds
its thresholds and nothing else, so one instance may run on many graphs,
and on several threads at once.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterator, List, Optional

from archgraph.config.settings import DetectionThresholds
from archgraph.core.models import Edge, EdgeKind, Graph
from ..models import Detection


class Detector(ABC):
    """Base class for anti-pattern detectors"""

    name: str = ""

    def __init__(self, thresholds: Optional[DetectionThresholds] = None):
        self.thresholds = thresholds or DetectionThresholds()
        self.logger = logging.getLogger(__name__)

    @abstractmethod
    def detect(self, graph: Graph) -> List[Detection]:
        """Return every occurrence of this anti-pattern in ``graph``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


# =============================================================================
# Shared graph helpers
# =============================================================================

def service_calls(graph: Graph, handle: int) -> Iterator[Edge]:
    """Outgoing CALLS edges of ``handle`` whose target is a SERVICE node."""
    for e in graph.outgoing(handle, EdgeKind.CALLS):
        if graph.node(e.target).is_service:
            yield e


def service_call_edges(graph: Graph) -> Iterator[Edge]:
    """Every CALLS edge between two SERVICE nodes."""
    for e in graph.edges_of_kind(EdgeKind.CALLS):
        if graph.node(e.source).is_service and graph.node(e.target).is_service:
            yield e
