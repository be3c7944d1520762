"""
Archgraph Analysis

Anti-pattern detection over a frozen Graph:

    from archgraph.analysis import DetectorRegistry, prioritize

    detections = prioritize(DetectorRegistry.default().run_all(graph))
"""

from .models import AntiPatternKind, Detection, Severity, summarize
from .registry import DetectorRegistry
from .scoring import KIND_WEIGHTS, SEVERITY_WEIGHTS, prioritize, score_detection

__all__ = [
    "AntiPatternKind",
    "Detection",
    "Severity",
    "summarize",
    "DetectorRegistry",
    "KIND_WEIGHTS",
    "SEVERITY_WEIGHTS",
    "prioritize",
    "score_detection",
]
