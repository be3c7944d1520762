"""
Anti-Pattern Detectors

Each detector is a named, pure ``Graph -> List[Detection]`` function object.
``default_detectors`` returns one instance of every detector in a fixed order.
"""

from typing import List, Optional

from archgraph.config.settings import DetectionThresholds
from .base import Detector
from .cycles import CyclesDetector, SyncCallChainDetector
from .coupling import ChattyCallsDetector, GodServiceDetector, PingPongDetector, TightCouplingDetector
from .databases import CrossDbReadDetector, SharedDatabaseDetector, SharedDbWritesDetector
from .ui import ReverseDependencyDetector, UiOrchestratorDetector

DETECTOR_CLASSES = (
    ChattyCallsDetector,
    CrossDbReadDetector,
    CyclesDetector,
    GodServiceDetector,
    PingPongDetector,
    ReverseDependencyDetector,
    SharedDatabaseDetector,
    SharedDbWritesDetector,
    SyncCallChainDetector,
    TightCouplingDetector,
    UiOrchestratorDetector,
)


def default_detectors(thresholds: Optional[DetectionThresholds] = None) -> List[Detector]:
    """One instance of every detector, ordered by name."""
    return [cls(thresholds) for cls in DETECTOR_CLASSES]


__all__ = [
    "Detector",
    "CyclesDetector",
    "SyncCallChainDetector",
    "GodServiceDetector",
    "TightCouplingDetector",
    "PingPongDetector",
    "ChattyCallsDetector",
    "SharedDatabaseDetector",
    "SharedDbWritesDetector",
    "CrossDbReadDetector",
    "ReverseDependencyDetector",
    "UiOrchestratorDetector",
    "DETECTOR_CLASSES",
    "default_detectors",
]
