"""
Detector Registry

An explicit, constructed list of detectors passed into the pipeline. Every
registered detector runs independently over the same frozen graph and the
results are concatenated in registry order. A failing detector aborts the
whole run; no partial detection list is ever returned.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional

from archgraph.config.settings import DetectionThresholds
from archgraph.core.errors import DetectorError
from archgraph.core.models import Graph
from .detectors import Detector, default_detectors
from .models import Detection

logger = logging.getLogger(__name__)


class DetectorRegistry:
    """Ordered collection of detectors, keyed by name."""

    def __init__(self, detectors: Optional[Iterable[Detector]] = None):
        self._detectors: Dict[str, Detector] = {}
        for detector in detectors or []:
            self.register(detector)

    @classmethod
    def default(cls, thresholds: Optional[DetectionThresholds] = None) -> "DetectorRegistry":
        """Registry holding every built-in detector."""
        return cls(default_detectors(thresholds))

    def register(self, detector: Detector) -> None:
        if not detector.name:
            raise ValueError(f"{detector!r} has no name")
        if detector.name in self._detectors:
            logger.debug(f"Replacing detector {detector.name!r}")
        self._detectors[detector.name] = detector

    def get(self, name: str) -> Optional[Detector]:
        return self._detectors.get(name)

    @property
    def names(self) -> List[str]:
        return list(self._detectors)

    def __len__(self) -> int:
        return len(self._detectors)

    def __iter__(self):
        return iter(list(self._detectors.values()))

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run_all(self, graph: Graph, max_workers: Optional[int] = None) -> List[Detection]:
        """
        Run every detector over ``graph``.

        With ``max_workers`` > 1 the detectors run on a thread pool; the
        output is still concatenated in registry order.

        Raises:
            DetectorError: naming the first detector (in registry order) that failed
        """
        if graph is None:
            raise DetectorError("registry", ValueError("graph is missing"))

        logger.info("Starting anti-pattern detection...")
        detectors = list(self._detectors.values())

        if max_workers and max_workers > 1 and len(detectors) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                futures = [pool.submit(self._run_one, d, graph) for d in detectors]
                batches = [f.result() for f in futures]
        else:
            batches = [self._run_one(d, graph) for d in detectors]

        detections: List[Detection] = []
        for batch in batches:
            detections.extend(batch)

        logger.info(f"Detected {len(detections)} anti-patterns")
        return detections

    @staticmethod
    def _run_one(detector: Detector, graph: Graph) -> List[Detection]:
        try:
            found = detector.detect(graph)
        except DetectorError:
            raise
        except Exception as exc:
            raise DetectorError(detector.name, exc) from exc
        logger.debug(f"  {detector.name}: {len(found)}")
        return list(found)
