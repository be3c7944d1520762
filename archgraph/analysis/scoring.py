"""
Detection Scoring

score = severity weight + kind weight + min(5, |nodes| - 1)

Scores only order output; a Detection is never modified.
"""

from typing import Iterable, List

from .models import AntiPatternKind, Detection, Severity

SEVERITY_WEIGHTS = {
    Severity.HIGH: 60,
    Severity.MEDIUM: 35,
    Severity.LOW: 15,
}

KIND_WEIGHTS = {
    AntiPatternKind.CYCLES: 25,
    AntiPatternKind.TIGHT_COUPLING: 22,
    AntiPatternKind.GOD_SERVICE: 20,
    AntiPatternKind.REVERSE_DEPENDENCY: 20,
    AntiPatternKind.SHARED_DATABASE: 18,
    AntiPatternKind.SHARED_DB_WRITES: 18,
    AntiPatternKind.UI_ORCHESTRATOR: 17,
    AntiPatternKind.SYNC_CALL_CHAIN: 16,
    AntiPatternKind.CROSS_DB_READ: 15,
    AntiPatternKind.PING_PONG_DEPENDENCY: 14,
    AntiPatternKind.CHATTY_CALLS: 12,
}

DEFAULT_KIND_WEIGHT = 10


def score_detection(detection: Detection) -> int:
    base = SEVERITY_WEIGHTS.get(detection.severity, 20)
    kind = KIND_WEIGHTS.get(detection.kind, DEFAULT_KIND_WEIGHT)
    size = min(5, len(detection.nodes) - 1) if detection.nodes else 0
    return base + kind + size


def prioritize(detections: Iterable[Detection]) -> List[Detection]:
    """
    Return a new list ordered by score, then severity, both descending.
    Remaining ties fall back to (kind, nodes) so the order is identical
    across runs.
    """
    return sorted(
        detections,
        key=lambda d: (-score_detection(d), -d.severity.rank, d.kind.value, tuple(d.nodes)),
    )
