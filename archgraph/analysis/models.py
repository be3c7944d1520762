"""
Detection Model

Anti-pattern kinds, severities and the Detection record produced by the
detectors. Detections are created fresh on every analysis pass and never
persisted outside the result that contains them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple


# =============================================================================
# Enums
# =============================================================================

class Severity(str, Enum):
    """Severity of a detected anti-pattern"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return {Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 3}[self]


class AntiPatternKind(str, Enum):
    """Types of architectural anti-patterns"""
    CYCLES = "cycles"
    GOD_SERVICE = "god_service"
    SHARED_DATABASE = "shared_database"
    SHARED_DB_WRITES = "shared_db_writes"
    CROSS_DB_READ = "cross_db_read"
    CHATTY_CALLS = "chatty_calls"
    TIGHT_COUPLING = "tight_coupling"
    SYNC_CALL_CHAIN = "sync_call_chain"
    PING_PONG_DEPENDENCY = "ping_pong_dependency"
    REVERSE_DEPENDENCY = "reverse_dependency"
    UI_ORCHESTRATOR = "ui_orchestrator"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class Detection:
    """One occurrence of an anti-pattern on a specific graph"""
    kind: AntiPatternKind
    severity: Severity
    title: str
    summary: str
    nodes: List[str]
    edges: List[int] = field(default_factory=list)
    evidence: Dict[str, Any] = field(default_factory=dict)

    @property
    def dedup_key(self) -> Tuple[str, Tuple[str, ...]]:
        """Identity of the underlying issue: (kind, sorted node-id set)."""
        return self.kind.value, tuple(sorted(set(self.nodes)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "severity": self.severity.value,
            "title": self.title,
            "summary": self.summary,
            "nodes": list(self.nodes),
            "edges": list(self.edges),
            "evidence": dict(self.evidence),
        }


def summarize(detections: List[Detection]) -> Dict[str, Any]:
    """Counts by kind and severity."""
    by_kind: Dict[str, int] = {}
    by_severity: Dict[str, int] = {}
    for d in detections:
        by_kind[d.kind.value] = by_kind.get(d.kind.value, 0) + 1
        by_severity[d.severity.value] = by_severity.get(d.severity.value, 0) + 1
    return {
        "total_detections": len(detections),
        "by_kind": by_kind,
        "by_severity": by_severity,
        "high_count": by_severity.get(Severity.HIGH.value, 0),
    }
