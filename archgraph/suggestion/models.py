"""
Suggestion Model
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from archgraph.analysis.models import AntiPatternKind


@dataclass
class Suggestion:
    """Advisory text for one detected issue, plus what the auto-fixer did"""
    kind: AntiPatternKind
    title: str
    bullets: List[str] = field(default_factory=list)
    auto_fix_applied: bool = False
    auto_fix_notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "kind": self.kind.value,
            "title": self.title,
            "bullets": list(self.bullets),
            "auto_fix_applied": self.auto_fix_applied,
        }
        if self.auto_fix_notes:
            result["auto_fix_notes"] = list(self.auto_fix_notes)
        return result
