"""
Archgraph Suggestions

Advisory suggestions and conservative auto-fixes for detected anti-patterns.
"""

from .models import Suggestion
from .engine import SuggestionEngine, order_for_fixing
from .spec_edit import SpecEditor
from .strategies import Strategy, default_strategies

__all__ = [
    "Suggestion",
    "SuggestionEngine",
    "order_for_fixing",
    "SpecEditor",
    "Strategy",
    "default_strategies",
]
