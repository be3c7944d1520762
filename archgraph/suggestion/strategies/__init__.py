"""
Fix Strategies

One strategy per anti-pattern kind. ``default_strategies`` returns a fresh
instance of each; the engine receives the list explicitly.
"""

from typing import List

from .base import FixResult, NO_CHANGE, Strategy, node_names
from .cycles import BreakCycleStrategy, SyncCallChainStrategy
from .coupling import ChattyCallsStrategy, GodServiceStrategy, PingPongStrategy, TightCouplingStrategy
from .databases import CrossDbReadStrategy, SharedDatabaseStrategy, SharedDbWritesStrategy
from .ui import ReverseDependencyStrategy, UiOrchestratorStrategy

STRATEGY_CLASSES = (
    BreakCycleStrategy,
    GodServiceStrategy,
    SharedDatabaseStrategy,
    SharedDbWritesStrategy,
    CrossDbReadStrategy,
    ChattyCallsStrategy,
    TightCouplingStrategy,
    SyncCallChainStrategy,
    PingPongStrategy,
    ReverseDependencyStrategy,
    UiOrchestratorStrategy,
)


def default_strategies() -> List[Strategy]:
    return [cls() for cls in STRATEGY_CLASSES]


__all__ = [
    "FixResult",
    "NO_CHANGE",
    "Strategy",
    "node_names",
    "BreakCycleStrategy",
    "SyncCallChainStrategy",
    "GodServiceStrategy",
    "TightCouplingStrategy",
    "PingPongStrategy",
    "ChattyCallsStrategy",
    "SharedDatabaseStrategy",
    "SharedDbWritesStrategy",
    "CrossDbReadStrategy",
    "ReverseDependencyStrategy",
    "UiOrchestratorStrategy",
    "STRATEGY_CLASSES",
    "default_strategies",
]
