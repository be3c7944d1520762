"""
Archgraph Application Layer

Pipeline service (analyze / preview / apply) and its DI container.
"""

from .analysis_service import AnalysisResult, AnalysisService, ApplyResult, PreviewResult
from .container import Container

__all__ = [
    "AnalysisResult",
    "AnalysisService",
    "ApplyResult",
    "PreviewResult",
    "Container",
]
