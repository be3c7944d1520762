"""
Dependency Injection Container

Wires settings, detectors, strategies and exporters into the pipeline
service and caches the shared instances.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from archgraph.analysis import DetectorRegistry
from archgraph.analysis.detectors import Detector
from archgraph.config.settings import Settings
from archgraph.core.graph_exporter import GraphExporter
from archgraph.suggestion import SuggestionEngine
from archgraph.suggestion.strategies import Strategy
from .analysis_service import AnalysisService


@dataclass
class Container:
    """
    Dependency injection container.

    Pass ``detectors`` / ``strategies`` to run a subset; by default every
    built-in detector and strategy is used.
    """
    settings: Settings = field(default_factory=Settings)
    detectors: Optional[List[Detector]] = None
    strategies: Optional[List[Strategy]] = None
    max_workers: Optional[int] = None

    _registry: Optional[DetectorRegistry] = field(default=None, repr=False)
    _engine: Optional[SuggestionEngine] = field(default=None, repr=False)
    _exporter: Optional[GraphExporter] = field(default=None, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "Container":
        """Create container from settings."""
        return cls(settings=settings, **kwargs)

    @classmethod
    def from_env(cls, **kwargs) -> "Container":
        return cls(settings=Settings.from_env(), **kwargs)

    def detector_registry(self) -> DetectorRegistry:
        """Get the detector registry singleton."""
        if self._registry is None:
            if self.detectors is None:
                self._registry = DetectorRegistry.default(self.settings.thresholds)
            else:
                self._registry = DetectorRegistry(self.detectors)
        return self._registry

    def suggestion_engine(self) -> SuggestionEngine:
        if self._engine is None:
            self._engine = SuggestionEngine(self.strategies)
        return self._engine

    def graph_exporter(self) -> GraphExporter:
        if self._exporter is None:
            self._exporter = GraphExporter()
        return self._exporter

    def analysis_service(self) -> AnalysisService:
        """Get the pipeline service."""
        return AnalysisService(
            settings=self.settings,
            registry=self.detector_registry(),
            engine=self.suggestion_engine(),
            exporter=self.graph_exporter(),
            max_workers=self.max_workers,
        )
