"""
Analysis Service

Orchestrates the pipeline for one spec:

    1. Ingestion   → parse + validate the document
    2. Mapping     → frozen Graph
    3. Export      → graph.dot (+ rendered image via the layout binary)
    4. Detection   → prioritized Detections
    5. Artifacts   → analysis.json / analysis.yaml

On top of ``analyze`` it exposes the two suggestion flows: preview (advisory
only) and apply (auto-fix → snapshot version → re-analysis).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from archgraph.analysis import DetectorRegistry, prioritize, score_detection, summarize
from archgraph.analysis.models import Detection
from archgraph.config.settings import Settings
from archgraph.core.errors import RenderError
from archgraph.core.graph_exporter import GraphExporter
from archgraph.core.models import Graph
from archgraph.core.renderer import render_dot
from archgraph.ingest import parse_bytes, to_graph, validate
from archgraph.suggestion import Suggestion, SuggestionEngine
from archgraph.versioning import Version, create_version, new_id

AUTO_FIX_LABEL = "auto_fix"


# =============================================================================
# Results
# =============================================================================

@dataclass
class AnalysisResult:
    """Graph, prioritized detections and the artifact paths of one analysis"""
    graph: Graph
    detections: List[Detection]
    out_dir: str
    dot_path: str
    image_path: Optional[str] = None
    render_error: Optional[str] = None
    json_path: Optional[str] = None
    yaml_path: Optional[str] = None

    def summary(self) -> Dict[str, Any]:
        """Counts by kind and severity, plus graph statistics."""
        result = summarize(self.detections)
        result["graph"] = self.graph.get_statistics()
        return result

    def to_dict(self) -> Dict[str, Any]:
        detections = []
        for d in self.detections:
            entry = d.to_dict()
            entry["score"] = score_detection(d)
            detections.append(entry)
        return {
            "graph": self.graph.to_dict(),
            "detections": detections,
            "summary": self.summary(),
            "out_dir": self.out_dir,
            "dot_path": self.dot_path,
            "image_path": self.image_path,
            "render_error": self.render_error,
        }


@dataclass
class PreviewResult:
    analysis: AnalysisResult
    suggestions: List[Suggestion] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analysis": self.analysis.to_dict(),
            "suggestions": [s.to_dict() for s in self.suggestions],
        }


@dataclass
class ApplyResult:
    original_analysis: AnalysisResult
    original_suggestions: List[Suggestion]
    fixed_spec: str
    fixed_version: Optional[Version]
    fixed_analysis: AnalysisResult
    applied_fixes: List[Suggestion] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.fixed_version is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_analysis": self.original_analysis.to_dict(),
            "original_suggestions": [s.to_dict() for s in self.original_suggestions],
            "fixed_spec": self.fixed_spec,
            "fixed_version": self.fixed_version.to_dict() if self.fixed_version else None,
            "fixed_analysis": self.fixed_analysis.to_dict(),
            "applied_fixes": [s.to_dict() for s in self.applied_fixes],
        }


# =============================================================================
# Service
# =============================================================================

class AnalysisService:
    """
    Pipeline entry point. Collaborators are injected so tests can run a
    subset of detectors or strategies without global state.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 registry: Optional[DetectorRegistry] = None,
                 engine: Optional[SuggestionEngine] = None,
                 exporter: Optional[GraphExporter] = None,
                 max_workers: Optional[int] = None):
        self.settings = settings or Settings()
        self.registry = registry or DetectorRegistry.default(self.settings.thresholds)
        self.engine = engine or SuggestionEngine()
        self.exporter = exporter or GraphExporter()
        self.max_workers = max_workers
        self.logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Analyze
    # ------------------------------------------------------------------

    def analyze(self, spec_bytes: bytes, title: Optional[str] = None,
                fmt: Optional[str] = None) -> AnalysisResult:
        """Analyze into a fresh run directory ``<out_dir>/runs/<run_id>``."""
        run_dir = Path(self.settings.out_dir) / "runs" / new_id()
        return self.analyze_to_dir(spec_bytes, str(run_dir), title=title, fmt=fmt)

    def analyze_to_dir(self, spec_bytes: bytes, out_dir: str, title: Optional[str] = None,
                       fmt: Optional[str] = None) -> AnalysisResult:
        """
        Run the full pipeline, writing artifacts into ``out_dir``.

        Raises:
            ParseError, ValidationError: the spec is unusable
            DetectorError: a detector failed (no partial results)
        """
        fmt = fmt or self.settings.spec_format
        title = self.settings.title if title is None else title
        self.logger.info(f"Analyzing spec into {out_dir}")

        # 1-2. Ingestion and mapping
        spec = parse_bytes(spec_bytes, fmt)
        validate(spec)
        graph = to_graph(spec)
        self.logger.info(f"Built {graph!r}")

        # 3. Export + render
        out = Path(out_dir)
        dot_path = self.exporter.export_to_dot(graph, str(out / "graph.dot"), title=title)
        image_path, render_error = self._render(dot_path, out)

        # 4. Detection
        detections = prioritize(self.registry.run_all(graph, max_workers=self.max_workers))

        result = AnalysisResult(
            graph=graph,
            detections=detections,
            out_dir=str(out),
            dot_path=dot_path,
            image_path=image_path,
            render_error=render_error,
        )

        # 5. Companion artifacts
        payload = result.to_dict()
        result.json_path = self.exporter.export_to_json(payload, str(out / "analysis.json"))
        result.yaml_path = self.exporter.export_to_yaml(payload, str(out / "analysis.yaml"))
        return result

    def _render(self, dot_path: str, out: Path):
        if not self.settings.render:
            return None, None
        fmt = self.settings.render_format
        try:
            image = render_dot(dot_path, str(out / f"graph.{fmt}"), fmt=fmt,
                               dot_bin=self.settings.dot_bin,
                               timeout=self.settings.render_timeout)
        except RenderError as exc:
            self.logger.warning(f"Render failed: {exc}")
            return None, str(exc)
        return image, None

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def preview_suggestions(self, spec_bytes: bytes, title: Optional[str] = None,
                            fmt: Optional[str] = None) -> PreviewResult:
        analysis = self.analyze(spec_bytes, title=title, fmt=fmt)
        suggestions = self.engine.build_suggestions(analysis.graph, analysis.detections)
        return PreviewResult(analysis=analysis, suggestions=suggestions)

    def apply_suggestions(self, job_id: str, spec_bytes: bytes, title: Optional[str] = None,
                          fmt: Optional[str] = None) -> ApplyResult:
        """
        Auto-fix the spec, snapshot it as a new version and re-analyze it
        into the version directory. Nothing is versioned when no fix changed
        the spec.

        Raises:
            VersioningIOError: the snapshot could not be written
        """
        fmt = fmt or self.settings.spec_format

        original = self.analyze(spec_bytes, title=title, fmt=fmt)
        original_suggestions = self.engine.build_suggestions(original.graph, original.detections)

        fixed_bytes, applied = self.engine.apply_fixes(
            spec_bytes, original.graph, original.detections, fmt=fmt,
        )

        if not applied:
            self.logger.info("No fix changed the spec; no version created")
            return ApplyResult(
                original_analysis=original,
                original_suggestions=original_suggestions,
                fixed_spec=self._text(spec_bytes),
                fixed_version=None,
                fixed_analysis=original,
                applied_fixes=[],
            )

        version = create_version(job_id, self.settings.out_dir, AUTO_FIX_LABEL, fixed_bytes, fmt=fmt)
        fixed = self.analyze_to_dir(fixed_bytes, version.dir, title=title, fmt=fmt)
        self.logger.info(
            f"Fixed spec: {len(original.detections)} → {len(fixed.detections)} detections"
        )

        return ApplyResult(
            original_analysis=original,
            original_suggestions=original_suggestions,
            fixed_spec=self._text(fixed_bytes),
            fixed_version=version,
            fixed_analysis=fixed,
            applied_fixes=applied,
        )

    @staticmethod
    def _text(data: bytes) -> str:
        return data.decode("utf-8") if isinstance(data, bytes) else str(data)
