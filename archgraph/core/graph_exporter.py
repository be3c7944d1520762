"""
Graph Exporter

Exports a Graph (and an analysis payload built on top of it) to:
- DOT/GraphViz (input for the external layout binary)
- JSON
- YAML
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import yaml

from .models import EdgeKind, Graph, NodeKind

EXPORTER_VERSION = "1.0"

# shape / fill per node kind
NODE_STYLES = {
    NodeKind.SERVICE: 'shape=box, style="rounded,filled", fillcolor="#eef6ff"',
    NodeKind.DATABASE: 'shape=cylinder, style="filled", fillcolor="#fff3cd"',
}


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class GraphExporter:
    """
    Exports Graph instances to various formats
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # DOT
    # ------------------------------------------------------------------

    def to_dot(self, graph: Graph, title: str = "") -> str:
        """Render the graph as DOT text: one declaration per node and per edge."""
        lines = [
            "digraph G {",
            "  rankdir=LR;",
            "  node [shape=box, style=rounded];",
        ]
        if title:
            lines.append(f'  labelloc="t"; label="{_quote(title)}"; fontname="Helvetica";')

        for node in graph.nodes:
            lines.append(
                f'  "{_quote(node.id)}" [label="{_quote(node.name)}", {NODE_STYLES[node.kind]}];'
            )

        for edge in graph.edges:
            src = graph.node(edge.source).id
            dst = graph.node(edge.target).id
            lines.append(
                f'  "{_quote(src)}" -> "{_quote(dst)}" '
                f'[label="{_quote(self._edge_label(edge))}", tooltip="edge#{edge.index}"];'
            )

        lines.append("}")
        return "\n".join(lines) + "\n"

    @staticmethod
    def _edge_label(edge) -> str:
        if edge.kind != EdgeKind.CALLS:
            return edge.kind.value
        call = edge.call
        label = f"calls ({call.count} ep)" if call.count > 0 else EdgeKind.CALLS.value
        if call.rate_per_min > 0:
            label = f"{label}, {call.rate_per_min}rpm"
        if not call.sync:
            label = f"{label}, async"
        return label

    def export_to_dot(self, graph: Graph, filepath: str, title: str = "") -> str:
        """Write DOT text to ``filepath`` and return the path."""
        self.logger.info(f"Exporting to DOT: {filepath}")
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_dot(graph, title), encoding="utf-8")
        return str(path)

    # ------------------------------------------------------------------
    # Structured exports
    # ------------------------------------------------------------------

    @staticmethod
    def _with_export_info(data: Dict[str, Any], fmt: str) -> Dict[str, Any]:
        out = dict(data)
        out["_export"] = {
            "format": fmt,
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "exporter_version": EXPORTER_VERSION,
        }
        return out

    def export_to_json(self, data: Dict[str, Any], filepath: str, indent: int = 2) -> str:
        """Export an analysis payload (or ``graph.to_dict()``) to JSON."""
        self.logger.info(f"Exporting to JSON: {filepath}")
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self._with_export_info(data, "json"), f, indent=indent, default=str)
        return str(path)

    def export_to_yaml(self, data: Dict[str, Any], filepath: str) -> str:
        """Export an analysis payload to YAML."""
        self.logger.info(f"Exporting to YAML: {filepath}")
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        # round-trip through JSON so enums/tuples become plain YAML scalars/lists
        plain = json.loads(json.dumps(self._with_export_info(data, "yaml"), default=str))
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(plain, f, sort_keys=False, allow_unicode=True, default_flow_style=False)
        return str(path)
