"""
Archgraph Ingestion

Bytes → typed ArchitectureSpec → frozen Graph.
"""

from .spec_model import (
    ArchitectureSpec,
    ServiceSpec,
    CallSpec,
    DatabaseRefs,
    DependencySpec,
    NamedSpec,
)
from .parser import parse_bytes, parse_with_tree, parse_file
from .validator import validate
from .mapper import SpecMapper, to_graph

__all__ = [
    "ArchitectureSpec",
    "ServiceSpec",
    "CallSpec",
    "DatabaseRefs",
    "DependencySpec",
    "NamedSpec",
    "parse_bytes",
    "parse_with_tree",
    "parse_file",
    "validate",
    "SpecMapper",
    "to_graph",
]
