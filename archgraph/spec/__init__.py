"""
Generic spec tree: load/dump, sanitize and merge.
"""

from .tree import load_tree, dump_tree, deep_copy, SUPPORTED_FORMATS
from .sanitize import sanitize
from .merge import merge

__all__ = ["load_tree", "dump_tree", "deep_copy", "SUPPORTED_FORMATS", "sanitize", "merge"]
