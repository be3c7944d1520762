"""
Generic Spec Tree

Untyped key/value view over the architecture document, used for surgical
find/replace without disturbing fields the typed projection does not model.
"""

import copy
import json
from typing import Any, Dict

import yaml

from archgraph.core.errors import ParseError

SUPPORTED_FORMATS = ("yaml", "json")


def _decode(data: bytes, fmt: str) -> str:
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"input is not valid UTF-8: {exc}", fmt) from exc


def load_tree(data: bytes, fmt: str = "yaml") -> Dict[str, Any]:
    """Parse raw bytes into a plain dict; an empty document yields ``{}``."""
    fmt = (fmt or "yaml").lower()
    if fmt not in SUPPORTED_FORMATS:
        raise ParseError(f"unsupported format {fmt!r}", fmt)
    text = _decode(data, fmt)
    try:
        if fmt == "json":
            root = json.loads(text) if text.strip() else None
        else:
            root = yaml.safe_load(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ParseError(str(exc), fmt) from exc
    if root is None:
        return {}
    if not isinstance(root, dict):
        raise ParseError(f"top level must be a mapping, got {type(root).__name__}", fmt)
    return root


def dump_tree(root: Dict[str, Any], fmt: str = "yaml") -> bytes:
    """Serialize a tree back to bytes, preserving key order."""
    if (fmt or "yaml").lower() == "json":
        return json.dumps(root, indent=2, default=str).encode("utf-8")
    return yaml.safe_dump(root, sort_keys=False, allow_unicode=True,
                          default_flow_style=False).encode("utf-8")


def deep_copy(root: Dict[str, Any]) -> Dict[str, Any]:
    return copy.deepcopy(root)
