"""
Spec Parser

Turns raw document bytes into the typed ArchitectureSpec. The typed view is
built from the same generic tree the merge step uses, so both views always
derive from the same input.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from archgraph.core.errors import ParseError
from archgraph.spec.tree import load_tree
from .spec_model import ArchitectureSpec

logger = logging.getLogger(__name__)


def parse_bytes(data: bytes, fmt: str = "yaml") -> ArchitectureSpec:
    """Parse bytes in ``fmt`` (yaml | json). Raises ParseError."""
    spec, _ = parse_with_tree(data, fmt)
    return spec


def parse_with_tree(data: bytes, fmt: str = "yaml") -> Tuple[ArchitectureSpec, Dict[str, Any]]:
    """Parse once, returning both the typed spec and the generic tree."""
    tree = load_tree(data, fmt)
    try:
        spec = ArchitectureSpec.from_dict(tree)
    except ParseError as exc:
        raise ParseError(exc.detail, fmt=fmt) from None
    logger.debug(f"Parsed spec: {len(spec.services)} services, {len(spec.dependencies)} dependencies")
    return spec, tree


def parse_file(path: Union[str, Path], fmt: str = "") -> ArchitectureSpec:
    """Parse a file; the format defaults to the file extension."""
    p = Path(path)
    if not fmt:
        fmt = "json" if p.suffix.lower() == ".json" else "yaml"
    return parse_bytes(p.read_bytes(), fmt)
