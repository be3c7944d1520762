"""
Graph Renderer

Invokes the external GraphViz layout binary on an exported DOT file.
"""

import logging
import shutil
import subprocess
from pathlib import Path

from .errors import RenderError

logger = logging.getLogger(__name__)


def render_dot(dot_path: str, out_path: str, fmt: str = "svg",
               dot_bin: str = "dot", timeout: float = 30.0) -> str:
    """
    Run ``<dot_bin> -T<fmt> <dot_path> -o <out_path>`` and return ``out_path``.

    Raises RenderError if the binary is missing, exits non-zero, or exceeds
    ``timeout`` seconds.
    """
    fmt = fmt or "svg"
    dot_bin = dot_bin or "dot"

    resolved = shutil.which(dot_bin)
    if resolved is None:
        raise RenderError(f"layout binary not found ({dot_bin!r})", binary=dot_bin)

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    cmd = [resolved, f"-T{fmt}", str(dot_path), "-o", str(out_path)]
    logger.debug(f"Running {' '.join(cmd)}")

    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        raise RenderError(f"{dot_bin} timed out after {timeout}s", binary=dot_bin) from None
    except OSError as exc:
        raise RenderError(f"could not run {dot_bin}: {exc}", binary=dot_bin) from exc

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        raise RenderError(
            f"{dot_bin} exited with status {proc.returncode}: {stderr}",
            binary=dot_bin,
            returncode=proc.returncode,
        )

    logger.info(f"Rendered {out_path}")
    return str(out_path)
