"""
Error Hierarchy

All errors raised by the analysis pipeline derive from ArchGraphError so the
service layer can surface them to an end user without a stack-trace dump.
"""

from typing import Optional


class ArchGraphError(Exception):
    """Base class for every pipeline error."""


class ParseError(ArchGraphError):
    """The input document is not well-formed in the configured format."""

    def __init__(self, message: str, fmt: str = "yaml"):
        super().__init__(f"parse ({fmt}): {message}")
        self.detail = message
        self.format = fmt


class ValidationError(ArchGraphError):
    """The document parsed but is semantically invalid."""

    def __init__(self, message: str, subject: Optional[str] = None):
        super().__init__(f"validate: {message}")
        self.subject = subject


class GraphError(ArchGraphError):
    """A graph-model invariant would be violated (dangling handle, bad attrs)."""


class DetectorError(ArchGraphError):
    """A single detector failed; the whole detection step is aborted."""

    def __init__(self, detector: str, cause: BaseException):
        super().__init__(f"detector {detector!r} failed: {cause}")
        self.detector = detector
        self.cause = cause


class RenderError(ArchGraphError):
    """The external layout tool is missing or exited non-zero."""

    def __init__(self, message: str, binary: str, returncode: Optional[int] = None):
        super().__init__(f"graphviz render: {message}")
        self.binary = binary
        self.returncode = returncode


class VersioningIOError(ArchGraphError):
    """Writing a version snapshot failed; no version is considered created."""

    def __init__(self, message: str, path: str):
        super().__init__(f"versioning: {message} ({path})")
        self.path = path
