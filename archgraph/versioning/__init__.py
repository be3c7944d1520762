"""
Archgraph Versioning

Snapshot create / read / list for auto-fixed specs.
"""

from .service import Version, create_version, list_versions, new_id, read_version

__all__ = ["Version", "create_version", "read_version", "list_versions", "new_id"]
