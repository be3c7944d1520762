"""
Versioning Service

Immutable snapshots of auto-fixed specs:

    <base_dir>/versions/<job_id>/<version_id>/architecture.<yaml|json>
    <base_dir>/versions/<job_id>/<version_id>/version.json

The same directory later receives the re-analysis artifacts of the fixed
spec, so one snapshot is self-contained.
"""

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from archgraph.core.errors import VersioningIOError

logger = logging.getLogger(__name__)

DEFAULT_BASE_DIR = "out"
DEFAULT_JOB_ID = "adhoc"
DEFAULT_LABEL = "version"
METADATA_FILE = "version.json"


def new_id() -> str:
    """Short random hex id (16 chars)."""
    return uuid.uuid4().hex[:16]


@dataclass(frozen=True)
class Version:
    """Snapshot record; never mutated after creation"""
    job_id: str
    version_id: str
    label: str
    dir: str
    spec_path: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "version_id": self.version_id,
            "label": self.label,
            "dir": self.dir,
            "spec_path": self.spec_path,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Version":
        return cls(
            job_id=data["job_id"],
            version_id=data["version_id"],
            label=data.get("label", DEFAULT_LABEL),
            dir=data["dir"],
            spec_path=data["spec_path"],
            created_at=datetime.fromisoformat(data["created_at"]),
        )


def _versions_root(base_dir: str, job_id: str) -> Path:
    return Path(base_dir or DEFAULT_BASE_DIR) / "versions" / (job_id or DEFAULT_JOB_ID)


def create_version(job_id: str, base_dir: str, label: str, spec_bytes: bytes,
                   fmt: str = "yaml") -> Version:
    """
    Write ``spec_bytes`` and a metadata record under a fresh version directory.

    Raises:
        VersioningIOError: if any write fails; no version is considered created
    """
    job_id = job_id or DEFAULT_JOB_ID
    base_dir = base_dir or DEFAULT_BASE_DIR
    label = label or DEFAULT_LABEL

    version_id = new_id()
    directory = _versions_root(base_dir, job_id) / version_id
    spec_path = directory / f"architecture.{'json' if fmt == 'json' else 'yaml'}"

    version = Version(
        job_id=job_id,
        version_id=version_id,
        label=label,
        dir=str(directory),
        spec_path=str(spec_path),
        created_at=datetime.now(timezone.utc),
    )

    try:
        directory.mkdir(parents=True, exist_ok=False)
        spec_path.write_bytes(spec_bytes)
        with open(directory / METADATA_FILE, "w", encoding="utf-8") as f:
            json.dump(version.to_dict(), f, indent=2)
    except OSError as exc:
        raise VersioningIOError(f"could not write snapshot: {exc}", str(directory)) from exc

    logger.info(f"Created version {job_id}/{version_id} ({label})")
    return version


def read_version(base_dir: str, job_id: str, version_id: str) -> Version:
    """
    Load a version record.

    Raises:
        VersioningIOError: if ids are missing or the record is unreadable
    """
    if not job_id or not version_id:
        raise VersioningIOError("job id and version id are required", str(base_dir))
    meta_path = _versions_root(base_dir, job_id) / version_id / METADATA_FILE
    try:
        with open(meta_path, "r", encoding="utf-8") as f:
            return Version.from_dict(json.load(f))
    except (OSError, ValueError, KeyError) as exc:
        raise VersioningIOError(f"could not read version: {exc}", str(meta_path)) from exc


def list_versions(base_dir: str, job_id: str) -> List[Version]:
    """All versions of ``job_id``, oldest first. Unreadable entries are skipped."""
    root = _versions_root(base_dir, job_id)
    if not root.is_dir():
        return []

    versions = []
    for child in sorted(root.iterdir()):
        if not (child / METADATA_FILE).is_file():
            continue
        try:
            versions.append(read_version(base_dir, job_id or DEFAULT_JOB_ID, child.name))
        except VersioningIOError as exc:
            logger.warning(f"Skipping version {child.name}: {exc}")
    versions.sort(key=lambda v: v.created_at)
    return versions
