"""
Unit Tests for archgraph.versioning
"""

import json
from pathlib import Path

import pytest

from archgraph.core import VersioningIOError
from archgraph.versioning import Version, create_version, list_versions, new_id, read_version


class TestVersioning:

    def test_new_id(self):
        ids = {new_id() for _ in range(50)}
        assert len(ids) == 50
        assert all(len(i) == 16 for i in ids)

    def test_create_writes_snapshot_and_record(self, tmp_path):
        v = create_version("shop", str(tmp_path), "auto_fix", b"services: []\n")
        directory = Path(v.dir)

        assert directory == tmp_path / "versions" / "shop" / v.version_id
        assert Path(v.spec_path).read_bytes() == b"services: []\n"
        assert Path(v.spec_path).name == "architecture.yaml"
        with open(directory / "version.json") as f:
            record = json.load(f)
        assert record["label"] == "auto_fix"
        assert record["job_id"] == "shop"

    def test_json_snapshot_extension(self, tmp_path):
        v = create_version("shop", str(tmp_path), "auto_fix", b"{}", fmt="json")
        assert v.spec_path.endswith("architecture.json")

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        v = create_version("", "", "", b"{}")
        assert v.job_id == "adhoc"
        assert v.label == "version"
        assert (tmp_path / "out" / "versions" / "adhoc" / v.version_id).is_dir()

    def test_read_back(self, tmp_path):
        v = create_version("shop", str(tmp_path), "auto_fix", b"{}")
        assert read_version(str(tmp_path), "shop", v.version_id) == v

    def test_read_requires_ids(self, tmp_path):
        with pytest.raises(VersioningIOError):
            read_version(str(tmp_path), "shop", "")

    def test_read_missing(self, tmp_path):
        with pytest.raises(VersioningIOError):
            read_version(str(tmp_path), "shop", "0123456789abcdef")

    def test_list_versions(self, tmp_path):
        first = create_version("shop", str(tmp_path), "auto_fix", b"{}")
        second = create_version("shop", str(tmp_path), "auto_fix", b"{}")
        create_version("other", str(tmp_path), "auto_fix", b"{}")

        versions = list_versions(str(tmp_path), "shop")
        assert {v.version_id for v in versions} == {first.version_id, second.version_id}
        assert all(isinstance(v, Version) for v in versions)

    def test_list_skips_unreadable_records(self, tmp_path):
        good = create_version("shop", str(tmp_path), "auto_fix", b"{}")
        broken = tmp_path / "versions" / "shop" / "broken"
        broken.mkdir()
        (broken / "version.json").write_text("not json")

        assert [v.version_id for v in list_versions(str(tmp_path), "shop")] == [good.version_id]

    def test_list_unknown_job(self, tmp_path):
        assert list_versions(str(tmp_path), "nobody") == []

    def test_write_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        with pytest.raises(VersioningIOError):
            create_version("shop", str(blocker), "auto_fix", b"{}")
