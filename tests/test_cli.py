"""
Smoke Tests for bin/analyze_architecture.py
"""

import importlib.util
import json
from pathlib import Path

import pytest

CLI_PATH = Path(__file__).resolve().parent.parent / "bin" / "analyze_architecture.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("analyze_architecture", CLI_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def spec_file(tmp_path, cycle_spec):
    path = tmp_path / "architecture.yaml"
    path.write_bytes(cycle_spec)
    return path


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch):
    for key in ("ARCHGRAPH_OUT_DIR", "ARCHGRAPH_RENDER", "ARCHGRAPH_SPEC_FORMAT"):
        monkeypatch.delenv(key, raising=False)


class TestCli:

    def test_analyze_json(self, cli, spec_file, tmp_path, capsys):
        out_dir = tmp_path / "out"
        code = cli.main(["analyze", str(spec_file), "--out-dir", str(out_dir), "--no-render", "--json"])
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["detections"][0]["kind"] == "cycles"
        assert payload["image_path"] is None
        assert Path(payload["dot_path"]).is_relative_to(out_dir)

    def test_analyze_display(self, cli, spec_file, tmp_path, capsys):
        code = cli.main(["analyze", str(spec_file), "-o", str(tmp_path / "out"), "--no-render"])
        assert code == 0
        out = capsys.readouterr().out
        assert "Architecture Analysis" in out
        assert "Cyclic dependency" in out

    def test_suggest(self, cli, spec_file, tmp_path, capsys):
        code = cli.main(["suggest", str(spec_file), "-o", str(tmp_path / "out"), "--no-render", "--json"])
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["suggestions"][0]["kind"] == "cycles"

    def test_apply_then_list_versions(self, cli, spec_file, tmp_path, capsys):
        out_dir = str(tmp_path / "out")
        assert cli.main(["apply", str(spec_file), "-o", out_dir, "--no-render", "-j", "shop", "--json"]) == 0
        applied = json.loads(capsys.readouterr().out)
        assert applied["fixed_version"]["job_id"] == "shop"

        assert cli.main(["versions", "-o", out_dir, "-j", "shop", "--json"]) == 0
        versions = json.loads(capsys.readouterr().out)
        assert [v["version_id"] for v in versions] == [applied["fixed_version"]["version_id"]]

    def test_format_from_extension(self, cli, tmp_path, cycle_spec, capsys):
        import yaml

        path = tmp_path / "architecture.json"
        path.write_text(json.dumps(yaml.safe_load(cycle_spec)))
        code = cli.main(["analyze", str(path), "-o", str(tmp_path / "out"), "--no-render", "--json"])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["detections"]

    def test_missing_file(self, cli, tmp_path, capsys):
        code = cli.main(["analyze", str(tmp_path / "missing.yaml"), "-o", str(tmp_path / "out")])
        assert code == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_spec(self, cli, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("services: [")
        code = cli.main(["analyze", str(path), "-o", str(tmp_path / "out"), "-q"])
        assert code == 1
        assert "parse (yaml)" in capsys.readouterr().err

    def test_quiet_prints_nothing(self, cli, spec_file, tmp_path, capsys):
        code = cli.main(["analyze", str(spec_file), "-o", str(tmp_path / "out"), "--no-render", "-q"])
        assert code == 0
        assert capsys.readouterr().out == ""
