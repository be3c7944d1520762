"""
Unit Tests for archgraph.config and the DI container
"""

import logging

from archgraph.application import AnalysisService, Container
from archgraph.config import DetectionThresholds, Settings


ENV_KEYS = (
    "ARCHGRAPH_OUT_DIR", "DOT_BIN", "ARCHGRAPH_RENDER", "ARCHGRAPH_RENDER_FORMAT",
    "ARCHGRAPH_RENDER_TIMEOUT", "ARCHGRAPH_SPEC_FORMAT", "ARCHGRAPH_TITLE", "LOG_LEVEL",
    "DETECT_GOD_DEGREE", "DETECT_SHARED_DB_MIN_CLIENTS", "DETECT_SHARED_DB_HIGH_CLIENTS",
    "DETECT_CHATTY_RATE_PER_MIN", "DETECT_TIGHT_COUPLING_RATIO", "DETECT_TIGHT_COUPLING_MIN_BIDIR",
    "DETECT_SYNC_CHAIN_MIN_EDGES", "DETECT_SYNC_CHAIN_REPORT_ALL", "DETECT_UI_ORCH_MIN_OUT",
)


def _clear_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestSettings:

    def test_defaults(self, monkeypatch):
        _clear_env(monkeypatch)
        settings = Settings.from_env()
        assert settings.out_dir == "out"
        assert settings.dot_bin == "dot"
        assert settings.render is True
        assert settings.thresholds == DetectionThresholds()

    def test_default_thresholds(self):
        t = DetectionThresholds()
        assert t.god_degree == 4
        assert t.shared_db_min_clients == 2
        assert t.shared_db_high_clients == 3
        assert t.chatty_rate_per_min == 300
        assert t.tight_coupling_ratio == 0.6
        assert t.tight_coupling_min_bidir == 2
        assert t.sync_chain_min_edges == 4
        assert t.ui_orchestrator_min_out == 2

    def test_environment_overrides(self, monkeypatch):
        _clear_env(monkeypatch)
        monkeypatch.setenv("ARCHGRAPH_OUT_DIR", "/tmp/arch")
        monkeypatch.setenv("DOT_BIN", "/opt/graphviz/bin/dot")
        monkeypatch.setenv("ARCHGRAPH_RENDER", "false")
        monkeypatch.setenv("DETECT_GOD_DEGREE", "7")
        monkeypatch.setenv("DETECT_TIGHT_COUPLING_RATIO", "0.75")
        monkeypatch.setenv("DETECT_SYNC_CHAIN_REPORT_ALL", "yes")

        settings = Settings.from_env()
        assert settings.out_dir == "/tmp/arch"
        assert settings.dot_bin == "/opt/graphviz/bin/dot"
        assert settings.render is False
        assert settings.thresholds.god_degree == 7
        assert settings.thresholds.tight_coupling_ratio == 0.75
        assert settings.thresholds.sync_chain_report_all is True

    def test_invalid_values_fall_back(self, monkeypatch, caplog):
        caplog.set_level(logging.WARNING)
        _clear_env(monkeypatch)
        monkeypatch.setenv("DETECT_GOD_DEGREE", "many")
        monkeypatch.setenv("DETECT_CHATTY_RATE_PER_MIN", "-5")
        monkeypatch.setenv("DETECT_TIGHT_COUPLING_RATIO", "high")
        monkeypatch.setenv("DOT_BIN", "")

        settings = Settings.from_env()
        assert settings.thresholds.god_degree == 4
        assert settings.thresholds.chatty_rate_per_min == 300
        assert settings.thresholds.tight_coupling_ratio == 0.6
        assert settings.dot_bin == "dot"
        assert "Ignoring DETECT_GOD_DEGREE='many': not an integer" in caplog.text
        assert "Ignoring DETECT_TIGHT_COUPLING_RATIO='high': not a number" in caplog.text

    def test_thresholds_to_dict(self):
        assert DetectionThresholds().to_dict()["god_degree"] == 4


class TestContainer:

    def test_singletons_are_cached(self, settings):
        container = Container.from_settings(settings)
        assert container.detector_registry() is container.detector_registry()
        assert container.suggestion_engine() is container.suggestion_engine()
        assert container.graph_exporter() is container.graph_exporter()

    def test_service_wiring(self, settings):
        container = Container.from_settings(settings)
        service = container.analysis_service()
        assert isinstance(service, AnalysisService)
        assert service.settings is settings
        assert service.registry is container.detector_registry()

    def test_thresholds_reach_detectors(self):
        settings = Settings(thresholds=DetectionThresholds(god_degree=9))
        registry = Container.from_settings(settings).detector_registry()
        assert registry.get("god_service").thresholds.god_degree == 9

    def test_detector_subset(self, settings):
        from archgraph.analysis.detectors import CyclesDetector

        container = Container.from_settings(settings, detectors=[CyclesDetector()])
        assert container.detector_registry().names == ["cycles"]

    def test_from_env(self, monkeypatch):
        _clear_env(monkeypatch)
        monkeypatch.setenv("ARCHGRAPH_OUT_DIR", "elsewhere")
        assert Container.from_env().settings.out_dir == "elsewhere"
