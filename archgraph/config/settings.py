"""
Application Settings

Environment configuration for the analysis pipeline and detector thresholds.
"""

import logging
import os
from dataclasses import dataclass, field, asdict
from typing import Any, Dict

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer")
        return default
    return value if value > 0 else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number")
        return default
    return value if value > 0 else default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DetectionThresholds:
    """Thresholds consumed by the detectors."""

    god_degree: int = 4
    shared_db_min_clients: int = 2
    shared_db_high_clients: int = 3
    chatty_rate_per_min: int = 300
    tight_coupling_ratio: float = 0.6
    tight_coupling_min_bidir: int = 2
    sync_chain_min_edges: int = 4
    sync_chain_report_all: bool = False
    ui_orchestrator_min_out: int = 2

    @classmethod
    def from_env(cls) -> "DetectionThresholds":
        """Load thresholds from environment variables."""
        d = cls()
        return cls(
            god_degree=_env_int("DETECT_GOD_DEGREE", d.god_degree),
            shared_db_min_clients=_env_int("DETECT_SHARED_DB_MIN_CLIENTS", d.shared_db_min_clients),
            shared_db_high_clients=_env_int("DETECT_SHARED_DB_HIGH_CLIENTS", d.shared_db_high_clients),
            chatty_rate_per_min=_env_int("DETECT_CHATTY_RATE_PER_MIN", d.chatty_rate_per_min),
            tight_coupling_ratio=_env_float("DETECT_TIGHT_COUPLING_RATIO", d.tight_coupling_ratio),
            tight_coupling_min_bidir=_env_int("DETECT_TIGHT_COUPLING_MIN_BIDIR", d.tight_coupling_min_bidir),
            sync_chain_min_edges=_env_int("DETECT_SYNC_CHAIN_MIN_EDGES", d.sync_chain_min_edges),
            sync_chain_report_all=_env_bool("DETECT_SYNC_CHAIN_REPORT_ALL", d.sync_chain_report_all),
            ui_orchestrator_min_out=_env_int("DETECT_UI_ORCH_MIN_OUT", d.ui_orchestrator_min_out),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Settings:
    """Application settings from environment."""

    out_dir: str = "out"
    dot_bin: str = "dot"
    render: bool = True
    render_format: str = "svg"
    render_timeout: int = 30
    spec_format: str = "yaml"
    title: str = "Architecture"
    log_level: str = "INFO"
    thresholds: DetectionThresholds = field(default_factory=DetectionThresholds)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            out_dir=os.getenv("ARCHGRAPH_OUT_DIR", "out"),
            dot_bin=os.getenv("DOT_BIN", "dot") or "dot",
            render=_env_bool("ARCHGRAPH_RENDER", True),
            render_format=os.getenv("ARCHGRAPH_RENDER_FORMAT", "svg"),
            render_timeout=_env_int("ARCHGRAPH_RENDER_TIMEOUT", 30),
            spec_format=os.getenv("ARCHGRAPH_SPEC_FORMAT", "yaml").lower(),
            title=os.getenv("ARCHGRAPH_TITLE", "Architecture"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            thresholds=DetectionThresholds.from_env(),
        )
