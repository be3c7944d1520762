"""
Test Configuration and Fixtures
================================

Shared pytest fixtures for the archgraph test-suite.

Usage:
    pytest tests/                    # Run all tests
    pytest tests/ -v                 # Verbose output
    pytest tests/ -k "detectors"     # Run only detector tests
    pytest tests/ --quick            # Skip slow tests
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from archgraph.config.settings import Settings
from archgraph.ingest import parse_bytes, to_graph


# =============================================================================
# Custom Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "slow: marks tests as slow")


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--quick",
        action="store_true",
        default=False,
        help="Skip slow tests",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests if --quick is specified"""
    if config.getoption("--quick"):
        skip_slow = pytest.mark.skip(reason="Skipped with --quick")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


# =============================================================================
# Spec Documents
# =============================================================================

CYCLE_SPEC = b"""
services:
  - name: orders
    calls:
      - to: billing
  - name: billing
    calls:
      - to: shipping
  - name: shipping
    calls:
      - to: orders
"""

CHATTY_SPEC = b"""
services:
  - name: orders
    calls:
      - to: catalog
        endpoints: ["GET /items/{id}"]
        per_item: true
      - to: pricing
        endpoints: ["GET /price"]
        rate_per_min: 50
  - name: catalog
  - name: pricing
"""

SHARED_DB_SPEC = b"""
databases:
  - name: orders-db
services:
  - name: orders
    calls:
      - to: orders-db
  - name: billing
    calls:
      - to: orders-db
  - name: shipping
    calls:
      - to: orders-db
"""

OWNERSHIP_SPEC = b"""
databases:
  - name: orders-db
services:
  - name: orders
    databases:
      writes: [orders-db]
  - name: billing
    databases:
      writes: [orders-db]
  - name: reports
    databases:
      reads: [orders-db]
"""

APIS_SPEC = b"""
metadata:
  name: shop
  owner: platform-team
apis:
  - name: public-api
    protocol: rest
topics:
  - name: order-events
services:
  - name: orders
    calls:
      - to: billing
  - name: billing
    calls:
      - to: orders
"""

DEPENDENCY_SPEC = b"""
services:
  - name: web-ui
  - name: orders
  - name: payments
  - name: orders_db
    type: database
dependencies:
  - from: web-ui
    to: orders
    kind: REST
    sync: true
  - from: web-ui
    to: payments
    kind: rest
    sync: true
  - from: orders
    to: orders_db
    kind: sql
  - from: SERVICE:payments
    to: ledger
    kind: grpc
"""

CHAIN_SPEC = b"""
services:
  - name: gateway
    calls: [{to: orders}]
  - name: orders
    calls: [{to: payments}]
  - name: payments
    calls: [{to: ledger}]
  - name: ledger
    calls: [{to: archive}]
  - name: archive
"""

HUB_SPEC = b"""
services:
  - name: hub
    calls: [{to: svc1}, {to: svc2}, {to: svc3}, {to: svc4}, {to: svc5}]
"""

UI_SPEC = b"""
services:
  - name: web-ui
    calls: [{to: orders}, {to: payments}, {to: admin-page}]
  - name: orders
    calls: [{to: web-ui}]
  - name: payments
"""

CLEAN_SPEC = b"""
services:
  - name: orders
    calls:
      - to: billing
        endpoints: ["POST /invoices"]
  - name: billing
"""


@pytest.fixture
def cycle_spec() -> bytes:
    return CYCLE_SPEC


@pytest.fixture
def chatty_spec() -> bytes:
    return CHATTY_SPEC


@pytest.fixture
def shared_db_spec() -> bytes:
    return SHARED_DB_SPEC


@pytest.fixture
def ownership_spec() -> bytes:
    return OWNERSHIP_SPEC


@pytest.fixture
def apis_spec() -> bytes:
    return APIS_SPEC


@pytest.fixture
def dependency_spec() -> bytes:
    return DEPENDENCY_SPEC


@pytest.fixture
def chain_spec() -> bytes:
    """gateway → orders → payments → ledger → archive, all synchronous"""
    return CHAIN_SPEC


@pytest.fixture
def hub_spec() -> bytes:
    """one service calling five others"""
    return HUB_SPEC


@pytest.fixture
def ui_spec() -> bytes:
    """UI fanning out to backends, with a backend calling back into the UI"""
    return UI_SPEC


@pytest.fixture
def clean_spec() -> bytes:
    return CLEAN_SPEC


@pytest.fixture
def build_graph():
    """Parse + map a spec document into a frozen Graph."""
    def _build(data: bytes, fmt: str = "yaml"):
        return to_graph(parse_bytes(data, fmt))
    return _build


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def settings(tmp_path) -> Settings:
    """Pipeline settings writing into a temp dir, without the layout binary."""
    return Settings(out_dir=str(tmp_path / "out"), render=False)
