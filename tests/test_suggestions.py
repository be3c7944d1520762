"""
Unit Tests for archgraph.suggestion

Tests for:
    - SuggestionEngine: ordering, de-duplication, fallback text
    - auto-fix round trips through parse → fix → sanitize → merge
    - SpecEditor helpers
"""

import json

import pytest
import yaml

from archgraph.analysis import AntiPatternKind, Detection, DetectorRegistry, Severity
from archgraph.analysis.detectors import (
    CyclesDetector,
    SharedDatabaseDetector,
    SyncCallChainDetector,
)
from archgraph.core import EdgeKind
from archgraph.ingest import parse_bytes, to_graph
from archgraph.suggestion import SpecEditor, SuggestionEngine, order_for_fixing
from archgraph.suggestion.engine import NO_STRATEGY_BULLET
from archgraph.suggestion.spec_edit import join_nice


def _detect(graph):
    return DetectorRegistry.default().run_all(graph)


def _fix(data: bytes, fmt: str = "yaml"):
    graph = to_graph(parse_bytes(data, fmt))
    fixed, applied = SuggestionEngine().apply_fixes(data, graph, _detect(graph), fmt=fmt)
    return fixed, applied


def _ping_pong(nodes):
    return Detection(
        kind=AntiPatternKind.PING_PONG_DEPENDENCY,
        severity=Severity.MEDIUM,
        title="Ping-pong dependency",
        summary="",
        nodes=list(nodes),
    )


# =============================================================================
# Engine
# =============================================================================

class TestSuggestionEngine:

    def test_same_issue_in_any_node_order_is_deduplicated(self):
        detections = [
            _ping_pong(["SERVICE:orders", "SERVICE:billing"]),
            _ping_pong(["SERVICE:billing", "SERVICE:orders"]),
        ]
        assert len(order_for_fixing(detections)) == 1

    def test_highest_severity_first(self, build_graph, apis_spec):
        graph = build_graph(apis_spec)
        suggestions = SuggestionEngine().build_suggestions(graph, _detect(graph))
        kinds = [s.kind for s in suggestions]
        assert kinds[0] == AntiPatternKind.CYCLES
        assert AntiPatternKind.PING_PONG_DEPENDENCY in kinds

    def test_every_suggestion_has_bullets(self, build_graph, apis_spec, ownership_spec, chatty_spec,
                                         ui_spec, hub_spec, chain_spec):
        for data in (apis_spec, ownership_spec, chatty_spec, ui_spec, hub_spec, chain_spec):
            graph = build_graph(data)
            for suggestion in SuggestionEngine().build_suggestions(graph, _detect(graph)):
                assert suggestion.title
                assert suggestion.bullets
                assert not suggestion.auto_fix_applied

    def test_missing_strategy_fallback(self, build_graph, cycle_spec):
        graph = build_graph(cycle_spec)
        suggestions = SuggestionEngine(strategies=[]).build_suggestions(graph, _detect(graph))
        assert len(suggestions) == 1
        assert suggestions[0].bullets == [NO_STRATEGY_BULLET]

    def test_suggestion_text_names_services(self, build_graph, shared_db_spec):
        graph = build_graph(shared_db_spec)
        suggestions = SuggestionEngine().build_suggestions(graph, SharedDatabaseDetector().detect(graph))
        text = " ".join(suggestions[0].bullets)
        assert "orders-db" in text
        assert "orders, billing, and shipping" in text


# =============================================================================
# Auto-fix Round Trips
# =============================================================================

class TestAutoFix:

    def test_cycle_fix_removes_exactly_one_call(self, cycle_spec):
        fixed, applied = _fix(cycle_spec)
        before = to_graph(parse_bytes(cycle_spec))
        after = to_graph(parse_bytes(fixed))

        assert [s.kind for s in applied] == [AntiPatternKind.CYCLES]
        assert applied[0].auto_fix_applied
        assert "breaks the cycle" in applied[0].auto_fix_notes[0]
        assert len(after.edges_of_kind(EdgeKind.CALLS)) == len(before.edges_of_kind(EdgeKind.CALLS)) - 1
        assert CyclesDetector().detect(after) == []

    def test_untouched_sections_are_semantically_equal(self, apis_spec):
        fixed, applied = _fix(apis_spec)
        assert applied
        original = yaml.safe_load(apis_spec)
        tree = yaml.safe_load(fixed)
        assert tree["apis"] == original["apis"]
        assert tree["topics"] == original["topics"]
        assert tree["metadata"] == original["metadata"]

    def test_json_round_trip(self, cycle_spec):
        data = json.dumps(yaml.safe_load(cycle_spec)).encode()
        fixed, applied = _fix(data, "json")
        assert applied
        tree = json.loads(fixed)
        assert all(svc["type"] == "service" for svc in tree["services"])

    def test_clean_spec_is_unchanged(self, clean_spec):
        _, applied = _fix(clean_spec)
        assert applied == []

    def test_shared_database_split(self, shared_db_spec):
        fixed, applied = _fix(shared_db_spec)
        assert [s.kind for s in applied] == [AntiPatternKind.SHARED_DATABASE]
        graph = to_graph(parse_bytes(fixed))
        assert SharedDatabaseDetector().detect(graph) == []
        tree = yaml.safe_load(fixed)
        types = {svc["name"]: svc["type"] for svc in tree["services"]}
        assert types["billing-db"] == "database"
        assert types["shipping-db"] == "database"
        assert types["orders-db-1"] == "database"

    def test_ownership_fixes(self, ownership_spec):
        fixed, applied = _fix(ownership_spec)
        assert [s.kind for s in applied] == [AntiPatternKind.SHARED_DB_WRITES, AntiPatternKind.CROSS_DB_READ]

        spec = parse_bytes(fixed)
        editor = SpecEditor(spec)
        assert editor.find_service("billing").databases.writes == ["orders-db_billing"]
        assert editor.find_service("orders").databases.writes == ["orders-db"]
        reports = editor.find_service("reports")
        assert reports.databases.reads == []
        assert reports.calls[0].to == "orders"
        assert reports.calls[0].endpoints == ["GET /orders-db/read"]
        assert reports.calls[0].rate_per_min == 60
        assert _detect(to_graph(spec)) == []

    def test_chatty_fix(self):
        data = b"services:\n  - name: orders\n    calls:\n      - to: catalog\n        rate_per_min: 900\n        per_item: true\n"
        fixed, applied = _fix(data)
        assert [s.kind for s in applied] == [AntiPatternKind.CHATTY_CALLS]
        call = parse_bytes(fixed).services[0].calls[0]
        assert call.rate_per_min == 90
        assert call.per_item is False

    def test_chatty_fix_edits_the_flagged_call(self):
        data = (b"services:\n"
                b"  - name: a\n"
                b"    calls:\n"
                b"      - {to: b, endpoints: [GET /x], rate_per_min: 50}\n"
                b"      - {to: b, endpoints: [GET /y], per_item: true}\n")
        fixed, applied = _fix(data)

        assert [s.kind for s in applied] == [AntiPatternKind.CHATTY_CALLS]
        assert "per_item True → False" in applied[0].auto_fix_notes[0]
        calls = yaml.safe_load(fixed)["services"][0]["calls"]
        assert calls[0] == {"to": "b", "endpoints": ["GET /x"], "rate_per_min": 50}
        assert calls[1] == {"to": "b", "endpoints": ["GET /y"], "per_item": False}
        assert _detect(to_graph(parse_bytes(fixed))) == []

    def test_sync_chain_fix_makes_middle_hop_async(self, chain_spec):
        fixed, applied = _fix(chain_spec)
        assert [s.kind for s in applied] == [AntiPatternKind.SYNC_CALL_CHAIN]
        editor = SpecEditor(parse_bytes(fixed))
        assert editor.link_is_sync("orders", "payments") is False
        assert SyncCallChainDetector().detect(to_graph(parse_bytes(fixed))) == []

    def test_god_service_split(self, hub_spec):
        fixed, applied = _fix(hub_spec)
        assert AntiPatternKind.GOD_SERVICE in [s.kind for s in applied]
        editor = SpecEditor(parse_bytes(fixed))
        assert editor.targets_of("hub") == ["svc1", "svc2", "hub_split"]
        assert editor.targets_of("hub_split") == ["svc3", "svc4", "svc5"]

    def test_ui_fixes(self):
        data = (b"services:\n"
                b"  - name: web-ui\n    calls: [{to: orders}, {to: payments}]\n"
                b"  - name: orders\n"
                b"  - name: payments\n"
                b"  - name: billing\n    calls: [{to: web-ui}]\n")
        fixed, applied = _fix(data)
        assert [s.kind for s in applied] == [
            AntiPatternKind.REVERSE_DEPENDENCY, AntiPatternKind.UI_ORCHESTRATOR,
        ]

        editor = SpecEditor(parse_bytes(fixed))
        assert not editor.has_link("billing", "web-ui")
        assert editor.targets_of("web-ui") == ["bff"]
        assert editor.targets_of("bff") == ["orders", "payments"]

    def test_cycle_then_tight_coupling(self):
        data = (b"services:\n"
                b"  - name: orders\n    calls: [{to: billing, endpoints: [a, b]}]\n"
                b"  - name: billing\n    calls: [{to: orders, endpoints: [c, d]}]\n")
        fixed, applied = _fix(data)
        assert [s.kind for s in applied] == [AntiPatternKind.CYCLES, AntiPatternKind.TIGHT_COUPLING]

        editor = SpecEditor(parse_bytes(fixed))
        assert not editor.has_link("orders", "billing")
        assert editor.link_is_sync("billing", "orders") is False
        assert CyclesDetector().detect(to_graph(parse_bytes(fixed))) == []


# =============================================================================
# Dependency-style Documents
# =============================================================================

class TestDependencyStyleFixes:

    def test_ui_orchestrator_in_dependencies(self, dependency_spec):
        fixed, applied = _fix(dependency_spec)
        assert [s.kind for s in applied] == [AntiPatternKind.UI_ORCHESTRATOR]

        tree = yaml.safe_load(fixed)
        pairs = [(d["from"], d["to"]) for d in tree["dependencies"]]
        assert ("web-ui", "bff") in pairs
        assert ("bff", "orders") in pairs
        assert ("bff", "payments") in pairs
        assert ("web-ui", "orders") not in pairs
        assert ("payments", "ledger") in pairs
        assert all(d.get("kind", "") == d.get("kind", "").lower() for d in tree["dependencies"])

    def test_removing_last_dependency_keeps_empty_list(self):
        data = (b"services:\n  - name: orders\n  - name: web-ui\n"
                b"dependencies:\n  - from: orders\n    to: web-ui\n")
        fixed, applied = _fix(data)
        assert [s.kind for s in applied] == [AntiPatternKind.REVERSE_DEPENDENCY]
        tree = yaml.safe_load(fixed)
        assert tree["dependencies"] == []


# =============================================================================
# Spec Editor
# =============================================================================

class TestSpecEditor:

    def test_unique_name(self, shared_db_spec):
        editor = SpecEditor(parse_bytes(shared_db_spec))
        assert editor.unique_name("orders") == "orders-1"
        assert editor.unique_name("orders-db") == "orders-db-1"
        assert editor.unique_name("catalog") == "catalog"

    def test_add_link_is_idempotent(self, cycle_spec):
        editor = SpecEditor(parse_bytes(cycle_spec))
        assert editor.add_link("orders", "billing") is None
        assert editor.add_link("orders", "mailer") == "Added call: orders → mailer"
        assert editor.targets_of("orders") == ["billing", "mailer"]

    def test_remove_missing_link(self, cycle_spec):
        editor = SpecEditor(parse_bytes(cycle_spec))
        assert editor.remove_link("orders", "shipping") is None

    def test_mode_is_fixed_at_construction(self):
        spec = parse_bytes(b"services:\n  - name: a\ndependencies:\n  - from: a\n    to: b\n")
        editor = SpecEditor(spec)
        editor.remove_link("a", "b")
        assert editor.dependency_mode
        editor.add_link("a", "c")
        assert [(d.from_, d.to) for d in spec.dependencies] == [("a", "c")]
        assert spec.services[0].calls == []

    def test_set_link_sync_reports_only_changes(self, cycle_spec):
        editor = SpecEditor(parse_bytes(cycle_spec))
        assert editor.set_link_sync("orders", "billing", True) is None
        assert editor.set_link_sync("orders", "billing", False) is not None
        assert editor.link_is_sync("orders", "billing") is False

    @pytest.mark.parametrize("names,expected", [
        ([], ""),
        (["a"], "a"),
        (["a", "b"], "a and b"),
        (["a", "b", "c"], "a, b, and c"),
    ])
    def test_join_nice(self, names, expected):
        assert join_nice(names) == expected
