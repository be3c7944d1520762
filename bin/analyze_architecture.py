#!/usr/bin/env python3
"""
Architecture Anti-Pattern CLI

Analyzes a service architecture spec (YAML or JSON), reports anti-patterns,
suggests remediations and applies conservative auto-fixes as new versions.

Commands:
    analyze   - Build the graph, detect anti-patterns, write artifacts
    suggest   - analyze + advisory suggestions
    apply     - analyze + auto-fix + snapshot version + re-analysis
    versions  - List snapshot versions of a job

Usage:
    python bin/analyze_architecture.py analyze spec.yaml
    python bin/analyze_architecture.py suggest spec.yaml --json
    python bin/analyze_architecture.py apply spec.yaml --job-id checkout
    python bin/analyze_architecture.py versions --job-id checkout
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import argparse
import dataclasses
import json
import logging
from typing import List, Optional

from archgraph.application.container import Container
from archgraph.application import display
from archgraph.config.settings import Settings
from archgraph.versioning import list_versions


# ---------------------------------------------------------------------------
# CLI Argument Parsing
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="analyze_architecture",
        description="Detect and fix anti-patterns in a service architecture spec.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s analyze spec.yaml                 Analyze and write artifacts
  %(prog)s analyze spec.json --no-render     Skip the GraphViz render
  %(prog)s suggest spec.yaml --json          Suggestions as JSON
  %(prog)s apply spec.yaml --job-id shop     Auto-fix into a new version
  %(prog)s versions --job-id shop            List versions of a job
""",
    )

    common = argparse.ArgumentParser(add_help=False)
    output = common.add_argument_group("Output")
    output.add_argument("--out-dir", "-o", metavar="DIR", help="Artifact directory (default: $ARCHGRAPH_OUT_DIR or out)")
    output.add_argument("--title", "-t", help="Graph title")
    output.add_argument("--format", "-f", choices=["yaml", "json"], help="Spec format (default: from file extension)")
    output.add_argument("--no-render", action="store_true", help="Do not invoke the GraphViz binary")
    output.add_argument("--json", action="store_true", help="Print results as JSON to stdout")
    output.add_argument("--quiet", "-q", action="store_true", help="Suppress console display")
    output.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("analyze", "Detect anti-patterns"),
        ("suggest", "Detect anti-patterns and suggest fixes"),
        ("apply", "Auto-fix the spec into a new version"),
    ):
        cmd = sub.add_parser(name, parents=[common], help=help_text)
        cmd.add_argument("spec", help="Path to the architecture spec")
        if name == "apply":
            cmd.add_argument("--job-id", "-j", default="adhoc", help="Job id for versioning (default: adhoc)")

    versions = sub.add_parser("versions", parents=[common], help="List versions of a job")
    versions.add_argument("--job-id", "-j", default="adhoc", help="Job id (default: adhoc)")

    return parser


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def build_settings(args: argparse.Namespace) -> Settings:
    """Environment settings overridden by CLI flags."""
    settings = Settings.from_env()
    overrides = {}
    if args.out_dir:
        overrides["out_dir"] = args.out_dir
    if args.title is not None:
        overrides["title"] = args.title
    if args.no_render:
        overrides["render"] = False
    return dataclasses.replace(settings, **overrides) if overrides else settings


def spec_format(args: argparse.Namespace, settings: Settings) -> str:
    if args.format:
        return args.format
    suffix = Path(args.spec).suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    return settings.spec_format


def emit_json(payload) -> None:
    print(json.dumps(payload, indent=2, default=str))


# ---------------------------------------------------------------------------
# Entry Point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = (
        logging.DEBUG if args.verbose
        else logging.WARNING if args.quiet
        else Settings.from_env().log_level
    )
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        settings = build_settings(args)

        if args.command == "versions":
            versions = list_versions(settings.out_dir, args.job_id)
            if args.json:
                emit_json([v.to_dict() for v in versions])
            elif not args.quiet:
                display.display_versions(versions)
            return 0

        service = Container.from_settings(settings).analysis_service()
        data = Path(args.spec).read_bytes()
        fmt = spec_format(args, settings)

        if args.command == "analyze":
            result = service.analyze(data, fmt=fmt)
            show = display.display_analysis
        elif args.command == "suggest":
            result = service.preview_suggestions(data, fmt=fmt)
            show = display.display_preview
        else:
            result = service.apply_suggestions(args.job_id, data, fmt=fmt)
            show = display.display_apply

        if args.json:
            emit_json(result.to_dict())
        elif not args.quiet:
            show(result)
        return 0

    except Exception as exc:
        print(display.colored(f"Error: {exc}", display.Colors.RED), file=sys.stderr)
        if args.verbose:
            logging.exception("Command failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
