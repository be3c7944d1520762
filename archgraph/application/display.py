"""
Display Module

Terminal formatting and colorized output for pipeline results.

Provides:
    - Colors: ANSI terminal color codes
    - Display functions for analysis, suggestion and apply results
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from archgraph.analysis import score_detection

if TYPE_CHECKING:
    from archgraph.suggestion import Suggestion
    from archgraph.versioning import Version
    from .analysis_service import AnalysisResult, ApplyResult, PreviewResult


# =============================================================================
# Terminal Colors
# =============================================================================

class Colors:
    """ANSI color codes for terminal output."""
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


def colored(text: str, color: str, bold: bool = False) -> str:
    """Apply color to text."""
    style = Colors.BOLD if bold else ""
    return f"{style}{color}{text}{Colors.RESET}"


def severity_color(severity: str) -> str:
    """Get color for severity string."""
    return {
        "HIGH": Colors.RED,
        "MEDIUM": Colors.YELLOW,
        "LOW": Colors.GRAY,
    }.get(severity, Colors.RESET)


def print_header(title: str, char: str = "=", width: int = 78) -> None:
    print(f"\n{colored(char * width, Colors.CYAN)}")
    print(f"{colored(f' {title} '.center(width), Colors.CYAN, bold=True)}")
    print(f"{colored(char * width, Colors.CYAN)}")


def print_subheader(title: str, char: str = "-", width: int = 78) -> None:
    print(f"\n{colored(f' {title} ', Colors.WHITE, bold=True)}")
    print(f"{colored(char * width, Colors.GRAY)}")


# =============================================================================
# Display Functions
# =============================================================================

def display_analysis(result: "AnalysisResult", title: str = "Architecture Analysis") -> None:
    print_header(title)

    stats = result.graph.get_statistics()
    print_subheader("Graph Summary")
    print(f"  {'Services:':<20} {stats['num_services']}")
    print(f"  {'Databases:':<20} {stats['num_databases']}")
    print(f"  {'Edges:':<20} {stats['num_edges']}")
    for kind, count in stats["edges_by_kind"].items():
        print(f"  {'  ' + kind + ':':<20} {count}")

    print_subheader(f"Detections ({len(result.detections)})")
    if not result.detections:
        print(colored("  ✓ No anti-patterns detected", Colors.GREEN))
    for d in result.detections:
        sev = colored(f"{d.severity.value:<6}", severity_color(d.severity.value), bold=True)
        names = ", ".join(result.graph.name_of(n) for n in d.nodes)
        print(f"  [{sev}] {score_detection(d):>3}  {d.title}")
        print(colored(f"           {names}", Colors.GRAY))

    print_subheader("Artifacts")
    print(f"  {'Output dir:':<20} {result.out_dir}")
    print(f"  {'DOT:':<20} {result.dot_path}")
    if result.image_path:
        print(f"  {'Image:':<20} {result.image_path}")
    if result.render_error:
        print(f"  {'Render:':<20} {colored(result.render_error, Colors.YELLOW)}")


def display_suggestions(suggestions: List["Suggestion"]) -> None:
    print_subheader(f"Suggestions ({len(suggestions)})")
    for s in suggestions:
        mark = colored("✓ ", Colors.GREEN) if s.auto_fix_applied else ""
        print(f"\n  {mark}{colored(s.title, Colors.WHITE, bold=True)} {colored('(' + s.kind.value + ')', Colors.GRAY)}")
        for bullet in s.bullets:
            print(f"    - {bullet}")
        for note in s.auto_fix_notes:
            print(colored(f"    * {note}", Colors.GREEN))


def display_preview(result: "PreviewResult") -> None:
    display_analysis(result.analysis)
    display_suggestions(result.suggestions)


def display_apply(result: "ApplyResult") -> None:
    display_analysis(result.original_analysis, title="Original Architecture")
    if not result.changed:
        print(colored("\n  No auto-fix changed the spec; no version created.", Colors.YELLOW))
        return
    display_suggestions(result.applied_fixes)
    display_analysis(result.fixed_analysis, title="Fixed Architecture")
    v = result.fixed_version
    print(colored(f"\n✓ Version {v.job_id}/{v.version_id} written to {v.spec_path}", Colors.GREEN))


def display_versions(versions: List["Version"]) -> None:
    print_subheader(f"Versions ({len(versions)})")
    for v in versions:
        print(f"  {v.version_id}  {v.created_at.isoformat()}  {v.label:<10} {v.spec_path}")
