"""Plain-text rendering for the CLI.

This module is renderer-only. All query/transform logic lives in api/query.py.
"""

from typing import Dict, List, Sequence

from ..api.models import CatalogStats
from ..catalog.models import Control, QueryPredicates

NO_RESULTS_MESSAGE = "No controls found matching your search criteria."


def _value(value) -> str:
    if value is None:
        return "-"
    return str(getattr(value, "value", value))


def render_summary_line(shown: int, total: int, predicates: QueryPredicates) -> str:
    line = f"Showing {shown} of {total} controls"
    if predicates.has_text:
        line += f' matching "{predicates.text}"'
    return line


def _heading(shown: int, total: int, predicates: QueryPredicates) -> List[str]:
    title = f"{predicates.family} Controls" if predicates.family else "All Controls"
    return [title, render_summary_line(shown, total, predicates), ""]


def render_no_results(total: int, predicates: QueryPredicates) -> str:
    """Render the empty-view state (loaded catalog, nothing matches)."""
    return "\n".join(_heading(0, total, predicates) + [NO_RESULTS_MESSAGE])


def render_table(view: Sequence[Control], total: int, predicates: QueryPredicates) -> str:
    """Render the current view as a fixed-width table."""
    lines = _heading(len(view), total, predicates)
    lines.append(f"{'ID':<10} {'Pri':<4} {'Baseline':<20} {'Title':<50} {'Family':<30}")
    lines.append("-" * 118)
    for control in view:
        baseline = ", ".join(level.value for level in control.baseline) or "-"
        title = _value(control.title)
        if len(title) > 50:
            title = title[:47] + "..."
        lines.append(
            f"{control.id:<10} {_value(control.priority):<4} {baseline:<20} {title:<50} {_value(control.family):<30}"
        )
    return "\n".join(lines)


def render_control_detail(control: Control) -> str:
    """Render every field of one control (the expanded card)."""
    lines = [f"{control.id} - {_value(control.title)}", ""]
    lines.append(f"Family:    {_value(control.family)}")
    lines.append(f"Priority:  {_value(control.priority)}")
    baseline = ", ".join(level.value for level in control.baseline) or "-"
    lines.append(f"Baseline:  {baseline}")
    lines.append("")
    lines.append(f"Description: {_value(control.description)}")

    if control.control_text:
        lines.extend(["", "Control Text:", control.control_text])
    if control.supplemental_guidance:
        lines.extend(["", "Supplemental Guidance:", control.supplemental_guidance])
    if control.control_enhancements:
        lines.extend(["", f"Control Enhancements ({len(control.control_enhancements)}):"])
        for enhancement in control.control_enhancements:
            lines.append(f"  - {enhancement.id}: {enhancement.title}")
    return "\n".join(lines)


def render_stats(stats: CatalogStats) -> str:
    displayed_label = "Filtered Controls" if stats.selected_family else "Displayed Controls"
    rows = [
        ("Total Controls", stats.total_controls),
        (displayed_label, stats.displayed_controls),
        ("Control Families", stats.total_families),
        ("Enhancements", stats.total_enhancements),
    ]
    return "\n".join(f"{label:<20} {value}" for label, value in rows)


def render_families(families: List[str], counts: Dict[str, int]) -> str:
    lines = [f"{'Family':<66} {'Controls':>8}", "-" * 75]
    for family in families:
        lines.append(f"{family:<66} {counts.get(family, 0):>8}")
    return "\n".join(lines)
