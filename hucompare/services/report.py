from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from pathlib import Path

from ..models.diff_result import ComparisonResult, ValueDifference
from ..models.match_result import ReferenceOutcome

"""Plain-text rendering of diff results and match outcomes.

Diff reports are itemized; match results are a fixed-column ASCII table whose
column widths are sized to the longest cell.
"""

__all__ = [
    "MAX_DIFFERENCE_OUTPUT",
    "MATCH_TABLE_HEADERS",
    "render_diff_report",
    "format_distance",
    "display_names",
    "render_match_table",
    "render_match_report",
]

MAX_DIFFERENCE_OUTPUT = 50
NON_NUMERIC_MARKER = "(non-numeric)"
UNDEFINED_DISTANCE = "-"

MATCH_TABLE_HEADERS: tuple[str, ...] = (
    "Reference",
    "Average Distance",
    "Closest Match",
    "Segmentation OK",
    "Hu Columns OK",
    "Result",
)


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _format_difference(diff: ValueDifference) -> str:
    delta_text = f"Δ={diff.delta}" if diff.delta is not None else NON_NUMERIC_MARKER
    return f'  Row {diff.key} column "{diff.column}": {diff.left} vs {diff.right} {delta_text}'


def render_diff_report(result: ComparisonResult, max_differences: int = MAX_DIFFERENCE_OUTPUT) -> str:
    """Render a keyed diff result as an itemized text report.

    At most ``max_differences`` differences are listed; the total count is
    always shown and the remainder summarized as "...and N more differences.".
    """
    lines = [
        "=== Hu Moment CSV Comparison ===",
        f"Tolerance: {result.tolerance}",
        f"Rows - first file: {result.first_row_count}, second file: {result.second_row_count}",
    ]

    if result.headers_match:
        lines.append(f"Headers match ({len(result.first_headers)} columns).")
    else:
        lines.append("")
        lines.append("Header mismatch detected.")
        lines.append("First : " + ", ".join(result.first_headers))
        lines.append("Second: " + ", ".join(result.second_headers))

    for label, keys in (
        ("Only in first file", result.only_in_first),
        ("Only in second file", result.only_in_second),
    ):
        if not keys:
            continue
        lines.append("")
        lines.append(f"{label} ({len(keys)}):")
        lines.extend(f"  - {key}" for key in keys)

    lines.append("")
    if not result.differences:
        lines.append("No value differences beyond tolerance.")
        return "\n".join(lines)

    lines.append(f"Value differences ({result.difference_count}):")
    shown = result.differences[:max_differences]
    lines.extend(_format_difference(d) for d in shown)
    remaining = result.difference_count - len(shown)
    if remaining > 0:
        lines.append(f"  ...and {remaining} more differences.")
    return "\n".join(lines)


def format_distance(value: float | None) -> str:
    """Format an average distance in scientific notation with 5 significant digits.

    Examples: 0.00123456 -> "1.2346E-3", 0.0 -> "0E0", None -> "-".
    """
    if value is None:
        return UNDEFINED_DISTANCE
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    mantissa, exponent = f"{value:.4E}".split("E")
    if "." in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(".")
    return f"{mantissa}E{int(exponent)}"


def display_names(outcomes: Sequence[ReferenceOutcome]) -> list[str]:
    """File name of each reference, or the full path when two references share a name."""
    names = [Path(o.reference_path).name for o in outcomes]
    counts = Counter(names)
    return [o.reference_path if counts[name] > 1 else name for o, name in zip(outcomes, names)]


def _outcome_cells(outcome: ReferenceOutcome, name: str) -> tuple[str, ...]:
    return (
        name,
        format_distance(outcome.average_distance),
        _yes_no(outcome.is_closest_match),
        outcome.segmentation_status.value,
        _yes_no(outcome.vector_columns_present),
        outcome.overall_result.value,
    )


def render_match_table(outcomes: Sequence[ReferenceOutcome]) -> str:
    """Render outcomes as an ASCII box table (``+``, ``-``, ``|`` borders)."""
    rows = [_outcome_cells(o, name) for o, name in zip(outcomes, display_names(outcomes))]
    widths = [len(h) for h in MATCH_TABLE_HEADERS]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def _line(cells: Sequence[str]) -> str:
        return "| " + " | ".join(cell.ljust(w) for cell, w in zip(cells, widths)) + " |"

    lines = [border, _line(MATCH_TABLE_HEADERS), border]
    lines.extend(_line(row) for row in rows)
    lines.append(border)
    return "\n".join(lines)


def render_match_report(query_source: str, outcomes: Sequence[ReferenceOutcome]) -> str:
    """Full match report: preamble, outcome table, closest match line, unusable references."""
    lines = [
        f"Query file: {Path(query_source).name}",
        f"References: {len(outcomes)} file(s)",
        "",
        render_match_table(outcomes),
        "",
    ]
    names = display_names(outcomes)
    best = next((i for i, o in enumerate(outcomes) if o.is_closest_match), None)
    if best is not None:
        lines.append(
            f"Closest match: {names[best]} "
            f"(average distance {format_distance(outcomes[best].average_distance)})"
        )
    else:
        lines.append("No valid reference comparisons were completed.")

    unusable = [(name, o) for name, o in zip(names, outcomes) if o.error is not None]
    if unusable:
        lines.append("")
        lines.append(f"Unusable references ({len(unusable)}):")
        lines.extend(f"  - {name}: {o.error}" for name, o in unusable)
    return "\n".join(lines)
