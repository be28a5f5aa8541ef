from __future__ import annotations

from pathlib import Path

from ..models.diff_result import ComparisonResult
from .orchestrator import MatchRun

"""SUMMARY line rendering for the diff and match tools.

Formats:
    SUMMARY mode=diff keys={first}/{second} only_first={n} only_second={n}
            differences={n} headers_match={yes|no}
    SUMMARY mode=match references={n} scored={n} unusable={n} success={n}
            closest={name|-}
"""

__all__ = [
    "render_diff_summary",
    "render_match_summary",
]


def render_diff_summary(result: ComparisonResult) -> str:
    """Render the one-line SUMMARY for a keyed diff run.

    Examples:
        >>> from hucompare.models.diff_result import ComparisonResult
        >>> r = ComparisonResult(("k", "v"), ("k", "v"), True, 2, 2, (), (), (), 0.0)
        >>> render_diff_summary(r)
        'SUMMARY mode=diff keys=2/2 only_first=0 only_second=0 differences=0 headers_match=yes'
    """
    return (
        f"SUMMARY mode=diff "
        f"keys={result.first_row_count}/{result.second_row_count} "
        f"only_first={len(result.only_in_first)} "
        f"only_second={len(result.only_in_second)} "
        f"differences={result.difference_count} "
        f"headers_match={'yes' if result.headers_match else 'no'}"
    )


def render_match_summary(run: MatchRun) -> str:
    best = run.best_outcome
    closest = Path(best.reference_path).name if best is not None else "-"
    total = len(run.outcomes)
    return (
        f"SUMMARY mode=match "
        f"references={total} "
        f"scored={total - run.unusable_count} "
        f"unusable={run.unusable_count} "
        f"success={run.success_count} "
        f"closest={closest}"
    )
