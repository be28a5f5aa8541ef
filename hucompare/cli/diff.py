from __future__ import annotations

import sys
from pathlib import Path

from ..config.loader import ConfigError
from ..logging.init import log_summary, set_debug, setup_logging
from ..services.orchestrator import ComparisonError, run_diff
from ..services.report import render_diff_report
from ..services.summary import render_diff_summary
from .common import (
    EXIT_READ_FAILURE,
    EXIT_SUCCESS,
    EXIT_USAGE,
    UsageError,
    build_parser,
    load_cli_config,
    parse_cli_args,
    parse_tolerance,
)

"""hu-diff: compare two Hu moment exports cell by cell.

    hu-diff <fileA.csv> <fileB.csv> [tolerance] [--config PATH] [--debug]

Both files are expected to share one header; column 0 is the row key. The
report (header status, keys missing on either side, value differences beyond
the tolerance) goes to stdout, diagnostics to stderr.
"""

USAGE = "Usage: hu-diff <fileA.csv> <fileB.csv> [tolerance]"


def _usage_error(detail: str | None = None) -> int:
    if detail:
        print(f"hu-diff: {detail}", file=sys.stderr)
    print(USAGE, file=sys.stderr)
    print("Default tolerance is 0.0 (exact match).", file=sys.stderr)
    return EXIT_USAGE


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # NOTE: [] が渡された場合に sys.argv[1:] を読まないよう None のときのみ参照
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser(
        "hu-diff",
        "Compare two Hu moment CSV exports keyed by their first column",
        "fileA fileB [tolerance]",
    )
    try:
        args = parse_cli_args(parser, argv)
    except UsageError as e:
        return _usage_error(str(e))
    if len(args.paths) not in (2, 3):
        return _usage_error()

    if args.debug:
        set_debug(logger)

    try:
        cfg = load_cli_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_READ_FAILURE

    if len(args.paths) == 3:
        tolerance = parse_tolerance(args.paths[2], cfg.default_tolerance, logger)
    else:
        tolerance = cfg.default_tolerance

    first_path, second_path = Path(args.paths[0]), Path(args.paths[1])
    try:
        result = run_diff(first_path, second_path, tolerance, encoding=cfg.encoding)
    except ComparisonError as e:
        logger.error(str(e))
        return EXIT_READ_FAILURE

    print(render_diff_report(result, max_differences=cfg.max_differences))
    log_summary(render_diff_summary(result).removeprefix("SUMMARY "))
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
