from __future__ import annotations

import sys
from pathlib import Path

from ..config.loader import ConfigError
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, set_debug, setup_logging
from ..services.orchestrator import ComparisonError, run_match
from ..services.report import render_match_report
from ..services.summary import render_match_summary
from .common import (
    EXIT_READ_FAILURE,
    EXIT_SUCCESS,
    EXIT_USAGE,
    UsageError,
    build_parser,
    load_cli_config,
    parse_cli_args,
)

"""hu-match: find the reference export closest to a query export.

    hu-match <query.csv> <reference.csv> [reference.csv ...] [--config PATH] [--debug]

Rows are matched by index, Hu1-Hu7 are compared by Euclidean distance and
the reference with the smallest average distance is reported as the closest
match. A reference that cannot be read is reported as unusable; only an
unreadable query file aborts the run.
"""

USAGE = "Usage: hu-match <query.csv> <reference.csv> [reference.csv ...]"


def _usage_error(detail: str | None = None) -> int:
    if detail:
        print(f"hu-match: {detail}", file=sys.stderr)
    print(USAGE, file=sys.stderr)
    return EXIT_USAGE


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser(
        "hu-match",
        "Match a query Hu moment export against reference exports",
        "query reference [reference ...]",
    )
    try:
        args = parse_cli_args(parser, argv)
    except UsageError as e:
        return _usage_error(str(e))
    if len(args.paths) < 2:
        return _usage_error()

    if args.debug:
        set_debug(logger)

    try:
        cfg = load_cli_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_READ_FAILURE

    query_path = Path(args.paths[0])
    reference_paths = [Path(p) for p in args.paths[1:]]
    error_log = ErrorLogBuffer(cfg.error_log.directory) if cfg.error_log.enabled else None

    logger.info(f"Matching {query_path.name} against {len(reference_paths)} reference file(s)")
    try:
        run = run_match(query_path, reference_paths, encoding=cfg.encoding, error_log=error_log)
    except ComparisonError as e:
        logger.error(str(e))
        return EXIT_READ_FAILURE
    finally:
        if error_log is not None:
            written = error_log.flush()
            if written is not None:
                logger.info(f"error log written: {written}")

    print(render_match_report(run.query_source, run.outcomes))
    log_summary(render_match_summary(run).removeprefix("SUMMARY "))
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
