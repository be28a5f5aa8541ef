from __future__ import annotations

import argparse
import logging
from pathlib import Path

from ..config.loader import CompareConfig, load_env_file, resolve_config
from ..services.numeric import is_valid_tolerance, parse_number

"""Shared CLI plumbing: exit codes, argument parsing, config bootstrap.

Exit code contract (both tools):
- 0: report produced (differences / failed references do not change this)
- 1: wrong arguments (usage on stderr)
- 2: configuration, I/O or parse failure (message on stderr)
"""

EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_READ_FAILURE = 2


class UsageError(Exception):
    """Raised instead of argparse's own exit so the usage exit code stays 1."""


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


# 既知オプション以外は "-" で始まっても位置引数 (例: 許容差 "-1e-3")
_FLAG_OPTIONS = ("--debug", "-h", "--help")
_VALUE_OPTIONS = ("--config",)


def build_parser(prog: str, description: str, paths_help: str) -> ArgumentParser:
    p = ArgumentParser(prog=prog, description=description)
    p.add_argument("paths", nargs="*", metavar="ARG", help=paths_help)
    p.add_argument("--config", type=Path, default=None, help="YAML config file (default: ./hucompare.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p


def load_cli_config(explicit: Path | None) -> CompareConfig:
    """Load .env (without overriding the environment) then resolve the config.

    Raises:
        ConfigError: explicit / env-named config missing or invalid
    """
    load_env_file(Path(".env"))
    return resolve_config(explicit)


def parse_tolerance(raw: str, default: float, logger: logging.Logger) -> float:
    """Parse the tolerance argument; invalid text falls back to ``default`` with a warning."""
    value = parse_number(raw)
    if value is None or not is_valid_tolerance(value):
        logger.warning(f'Invalid tolerance value "{raw}". Falling back to {default}.')
        return default
    return value


def split_argv(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split ``argv`` into (option tokens, positional tokens)."""
    options: list[str] = []
    positionals: list[str] = []
    tokens = iter(argv)
    for token in tokens:
        name = token.split("=", 1)[0]
        if token in _FLAG_OPTIONS:
            options.append(token)
        elif name in _VALUE_OPTIONS:
            options.append(token)
            if "=" not in token:
                value = next(tokens, None)
                if value is not None:
                    options.append(value)
        else:
            positionals.append(token)
    return options, positionals


def parse_cli_args(parser: ArgumentParser, argv: list[str]) -> argparse.Namespace:
    """Parse options with ``parser``; positional tokens are taken verbatim.

    Raises:
        UsageError: malformed option (e.g. --config without a value)
    """
    options, positionals = split_argv(argv)
    args = parser.parse_args(options)
    args.paths = positionals
    return args
