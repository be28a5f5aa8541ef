# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from hucompare.config.loader import CONFIG_ENV_VAR
from hucompare.logging.init import reset_logging

HU_HEADER = "idx,hu1,hu2,hu3,hu4,hu5,hu6,hu7"


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    # .env 読み込みで設定された値がテスト間で漏れないよう、終了時に必ず削除される状態にする
    monkeypatch.setenv(CONFIG_ENV_VAR, "unset")
    monkeypatch.delenv(CONFIG_ENV_VAR)
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def write_csv(temp_workdir: Path) -> Callable[[str, list[str]], Path]:
    """Write ``lines`` (newline-terminated) to data/<name> and return the path."""
    def _write(name: str, lines: list[str]) -> Path:
        path = temp_workdir / "data" / name
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return path
    return _write


@pytest.fixture()
def hu_header() -> str:
    return HU_HEADER


@pytest.fixture()
def sample_config_yaml() -> str:
    return """default_tolerance: 0.25
max_differences: 5
encoding: utf-8
error_log:
  enabled: true
  directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "hucompare.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
