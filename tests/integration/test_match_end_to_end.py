from __future__ import annotations

import json
from pathlib import Path

from hucompare.cli import match_main


def _rows(*vectors: tuple[float, ...]) -> list[str]:
    return [",".join([str(i), *map(str, v)]) for i, v in enumerate(vectors)]


QUERY = (
    (0.20, 0.010, 0.001, 0.0010, 0.00001, 0.0001, 0.00001),
    (0.25, 0.020, 0.002, 0.0015, 0.00002, 0.0002, -0.00001),
)


def test_match_end_to_end_picks_closest(write_csv, hu_header, capsys):
    query = write_csv("query.csv", [hu_header, *_rows(*QUERY)])
    exact = write_csv("exact.csv", [hu_header, *_rows(*QUERY)])
    shifted = write_csv("shifted.csv", [hu_header, *_rows(*(tuple(x + 0.1 for x in v) for v in QUERY))])
    partial = write_csv("partial.csv", [hu_header, *_rows(QUERY[0])])

    assert match_main([str(query), str(shifted), str(partial), str(exact)]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()

    def cells(name: str) -> list[str]:
        row = next(line for line in lines if line.startswith(f"| {name} "))
        return [c.strip() for c in row.strip("|").split("|")]

    # partial.csv も距離 0 だが先に現れるため最近傍になる
    assert cells("partial.csv") == ["partial.csv", "0E0", "Yes", "Partial", "Yes", "Success"]
    assert cells("exact.csv") == ["exact.csv", "0E0", "No", "Yes", "Yes", "Failure"]
    assert cells("shifted.csv")[2:] == ["No", "Yes", "Yes", "Failure"]
    assert lines[-1] == "Closest match: partial.csv (average distance 0E0)"


def test_match_end_to_end_header_variants(write_csv, capsys):
    header = "Index, HU1 ,hu2,Hu3,hu4,HU5,hu6,hu7,Extra"
    query = write_csv("query.csv", [header, "0, 1,1,1,1,1,1,1,x"])
    ref = write_csv("ref.csv", ["hu7,hu6,hu5,hu4,hu3,hu2,hu1", "1,1,1,1,1,1,1"])

    assert match_main([str(query), str(ref)]) == 0
    assert "Closest match: ref.csv (average distance 0E0)" in capsys.readouterr().out


def test_match_end_to_end_error_log_written(write_csv, hu_header, write_config, temp_workdir: Path, capsys):
    query = write_csv("query.csv", [hu_header, *_rows(*QUERY)])
    good = write_csv("good.csv", [hu_header, *_rows(*QUERY)])
    empty = temp_workdir / "data" / "empty.csv"
    empty.write_text("", encoding="utf-8")
    missing = temp_workdir / "data" / "missing.csv"

    assert match_main([str(query), str(empty), str(missing), str(good)]) == 0
    captured = capsys.readouterr()
    assert "Unusable references (2):" in captured.out
    assert "INFO error log written:" in captured.err

    log_files = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(log_files) == 1
    records = [json.loads(line) for line in log_files[0].read_text(encoding="utf-8").splitlines()]
    assert [r["file"] for r in records] == [str(empty), str(missing)]
    assert [r["error_type"] for r in records] == ["EMPTY_INPUT", "READ_FAILURE"]
    assert all(r["row"] == -1 for r in records)
    assert set(records[0]) == {"timestamp", "file", "row", "error_type", "message"}


def test_match_end_to_end_no_error_log_when_disabled(write_csv, hu_header, temp_workdir: Path, capsys):
    query = write_csv("query.csv", [hu_header, *_rows(*QUERY)])
    empty = temp_workdir / "data" / "empty.csv"
    empty.write_text("", encoding="utf-8")

    assert match_main([str(query), str(empty)]) == 0
    assert not (temp_workdir / "logs").exists()
    assert "No valid reference comparisons were completed." in capsys.readouterr().out
