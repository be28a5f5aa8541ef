from __future__ import annotations

import math

import pytest

from hucompare.services.keyed_diff import column_name, compare_cells, compare_keyed
from hucompare.services.numeric import parse_number
from hucompare.tables.reader import parse_table


def _table(text: str, source: str = "<memory>"):
    return parse_table(text, source)


TABLE_A = "id,hu1,hu2,label\n1,0.5,1.0,a\n2,0.25,2.0,b\n3,1.0,3.0,c\n"
TABLE_B = "id,hu1,hu2,label\n1,0.5,1.5,a\n2,0.75,2.0,x\n4,1.0,3.0,c\n"


def test_parse_number():
    assert parse_number("1.5") == 1.5
    assert parse_number(" -2e-3 ") == -0.002
    assert math.isnan(parse_number("NaN"))
    assert parse_number("inf") == math.inf
    assert parse_number("abc") is None
    assert parse_number("") is None
    assert parse_number("1_000") is None
    assert parse_number(None) is None


def test_identical_tables_have_no_differences():
    for tolerance in (0.0, 0.5, 10.0):
        result = compare_keyed(_table(TABLE_A), _table(TABLE_A), tolerance)
        assert result.differences == ()
        assert result.only_in_first == ()
        assert result.only_in_second == ()
        assert result.headers_match is True


def test_tolerance_scenario():
    first = _table("k,v\nk1,1.0\n")
    second = _table("k,v\nk1,1.05\n")
    assert compare_keyed(first, second, 0.1).differences == ()

    result = compare_keyed(first, second, 0.01)
    assert result.difference_count == 1
    diff = result.differences[0]
    assert (diff.key, diff.column, diff.left, diff.right) == ("k1", "v", "1.0", "1.05")
    assert diff.delta == pytest.approx(0.05)
    assert diff.is_numeric


def test_difference_must_strictly_exceed_tolerance():
    first = _table("k,v\nk1,1.5\n")
    second = _table("k,v\nk1,2.0\n")
    assert compare_keyed(first, second, 0.5).differences == ()
    assert compare_keyed(first, second, 0.25).difference_count == 1


def test_non_numeric_cells_use_exact_equality():
    assert compare_cells("k", "c", "abc", "abc", 0.0) is None
    diff = compare_cells("k", "c", "abc", "abd", 100.0)
    assert diff is not None and diff.delta is None and not diff.is_numeric
    # 片側だけ数値の場合も文字列比較
    mixed = compare_cells("k", "c", "1.0", "n/a", 100.0)
    assert mixed is not None and mixed.delta is None


def test_whitespace_is_significant_for_text_only():
    assert compare_cells("k", "c", " a", "a", 0.0) is not None
    assert compare_cells("k", "c", " 1", "1", 0.0) is None


def test_key_partition_and_ordering():
    result = compare_keyed(_table(TABLE_A), _table(TABLE_B), 0.0)
    assert result.only_in_first == ("3",)
    assert result.only_in_second == ("4",)
    assert [(d.key, d.column) for d in result.differences] == [
        ("1", "hu2"),
        ("2", "hu1"),
        ("2", "label"),
    ]
    assert result.differences[2].delta is None
    assert result.first_row_count == 3
    assert result.second_row_count == 3


def test_keys_sorted_independent_of_input_order():
    first = _table("k,v\nc,1\na,1\nb,1\n")
    second = _table("k,v\nz,1\ny,1\n")
    result = compare_keyed(first, second, 0.0)
    assert result.only_in_first == ("a", "b", "c")
    assert result.only_in_second == ("y", "z")


def test_swapping_inputs_swaps_one_sided_keys():
    a, b = _table(TABLE_A), _table(TABLE_B)
    forward = compare_keyed(a, b, 0.0)
    backward = compare_keyed(b, a, 0.0)
    assert forward.only_in_first == backward.only_in_second
    assert forward.only_in_second == backward.only_in_first


def test_duplicate_keys_last_row_wins():
    first = _table("k,v\n1,10\n1,20\n")
    second = _table("k,v\n1,20\n")
    result = compare_keyed(first, second, 0.0)
    assert result.differences == ()
    assert result.first_row_count == 1

    reversed_first = _table("k,v\n1,20\n1,10\n")
    result = compare_keyed(reversed_first, second, 0.0)
    assert result.difference_count == 1
    assert result.differences[0].left == "10"


def test_monotonic_suppression():
    a, b = _table(TABLE_A), _table(TABLE_B)
    loose = set(compare_keyed(a, b, 0.5).differences)
    strict = set(compare_keyed(a, b, 0.1).differences)
    assert loose <= strict
    assert len(strict) > len(loose)


def test_header_mismatch_is_reported_not_fatal():
    first = _table("id,,b\n1,2,3\n")
    second = _table("key,a,b\n1,5,3\n")
    result = compare_keyed(first, second, 0.0)
    assert result.headers_match is False
    assert result.first_headers == ("id", "", "b")
    assert result.second_headers == ("key", "a", "b")
    # 1 番目のテーブルのヘッダが空なら "Column i"
    assert result.differences[0].column == "Column 1"


def test_column_name_fallbacks():
    assert column_name(("id", "a"), 1) == "a"
    assert column_name(("id", ""), 1) == "Column 1"
    assert column_name(("id",), 3) == "Column 3"


@pytest.mark.parametrize("tolerance", [-0.1, math.nan, math.inf])
def test_invalid_tolerance_rejected(tolerance):
    with pytest.raises(ValueError):
        compare_keyed(_table(TABLE_A), _table(TABLE_A), tolerance)
