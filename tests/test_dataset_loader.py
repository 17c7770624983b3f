"""
Unit tests for CSV loading and train/test splitting.

Tests ragged rows, per-field type inference, numeric conventions and the
seeded split bookkeeping.
"""

import os
import shutil
import tempfile
from decimal import Decimal

import pytest

from tabknn.dataset_loader import (
    get_table_info,
    load_table_from_csv,
    read_csv_lines,
    split_table
)
from tabknn.errors import ArgumentError
from tabknn.number_format import NumberFormat
from tabknn.table import Table


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    if os.path.exists(temp_dir):
        shutil.rmtree(temp_dir)


@pytest.fixture
def write_csv(temp_dir):
    """Write text to a CSV file inside the temporary directory."""
    def _write(text, name="data.csv"):
        path = os.path.join(temp_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path
    return _write


@pytest.fixture
def numbered_table():
    """Ten rows whose first column is the row index."""
    table = Table(3)
    for i in range(10):
        table.add_row(float(i), float(i * 2), "even" if i % 2 == 0 else "odd")
    return table


def test_read_csv_lines_trims_and_skips_empty_lines(write_csv):
    path = write_csv(" 1 , 2,cat \n\n3,4 ,dog\n")

    assert read_csv_lines(path) == [["1", "2", "cat"], ["3", "4", "dog"]]


def test_read_csv_lines_keeps_whitespace_only_line(write_csv):
    path = write_csv("1,2,cat\n   \n3,4,dog\n")

    assert read_csv_lines(path) == [["1", "2", "cat"], [""], ["3", "4", "dog"]]


def test_load_whitespace_only_line_is_short_row(write_csv):
    path = write_csv("1,2,cat\n   \n")
    table = load_table_from_csv(path)

    row = table.get_row(1)
    assert table.row_count == 2
    assert row[0].is_text
    assert row[0].as_text() == ""
    assert row[1] is None


def test_comma_decimal_format_still_splits_fields(write_csv):
    """The CSV split happens before numeric parsing."""
    path = write_csv("1,5,a\n")
    table = load_table_from_csv(path, number_format=NumberFormat(decimal_separator=",", group_separator="."))

    assert table.field_count == 3
    assert table.get_row(0)[0].as_number() == 1.0
    assert table.get_row(0)[1].as_number() == 5.0


def test_read_csv_lines_file_not_found():
    with pytest.raises(FileNotFoundError):
        read_csv_lines("/nonexistent/path/data.csv")


def test_load_types_each_field(write_csv):
    path = write_csv("1,2,cat\n3,4,dog\n")
    table = load_table_from_csv(path)

    assert table.field_count == 3
    assert table.row_count == 2
    row = table.get_row(0)
    assert row[0].is_number and row[0].as_number() == 1.0
    assert row[1].is_number and row[1].as_number() == 2.0
    assert row[2].is_text and row[2].as_text() == "cat"


def test_load_ragged_rows(write_csv):
    path = write_csv("1,2,3,4\n5,6\n7,8,9\n")
    table = load_table_from_csv(path)

    assert table.field_count == 4
    short = table.get_row(1)
    assert short.length == 4
    assert short[0].as_number() == 5.0
    assert short[2] is None
    assert short[3] is None
    assert table.get_row(2)[3] is None


def test_load_mixed_column(write_csv):
    path = write_csv("1,a\nx,2\n")
    table = load_table_from_csv(path)

    column = table.get_column(0)
    assert column[0].is_number
    assert column[1].is_text
    assert column[1].as_text() == "x"


def test_load_empty_middle_field(write_csv):
    path = write_csv("1,,3\n")
    table = load_table_from_csv(path)

    row = table.get_row(0)
    assert row[1].is_text
    assert row[1].as_text() == ""
    assert row[2].as_number() == 3.0


def test_load_leading_zeros_kept_as_text(write_csv):
    path = write_csv("007,1.5,12\n")
    table = load_table_from_csv(path, number_format=NumberFormat(allow_leading_zeros=False))

    row = table.get_row(0)
    assert row[0].is_text
    assert row[0].as_text() == "007"
    assert row[1].as_number() == 1.5
    assert row[2].as_number() == 12.0


def test_load_with_default_format_parses_leading_zeros(write_csv):
    path = write_csv("007\n")

    assert load_table_from_csv(path).get_row(0)[0].as_number() == 7.0


def test_load_with_number_type(write_csv):
    path = write_csv("0.1,2.5\n")
    table = load_table_from_csv(path, number_type=Decimal)

    assert table.number_type is Decimal
    assert table.get_row(0)[0].as_number() == Decimal("0.1")


def test_load_with_header(write_csv):
    path = write_csv("width,height,label\n1,2,a\n")
    table = Table.load_from_csv(path, header=True)

    assert table.labels == ["width", "height", "label"]
    assert table.row_count == 1


def test_load_empty_file(write_csv):
    path = write_csv("")
    table = load_table_from_csv(path)

    assert table.field_count == 0
    assert table.row_count == 0


def test_get_table_info(numbered_table):
    info = get_table_info(numbered_table)

    assert info["row_count"] == 10
    assert info["field_count"] == 3
    assert info["class_counts"] == {"even": 5, "odd": 5}
    assert list(info["class_counts"]) == ["even", "odd"]


def test_get_table_info_empty():
    info = get_table_info(Table(0))

    assert info["row_count"] == 0
    assert info["class_counts"] == {}


def test_split_partitions_every_row_once(numbered_table):
    train, test, train_indices, test_indices = split_table(numbered_table, 0.4, seed=3)

    assert len(test_indices) == 4
    assert len(train_indices) + len(test_indices) == 10
    assert sorted(train_indices + test_indices) == list(range(10))
    assert not set(train_indices) & set(test_indices)
    assert train.row_count == 6
    assert test.row_count == 4


def test_split_keeps_row_contents(numbered_table):
    train, test, train_indices, test_indices = split_table(numbered_table, 0.5, seed=1)

    assert [row[0].as_number() for row in test] == [float(i) for i in test_indices]
    assert [row[0].as_number() for row in train] == [float(i) for i in train_indices]
    assert train_indices == sorted(train_indices)


def test_split_floor_of_test_count(numbered_table):
    _, _, train_indices, test_indices = split_table(numbered_table, 0.35, seed=0)

    assert len(test_indices) == 3
    assert len(train_indices) == 7


def test_split_reproducibility(numbered_table):
    first = split_table(numbered_table, 0.4, seed=7)
    second = split_table(numbered_table, 0.4, seed=7)

    assert first[2] == second[2]
    assert first[3] == second[3]


def test_split_extremes(numbered_table):
    _, _, train_indices, test_indices = split_table(numbered_table, 0.0)
    assert test_indices == []
    assert train_indices == list(range(10))

    _, _, train_indices, test_indices = split_table(numbered_table, 1.0)
    assert train_indices == []
    assert sorted(test_indices) == list(range(10))


@pytest.mark.parametrize("fraction", [-0.1, 1.5])
def test_split_invalid_fraction(numbered_table, fraction):
    with pytest.raises(ArgumentError):
        split_table(numbered_table, fraction)
