"""
Unit tests for Cell values and Rows.

Tests typed cell construction, text/number access, row indexing and the
explicit row conversions.
"""

from decimal import Decimal

import pytest

from tabknn.cell import Cell, CellKind
from tabknn.errors import ArgumentError
from tabknn.row import Row


def test_cell_from_number():
    cell = Cell.from_value(2.5)

    assert cell.kind is CellKind.NUMBER
    assert cell.as_number() == 2.5
    assert cell.as_text() == "2.5"


def test_cell_from_text():
    cell = Cell.from_value("cat")

    assert cell.kind is CellKind.TEXT
    assert cell.as_text() == "cat"
    assert str(cell) == "cat"


def test_cell_from_value_does_not_parse_text():
    """Numeric-looking strings are not parsed at construction."""
    cell = Cell.from_value("3.0")

    assert cell.is_text
    assert cell.as_text() == "3.0"


def test_cell_from_value_respects_number_type():
    assert Cell.from_value(Decimal("1.5"), Decimal).is_number
    assert Cell.from_value(3, int).is_number
    # an int is not a value of the float number type
    assert Cell.from_value(3, float).is_text
    assert Cell.from_value(True, int).is_text


def test_cell_from_none_raises():
    with pytest.raises(ArgumentError):
        Cell.from_value(None)


def test_cell_as_number_on_text_raises():
    with pytest.raises(ArgumentError):
        Cell.of_text("dog").as_number()


def test_cell_rejects_two_payloads():
    with pytest.raises(ArgumentError):
        Cell(CellKind.NUMBER, number=1.0, text="1")


def test_cell_without_payload_reads_na():
    assert Cell(CellKind.TEXT).as_text() == "n/a"


def test_cell_is_immutable():
    cell = Cell.of_number(1.0)
    with pytest.raises(Exception):
        cell.number = 2.0


def test_row_starts_unset():
    row = Row(3)

    assert len(row) == 3
    assert row.length == 3
    assert list(row) == [None, None, None]


def test_row_get_set():
    row = Row(2)
    row[0] = Cell.of_number(1.0)
    row[1] = Cell.of_text("a")

    assert row[0].as_number() == 1.0
    assert row[1].as_text() == "a"


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_row_out_of_range(index):
    row = Row(3)

    with pytest.raises(IndexError):
        row[index]
    with pytest.raises(IndexError):
        row[index] = Cell.of_number(0.0)


def test_row_rejects_non_cell_values():
    row = Row(1)

    with pytest.raises(ArgumentError):
        row[0] = 1.0


def test_without_index():
    cells = [Cell.of_number(float(i)) for i in range(5)]
    row = Row.from_cells(cells)

    for i in range(5):
        reduced = row.without_index(i)
        assert reduced.length == row.length - 1
        for j in range(reduced.length):
            assert reduced[j] == row[j if j < i else j + 1]


def test_without_index_does_not_mutate_source():
    row = Row.from_cells([Cell.of_number(1.0), Cell.of_text("x")])
    row.without_index(0)

    assert row.length == 2
    assert row[0].as_number() == 1.0


def test_without_index_out_of_range():
    with pytest.raises(IndexError):
        Row(2).without_index(2)


def test_to_numbers():
    row = Row.from_cells([Cell.of_number(1.0), Cell.of_number(2.5)])

    assert row.to_numbers() == [1.0, 2.5]


def test_to_numbers_with_text_raises():
    row = Row.from_cells([Cell.of_number(1.0), Cell.of_text("cat")])

    with pytest.raises(ArgumentError):
        row.to_numbers()


def test_to_numbers_with_unset_slot_raises():
    row = Row(2)
    row[0] = Cell.of_number(1.0)

    with pytest.raises(ArgumentError):
        row.to_numbers()


def test_copy_is_independent():
    row = Row.from_cells([Cell.of_number(1.0)])
    duplicate = row.copy()
    duplicate[0] = Cell.of_number(9.0)

    assert row[0].as_number() == 1.0
    assert duplicate != row
