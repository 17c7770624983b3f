"""
Table

An ordered collection of Rows sharing one column count, with optional
column labels. Tables are built once (row by row or from a CSV file) and
then treated as read-mostly: extraction returns copies and column removal
returns a new Table.
"""

from typing import Any, Iterator, List, Optional

import numpy as np

from tabknn.cell import Cell
from tabknn.errors import ArgumentError
from tabknn.row import Row


class Table:
    """
    Rectangular collection of Rows.

    Every row has exactly `field_count` slots. `number_type` is the numeric
    type of the table's Number cells; it is used when raw values are added
    and when the table is loaded from text.
    """

    def __init__(self, field_count: int, number_type: type = float):
        if not isinstance(field_count, int) or field_count < 0:
            raise ArgumentError(f"field_count must be a non-negative integer, got {field_count!r}")
        self._field_count = field_count
        self._number_type = number_type
        self._rows: List[Row] = []
        self._labels: List[Optional[str]] = [None] * field_count

    @property
    def field_count(self) -> int:
        return self._field_count

    @property
    def number_type(self) -> type:
        return self._number_type

    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def labels(self) -> List[Optional[str]]:
        return list(self._labels)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        for row in self._rows:
            yield row.copy()

    def __repr__(self) -> str:
        return f"Table(field_count={self._field_count}, row_count={len(self._rows)})"

    # Labels

    def set_labels(self, *labels: Optional[str]) -> None:
        """Assign column labels from the left; labels beyond field_count are ignored."""
        for i, label in enumerate(labels[:self._field_count]):
            self._labels[i] = label

    def get_label(self, column_index: int) -> Optional[str]:
        self._check_column(column_index)
        return self._labels[column_index]

    # Population

    def add_row(self, *values: Any) -> Row:
        """
        Append a row built from `values`.

        Values that are not Cells are wrapped with `Cell.from_value` using
        the table's number type. Slots past the supplied values stay unset.

        Args:
            *values: Up to field_count cells or raw values

        Returns:
            A copy of the appended row

        Raises:
            ArgumentError: If more values than field_count are supplied
        """
        if len(values) > self._field_count:
            raise ArgumentError(
                f"Number of values ({len(values)}) exceeds field count ({self._field_count})"
            )
        row = Row(self._field_count)
        for i, value in enumerate(values):
            row[i] = None if value is None else Cell.from_value(value, self._number_type)
        self._rows.append(row)
        return row.copy()

    def append_row(self, row: Row) -> None:
        """
        Append a copy of an existing Row.

        Raises:
            ArgumentError: If the row length differs from field_count
        """
        if len(row) != self._field_count:
            raise ArgumentError(
                f"Row length ({len(row)}) does not match field count ({self._field_count})"
            )
        self._rows.append(row.copy())

    # Extraction

    def _check_column(self, index: int) -> None:
        if not isinstance(index, int) or index < 0 or index >= self._field_count:
            raise IndexError(f"Column index {index} out of range [0, {self._field_count})")

    def get_column(self, index: int) -> List[Optional[Cell]]:
        self._check_column(index)
        return [row[index] for row in self._rows]

    def get_row(self, index: int) -> Row:
        if not isinstance(index, int) or index < 0 or index >= len(self._rows):
            raise IndexError(f"Row index {index} out of range [0, {len(self._rows)})")
        return self._rows[index].copy()

    def remove_column(self, index: int) -> "Table":
        """
        Return a new Table without column `index`.

        Remaining columns (and their labels) keep their relative order. The
        original table is not modified.

        Raises:
            IndexError: If index is outside [0, field_count)
        """
        self._check_column(index)
        table = Table(self._field_count - 1, self._number_type)
        table.set_labels(*(self._labels[:index] + self._labels[index + 1:]))
        for row in self._rows:
            table._rows.append(row.without_index(index))
        return table

    def copy(self) -> "Table":
        table = Table(self._field_count, self._number_type)
        table.set_labels(*self._labels)
        for row in self._rows:
            table._rows.append(row.copy())
        return table

    def to_matrix(self) -> np.ndarray:
        """
        Return the cells as a (row_count, field_count) numpy object array.
        Unset slots are None.
        """
        matrix = np.empty((len(self._rows), self._field_count), dtype=object)
        for i, row in enumerate(self._rows):
            for j, cell in enumerate(row):
                matrix[i, j] = cell
        return matrix

    @classmethod
    def load_from_csv(cls, path: str, number_format=None, number_type: type = float, header: bool = False) -> "Table":
        """
        Load a Table from a comma-separated text file.

        See `tabknn.dataset_loader.load_table_from_csv`.
        """
        from tabknn.dataset_loader import load_table_from_csv

        return load_table_from_csv(path, number_format=number_format, number_type=number_type, header=header)
