"""
Row

One fixed-length record of Cells. Slots start unset (None) and are filled
by index; the length never changes after construction.
"""

from typing import Any, Iterable, Iterator, List, Optional

from tabknn.cell import Cell
from tabknn.errors import ArgumentError


class Row:
    """
    Fixed-length, index-addressable sequence of Cell slots.

    Conversions to and from plain lists are explicit (`from_cells`,
    `to_cells`, `to_numbers`).
    """

    __slots__ = ("_cells",)

    def __init__(self, length: int):
        if length < 0:
            raise ArgumentError(f"Row length must be non-negative, got {length}")
        self._cells: List[Optional[Cell]] = [None] * length

    @classmethod
    def from_cells(cls, cells: Iterable[Optional[Cell]]) -> "Row":
        cells = list(cells)
        row = cls(len(cells))
        for i, cell in enumerate(cells):
            row[i] = cell
        return row

    @property
    def length(self) -> int:
        return len(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def _check_index(self, index: int) -> None:
        if not isinstance(index, int) or index < 0 or index >= len(self._cells):
            raise IndexError(f"Row index {index} out of range [0, {len(self._cells)})")

    def __getitem__(self, index: int) -> Optional[Cell]:
        self._check_index(index)
        return self._cells[index]

    def __setitem__(self, index: int, cell: Optional[Cell]) -> None:
        self._check_index(index)
        if cell is not None and not isinstance(cell, Cell):
            raise ArgumentError(f"Row slots hold Cell values, got {type(cell).__name__}")
        self._cells[index] = cell

    def __iter__(self) -> Iterator[Optional[Cell]]:
        return iter(list(self._cells))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return "Row([" + ", ".join("unset" if c is None else repr(c.as_text()) for c in self._cells) + "])"

    def without_index(self, index: int) -> "Row":
        """
        Return a new Row of length-1 omitting slot `index`.

        The source row is not modified.

        Raises:
            IndexError: If index is outside [0, length)
        """
        self._check_index(index)
        return Row.from_cells(self._cells[:index] + self._cells[index + 1:])

    def copy(self) -> "Row":
        return Row.from_cells(self._cells)

    def to_cells(self) -> List[Optional[Cell]]:
        return list(self._cells)

    def to_numbers(self) -> List[Any]:
        """
        Convert to a plain list of numeric payloads.

        Returns:
            List of numbers in slot order

        Raises:
            ArgumentError: If any slot is unset or holds text
        """
        numbers = []
        for i, cell in enumerate(self._cells):
            if cell is None or not cell.is_number:
                found = "unset" if cell is None else repr(cell.as_text())
                raise ArgumentError(f"Slot {i} is not numeric (found {found})")
            numbers.append(cell.number)
        return numbers
