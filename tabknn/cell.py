"""
Cell Values

A Cell is a single typed table entry holding either a numeric scalar or a
string, so one row can mix numeric features with a categorical label.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from tabknn.errors import ArgumentError


class CellKind(Enum):
    NUMBER = "number"
    TEXT = "text"


@dataclass(frozen=True)
class Cell:
    """
    Immutable tagged value. Exactly one of `number` / `text` is meaningful,
    selected by `kind`.
    """

    kind: CellKind
    number: Any = None
    text: Optional[str] = None

    def __post_init__(self):
        if self.kind is CellKind.NUMBER and self.text is not None:
            raise ArgumentError("Number cell cannot carry a text payload")
        if self.kind is CellKind.TEXT and self.number is not None:
            raise ArgumentError("Text cell cannot carry a numeric payload")

    @classmethod
    def of_number(cls, value: Any) -> "Cell":
        return cls(CellKind.NUMBER, number=value)

    @classmethod
    def of_text(cls, value: str) -> "Cell":
        return cls(CellKind.TEXT, text=value)

    @classmethod
    def from_value(cls, value: Any, number_type: type = float) -> "Cell":
        """
        Build a cell from an already-typed value.

        No parsing happens here: a value is a Number only if it already is an
        instance of `number_type`. Anything else is stored as its text form.

        Args:
            value: Value to wrap
            number_type: Numeric type used by the owning table

        Returns:
            Cell of kind NUMBER or TEXT

        Raises:
            ArgumentError: If value is None
        """
        if value is None:
            raise ArgumentError("Cannot build a cell from None")
        if isinstance(value, Cell):
            return value
        if isinstance(value, number_type) and not isinstance(value, bool):
            return cls.of_number(value)
        return cls.of_text(value if isinstance(value, str) else str(value))

    @property
    def is_number(self) -> bool:
        return self.kind is CellKind.NUMBER

    @property
    def is_text(self) -> bool:
        return self.kind is CellKind.TEXT

    def as_number(self) -> Any:
        """
        Return the numeric payload.

        Raises:
            ArgumentError: If this is a Text cell
        """
        if self.kind is not CellKind.NUMBER:
            raise ArgumentError(f"Cell holds text {self.text!r}, not a number")
        return self.number

    def as_text(self) -> str:
        if self.text is not None:
            return self.text
        if self.number is not None:
            return str(self.number)
        return "n/a"

    def __str__(self) -> str:
        return self.as_text()
