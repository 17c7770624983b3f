"""
Numeric Parsing Convention

Decides whether a raw CSV field is a number. The convention is injectable
so callers can keep zero-padded codes as text or reject scientific
notation. CSV lines are split on "," before parsing, so a comma decimal
or group separator only applies when `parse` is called directly on text
that was not read through the CSV loader.
"""

import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional


@dataclass(frozen=True)
class NumberFormat:
    """
    Convention used to recognise numeric text.

    Attributes:
        decimal_separator: Separator between integer and fractional digits
        group_separator: Thousands separator accepted in the integer part (None = not accepted)
        allow_leading_zeros: Whether "007" is a number; when False such fields stay text
        allow_exponent: Whether scientific notation ("1e-3") is accepted
    """

    decimal_separator: str = "."
    group_separator: Optional[str] = None
    allow_leading_zeros: bool = True
    allow_exponent: bool = True

    def __post_init__(self):
        if len(self.decimal_separator) != 1:
            raise ValueError("decimal_separator must be a single character")
        if self.group_separator is not None and (
            len(self.group_separator) != 1 or self.group_separator == self.decimal_separator
        ):
            raise ValueError("group_separator must be a single character different from decimal_separator")

    def _pattern(self) -> "re.Pattern":
        dec = re.escape(self.decimal_separator)
        if self.group_separator is not None:
            grp = re.escape(self.group_separator)
            integer = rf"(?:\d{{1,3}}(?:{grp}\d{{3}})+|\d+)"
        else:
            integer = r"\d+"
        exponent = r"(?:[eE][+-]?\d+)?" if self.allow_exponent else ""
        return re.compile(rf"^[+-]?(?:{integer}(?:{dec}\d*)?|{dec}\d+){exponent}$")

    def parse(self, text: str, number_type: type = float) -> Optional[Any]:
        """
        Parse `text` as a `number_type` under this convention.

        Args:
            text: Raw field text (already trimmed)
            number_type: Numeric type to construct (float, int, Decimal, Fraction, ...)

        Returns:
            The parsed number, or None when the text is not a number
        """
        if not text or not _pattern_for(self).match(text):
            return None

        digits = text.lstrip("+-").split(self.decimal_separator)[0]
        if self.group_separator is not None:
            digits = digits.replace(self.group_separator, "")
        digits = re.split(r"[eE]", digits)[0]
        if not self.allow_leading_zeros and len(digits) > 1 and digits.startswith("0"):
            return None

        normalized = text
        if self.group_separator is not None:
            normalized = normalized.replace(self.group_separator, "")
        if self.decimal_separator != ".":
            normalized = normalized.replace(self.decimal_separator, ".")

        try:
            value = number_type(normalized)
            # overflow to inf would break distance arithmetic
            if not math.isfinite(float(value)):
                return None
        except (ValueError, ArithmeticError, TypeError):
            return None
        return value


@lru_cache(maxsize=None)
def _pattern_for(number_format: NumberFormat) -> "re.Pattern":
    return number_format._pattern()


INVARIANT = NumberFormat()
