"""
Distance Metrics

Distances between two feature vectors (Rows with the class column already
removed). The metric set is closed: Euclidean and Manhattan.

Note: `euclidean_distance` returns the sum of squared differences without
taking the square root. Nearest-neighbor ranking is unchanged by the
monotonic square root, but the value is not a true Euclidean distance.
"""

from enum import Enum
from typing import Iterable, Optional, Union

import numpy as np

from tabknn.cell import Cell
from tabknn.errors import ArgumentError, InvalidStateError
from tabknn.row import Row


FeatureVector = Union[Row, Iterable[Optional[Cell]]]


class DistanceMetric(Enum):
    EUCLIDEAN = "euclidean"
    MANHATTAN = "manhattan"

    @classmethod
    def parse(cls, value: Union["DistanceMetric", str]) -> "DistanceMetric":
        """Accept a member or its case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        choices = ", ".join(m.value for m in cls)
        raise ArgumentError(f"Unsupported distance metric {value!r} (expected one of: {choices})")


def _differences(a: FeatureVector, b: FeatureVector) -> np.ndarray:
    """
    Per-feature differences, computed in the cells' own numeric type and
    then coerced to float64.
    """
    a = list(a)
    b = list(b)
    if len(a) != len(b):
        raise ArgumentError(f"Feature vectors differ in length ({len(a)} vs {len(b)})")

    diffs = np.empty(len(a), dtype=np.float64)
    for i, (x, y) in enumerate(zip(a, b)):
        if x is None or y is None or not x.is_number or not y.is_number:
            raise ArgumentError(f"Feature {i} is not numeric in both vectors")
        try:
            diffs[i] = float(x.number - y.number)
        except TypeError:
            raise ArgumentError(
                f"Feature {i} mixes incompatible numeric types "
                f"({type(x.number).__name__} and {type(y.number).__name__})"
            )
    return diffs


def euclidean_distance(a: FeatureVector, b: FeatureVector) -> float:
    """
    Squared Euclidean distance (sum of squared differences, no square root).

    Raises:
        ArgumentError: On length mismatch or non-numeric features
    """
    diffs = _differences(a, b)
    return float(np.sum(diffs ** 2))


def manhattan_distance(a: FeatureVector, b: FeatureVector) -> float:
    """
    Sum of absolute differences.

    Raises:
        ArgumentError: On length mismatch or non-numeric features
    """
    diffs = _differences(a, b)
    return float(np.sum(np.abs(diffs)))


def compute_distance(metric: DistanceMetric, a: FeatureVector, b: FeatureVector) -> float:
    if metric is DistanceMetric.EUCLIDEAN:
        return euclidean_distance(a, b)
    elif metric is DistanceMetric.MANHATTAN:
        return manhattan_distance(a, b)
    else:
        raise InvalidStateError(f"Distance metric {metric!r} is not supported")
