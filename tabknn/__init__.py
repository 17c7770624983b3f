"""
tabknn - k-nearest-neighbors classification over CSV tables
"""

from .cell import Cell, CellKind
from .row import Row
from .table import Table
from .number_format import NumberFormat, INVARIANT
from .distance import DistanceMetric, euclidean_distance, manhattan_distance
from .classifier import KnnClassifier
from .errors import ArgumentError, InvalidStateError

__version__ = "0.1.0"

__all__ = [
    'Cell', 'CellKind', 'Row', 'Table', 'NumberFormat', 'INVARIANT',
    'DistanceMetric', 'euclidean_distance', 'manhattan_distance',
    'KnnClassifier', 'ArgumentError', 'InvalidStateError'
]
