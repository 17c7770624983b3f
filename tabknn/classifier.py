"""
K-Nearest-Neighbors Classifier

This module implements the KNN classifier over Tables. Training only
retains a private copy of the training rows; all distance work happens at
classification time. A query is labelled by majority vote among the k
training rows closest to it under the selected distance metric.
"""

import logging
import numbers
import time
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from sklearn.metrics import accuracy_score, confusion_matrix

from tabknn.cell import Cell
from tabknn.dataset_loader import split_table
from tabknn.distance import DistanceMetric, compute_distance
from tabknn.errors import ArgumentError, InvalidStateError
from tabknn.row import Row
from tabknn.table import Table


logger = logging.getLogger(__name__)


def _label_of(cell: Optional[Cell]) -> str:
    return "n/a" if cell is None else cell.as_text()


def _resolve_class_index(class_column_index: int, field_count: int) -> int:
    # -1 means "last column"
    if class_column_index == -1:
        return field_count - 1
    if not isinstance(class_column_index, int) or not 0 <= class_column_index < field_count:
        raise IndexError(f"Class column index {class_column_index} out of range [0, {field_count})")
    return class_column_index


class KnnClassifier:
    """
    KNN classifier with a Untrained -> Trained lifecycle.

    `train` copies the caller's rows, so later changes to the source Table
    do not affect the model. Calling `train` again replaces the retained
    rows. Every classification method raises InvalidStateError before the
    first `train`.

    Instances are not thread-safe: callers sharing one classifier across
    threads must hold an exclusive lock around `train`.
    """

    def __init__(self, k: int = 3, distance_metric: Union[DistanceMetric, str] = DistanceMetric.EUCLIDEAN):
        self.k = k
        self.distance_metric = distance_metric
        self._training_table: Optional[Table] = None
        self._features: List[Tuple[Row, str]] = []
        self._class_column_index: Optional[int] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "KnnClassifier":
        """
        Build a classifier from a configuration dictionary.

        Args:
            config: Dictionary with optional 'k' and 'distance_metric' keys

        Returns:
            Untrained KnnClassifier
        """
        return cls(
            k=config.get("k", 3),
            distance_metric=config.get("distance_metric", DistanceMetric.EUCLIDEAN)
        )

    # Configuration

    @property
    def k(self) -> int:
        return self._k

    @k.setter
    def k(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ArgumentError(f"k must be a positive integer, got {value!r}")
        self._k = value

    @property
    def distance_metric(self) -> DistanceMetric:
        return self._distance_metric

    @distance_metric.setter
    def distance_metric(self, value: Union[DistanceMetric, str]) -> None:
        self._distance_metric = DistanceMetric.parse(value)

    # State

    @property
    def is_trained(self) -> bool:
        return self._training_table is not None

    @property
    def field_count(self) -> int:
        self._require_trained()
        return self._training_table.field_count

    @property
    def class_column_index(self) -> int:
        self._require_trained()
        return self._class_column_index

    @property
    def training_row_count(self) -> int:
        self._require_trained()
        return self._training_table.row_count

    def _require_trained(self) -> None:
        if self._training_table is None:
            raise InvalidStateError("Model must be trained before it is used")

    # Training

    def train(self, table: Table, class_column_index: int = -1) -> None:
        """
        Retain a copy of `table` as the training set.

        Args:
            table: Training rows (features plus class column)
            class_column_index: Class column (-1 = last column)

        Raises:
            ArgumentError: If the table has fewer than two fields
            IndexError: If class_column_index is out of range
        """
        if table.field_count < 2:
            raise ArgumentError("Table must have at least two fields")

        class_column_index = _resolve_class_index(class_column_index, table.field_count)
        training_table = table.copy()

        self._training_table = training_table
        self._class_column_index = class_column_index
        self._features = [
            (row.without_index(class_column_index), _label_of(row[class_column_index]))
            for row in training_table
        ]

        logger.info(
            f"Trained on {training_table.row_count} rows, {training_table.field_count} fields "
            f"(class column {class_column_index}, k={self._k}, metric={self._distance_metric.value})"
        )

    # Classification

    def nearest_neighbors(self, row: Union[Row, Iterable[Optional[Cell]]]) -> List[Tuple[float, str]]:
        """
        Rank training rows by distance to `row`.

        The class column is removed from the query when the query has the
        full training width. Rows at equal distance keep their training
        order.

        Args:
            row: Query row, with or without the class column

        Returns:
            Up to k (distance, label) pairs, nearest first

        Raises:
            InvalidStateError: If the model is not trained or has no training rows
            ArgumentError: If query features don't match the training features
        """
        self._require_trained()
        if not self._features:
            raise InvalidStateError("Model was trained on an empty table")

        query = row if isinstance(row, Row) else Row.from_cells(row)
        if len(query) == self._training_table.field_count:
            query = query.without_index(self._class_column_index)

        scored = [
            (compute_distance(self._distance_metric, features, query), label)
            for features, label in self._features
        ]
        scored.sort(key=lambda pair: pair[0])
        return scored[:self._k]

    def classify(self, row: Union[Row, Iterable[Optional[Cell]]]) -> str:
        """
        Predict the class label of `row`.

        The most frequent label among the k nearest training rows wins. On a
        tie in counts the label seen first (the nearer one) wins.

        Returns:
            Predicted label text

        Raises:
            InvalidStateError: If the model is not trained
            ArgumentError: If query features don't match the training features
        """
        neighbors = self.nearest_neighbors(row)
        tally = Counter(label for _, label in neighbors)

        best_label, best_count = "", 0
        for label, count in tally.items():
            if count > best_count:
                best_label, best_count = label, count

        logger.debug(f"Classified as {best_label!r} ({best_count}/{len(neighbors)} votes)")
        return best_label

    def classify_features(self, *feature_values: Any) -> str:
        """
        Classify a query given as plain numeric feature values (no class column).

        Raises:
            ArgumentError: If a value is not numeric
        """
        row = Row(len(feature_values))
        for i, value in enumerate(feature_values):
            if isinstance(value, bool) or not isinstance(value, numbers.Number):
                raise ArgumentError(f"Feature value {i} is not numeric: {value!r}")
            row[i] = Cell.of_number(value)
        return self.classify(row)

    # Evaluation

    def _predict_table(self, table: Table, class_column_index: int) -> Tuple[List[str], List[str]]:
        self._require_trained()
        if table.field_count != self._training_table.field_count:
            raise ArgumentError(
                f"Field count mismatch between training data ({self._training_table.field_count}) "
                f"and testing data ({table.field_count})"
            )
        if table.row_count == 0:
            raise ArgumentError("Testing table is empty; accuracy is undefined")

        class_column_index = _resolve_class_index(class_column_index, table.field_count)
        actual = []
        predicted = []
        for row in table:
            actual.append(_label_of(row[class_column_index]))
            predicted.append(self.classify(row))
        return actual, predicted

    def test(self, table: Table, class_column_index: int = -1) -> float:
        """
        Score the model on a labelled table.

        Args:
            table: Testing rows, same field count as the training table
            class_column_index: Class column of the testing table (-1 = last column)

        Returns:
            Fraction of rows whose predicted label equals their class text

        Raises:
            InvalidStateError: If the model is not trained
            ArgumentError: If field counts differ or the table is empty
        """
        actual, predicted = self._predict_table(table, class_column_index)
        accuracy = float(accuracy_score(actual, predicted))
        logger.info(f"Test accuracy: {accuracy * 100:.2f}% over {len(actual)} rows")
        return accuracy

    def evaluate(self, table: Table, class_column_index: int = -1) -> Dict:
        """
        Score the model on a labelled table and collect a small report.

        Returns:
            Dictionary containing:
                - accuracy: Fraction of correct predictions
                - confusion_matrix: Rows = actual, columns = predicted, ordered as `labels`
                - labels: Class labels in first-seen order (actual labels first)
                - inference_time_ms_per_sample: Mean classification time
                - n_samples: Number of rows evaluated
        """
        start_time = time.time()
        actual, predicted = self._predict_table(table, class_column_index)
        elapsed = time.time() - start_time

        labels = list(dict.fromkeys(actual + predicted))
        accuracy = float(accuracy_score(actual, predicted))
        conf_matrix = confusion_matrix(actual, predicted, labels=labels)

        logger.info(f"Evaluation accuracy: {accuracy * 100:.2f}% over {len(actual)} rows")

        return {
            "accuracy": accuracy,
            "confusion_matrix": conf_matrix,
            "labels": labels,
            "inference_time_ms_per_sample": (elapsed / len(actual)) * 1000,
            "n_samples": len(actual)
        }

    # Convenience paths

    def train_and_test(
        self,
        table: Table,
        class_column_index: int = -1,
        test_fraction: float = 0.4,
        seed: int = 0
    ) -> float:
        """
        Randomly split `table`, train on one part and test on the other.

        floor(row_count * test_fraction) rows are held out for testing; see
        `tabknn.dataset_loader.split_table` for the draw.

        Args:
            table: Full labelled table
            class_column_index: Class column (-1 = last column)
            test_fraction: Proportion of rows held out, in [0, 1]
            seed: Random seed for the split

        Returns:
            Accuracy on the held-out rows

        Raises:
            ArgumentError: If the table has fewer than three fields, test_fraction
                is outside [0, 1], or either split ends up with no rows
        """
        if table.field_count < 3:
            raise ArgumentError("Table must have at least three fields")

        class_column_index = _resolve_class_index(class_column_index, table.field_count)
        train_table, test_table, _, _ = split_table(table, test_fraction, seed)
        if train_table.row_count == 0:
            raise ArgumentError(
                f"test_fraction {test_fraction} leaves no rows for training"
            )
        self.train(train_table, class_column_index)
        return self.test(test_table, class_column_index)

    def train_and_test_tables(
        self,
        training_table: Table,
        testing_table: Table,
        training_class_index: int = -1,
        testing_class_index: Optional[int] = None
    ) -> float:
        """
        Train on one table and test on another.

        Args:
            training_table: Training rows
            testing_table: Testing rows, same field count
            training_class_index: Class column of the training table (-1 = last column)
            testing_class_index: Class column of the testing table (default: same as training)

        Returns:
            Accuracy on the testing table

        Raises:
            ArgumentError: If field counts differ
        """
        if training_table.field_count != testing_table.field_count:
            raise ArgumentError("Field count mismatch between training data and testing data")

        self.train(training_table, training_class_index)
        if testing_class_index is None:
            testing_class_index = self._class_column_index
        return self.test(testing_table, testing_class_index)
