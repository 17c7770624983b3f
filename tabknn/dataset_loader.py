"""
Tabular Dataset Loader

This module handles loading comma-separated text files into Tables and
splitting a Table into training and testing subsets. Each field is typed
independently: fields that parse under the numeric convention become
Number cells, everything else is kept as Text.

Quoted fields are not supported; a comma always separates fields.
"""

import logging
import os
from collections import Counter
from typing import Dict, List, Optional, Tuple

import numpy as np

from tabknn.cell import Cell
from tabknn.errors import ArgumentError
from tabknn.number_format import INVARIANT, NumberFormat
from tabknn.row import Row
from tabknn.table import Table


logger = logging.getLogger(__name__)


def read_csv_lines(file_path: str) -> List[List[str]]:
    """
    Read a UTF-8 text file into rows of raw string fields.

    Each line is split on "," and every field is stripped of surrounding
    whitespace. Empty lines are skipped; a line holding only whitespace is
    kept as a row with a single empty field.

    Args:
        file_path: Path to the CSV file

    Returns:
        List of field lists, one per non-empty line, in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"CSV file not found at {file_path}")

    lines = []
    with open(file_path, "r", encoding="utf-8-sig") as f:
        for line in f:
            line = line.rstrip("\r\n")
            if not line:
                continue
            lines.append([field.strip() for field in line.split(",")])
    return lines


def parse_field(text: str, number_format: NumberFormat = INVARIANT, number_type: type = float) -> Cell:
    """
    Type a single raw field: Number on parse success, Text (the raw field) otherwise.
    """
    value = number_format.parse(text, number_type)
    if value is None:
        return Cell.of_text(text)
    return Cell.of_number(value)


def load_table_from_csv(
    file_path: str,
    number_format: Optional[NumberFormat] = None,
    number_type: type = float,
    header: bool = False
) -> Table:
    """
    Load a CSV file into a Table.

    The field count is the widest line in the file; shorter lines leave
    their trailing cells unset. Parse failures never abort loading, the
    field is stored as Text instead.

    Args:
        file_path: Path to the CSV file
        number_format: Numeric convention (default: invariant, "." decimals)
        number_type: Numeric type for Number cells (default: float)
        header: Treat the first line as column labels

    Returns:
        Loaded Table

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    number_format = number_format or INVARIANT
    lines = read_csv_lines(file_path)

    labels = None
    if header and lines:
        labels = lines.pop(0)

    field_count = max([len(fields) for fields in lines] + [len(labels or [])] + [0])
    table = Table(field_count, number_type)
    if labels:
        table.set_labels(*labels)

    text_cells = 0
    for fields in lines:
        row = Row(field_count)
        for i, field in enumerate(fields):
            cell = parse_field(field, number_format, number_type)
            if cell.is_text:
                text_cells += 1
            row[i] = cell
        table.append_row(row)

    logger.info(f"Loaded {table.row_count} rows x {field_count} fields from {file_path}")
    logger.debug(f"{text_cells} fields kept as text")
    return table


def get_table_info(table: Table, class_column_index: int = -1) -> Dict:
    """
    Summarize a Table.

    Args:
        table: Table to inspect
        class_column_index: Class column (-1 = last column)

    Returns:
        Dictionary containing:
            - row_count: Number of rows
            - field_count: Number of columns
            - labels: Column labels (None where unset)
            - class_counts: Rows per class label, in first-seen order
    """
    if table.field_count == 0:
        return {
            "row_count": table.row_count,
            "field_count": 0,
            "labels": [],
            "class_counts": {}
        }

    if class_column_index == -1:
        class_column_index = table.field_count - 1

    class_counts = Counter(
        cell.as_text() if cell is not None else "n/a"
        for cell in table.get_column(class_column_index)
    )

    return {
        "row_count": table.row_count,
        "field_count": table.field_count,
        "labels": table.labels,
        "class_counts": dict(class_counts)
    }


def split_table(
    table: Table,
    test_fraction: float = 0.4,
    seed: int = 0
) -> Tuple[Table, Table, List[int], List[int]]:
    """
    Randomly split a Table into training and testing Tables.

    floor(row_count * test_fraction) rows are drawn one at a time, each
    uniformly from the rows not drawn yet, so every row lands in exactly one
    of the two subsets. Test rows keep draw order; training rows keep their
    original order.

    Args:
        table: Table to split
        test_fraction: Proportion of rows used for testing, in [0, 1]
        seed: Random seed for reproducibility

    Returns:
        Tuple of (train_table, test_table, train_indices, test_indices)

    Raises:
        ArgumentError: If test_fraction is not between 0 and 1
    """
    if not 0.0 <= test_fraction <= 1.0:
        raise ArgumentError(f"test_fraction must be between 0 and 1, got {test_fraction}")

    n_rows = table.row_count
    test_count = int(np.floor(n_rows * test_fraction))
    rng = np.random.RandomState(seed)

    train_indices = list(range(n_rows))
    test_indices = []
    for _ in range(test_count):
        position = int(rng.randint(0, len(train_indices)))
        test_indices.append(train_indices.pop(position))

    train_table = Table(table.field_count, table.number_type)
    test_table = Table(table.field_count, table.number_type)
    train_table.set_labels(*table.labels)
    test_table.set_labels(*table.labels)
    for i in train_indices:
        train_table.append_row(table.get_row(i))
    for i in test_indices:
        test_table.append_row(table.get_row(i))

    logger.info(f"Split {n_rows} rows: {len(train_indices)} train, {len(test_indices)} test (seed={seed})")
    return train_table, test_table, train_indices, test_indices
