"""
Error Types

Exceptions raised by the table model and the classifier. Out-of-bounds
row/column/slot access raises the builtin IndexError.
"""


class ArgumentError(ValueError):
    """Invalid argument: bad field counts, mismatched shapes, k <= 0, non-numeric features."""


class InvalidStateError(RuntimeError):
    """Operation not valid in the current state, e.g. classifying before training."""
