# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Weighted final grade computation.

Example:
    >>> round(compute_final_grade([4, 3, 5], [30, 30, 40]), 2)
    4.1
    >>> compute_final_grade([4, 5], [0.5, 0.5])
    4.5
"""

from collections.abc import Sequence
from typing import Any

from src.domains.enrollment.errors import ShapeError

# Grades are bounded on both ends
MIN_GRADE = 0
MAX_GRADE = 5


def is_sequence(value: Any) -> bool:
    """Check if a value is a list-like sequence (strings excluded)."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def is_valid_grade(value: Any) -> bool:
    """Check if a value is a number between MIN_GRADE and MAX_GRADE."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return MIN_GRADE <= value <= MAX_GRADE


def normalize_weights(weights: Sequence[float]) -> list[float]:
    """Normalize evaluation weights to fractions.

    A weight set summing above 1 is read as percentages and every weight
    is divided by 100. Otherwise the weights are already fractions.

    Args:
        weights: Evaluation weights as fractions or percentages.

    Returns:
        Weights as fractions.
    """
    if sum(weights) > 1:
        return [w / 100 for w in weights]
    return list(weights)


def compute_final_grade(grades: Sequence[float], weights: Sequence[float]) -> float:
    """Combine grades and evaluation weights into a final grade.

    No rounding is applied.

    Args:
        grades: Grade per evaluation.
        weights: Weight per evaluation, as fractions or percentages.

    Returns:
        Weighted sum of the grades.

    Raises:
        ShapeError: If an argument is not a sequence or lengths differ.
    """
    if not is_sequence(grades) or not is_sequence(weights):
        raise ShapeError("Grades and weights must be sequences")

    if len(grades) != len(weights):
        raise ShapeError("The number of grades and weights must match")

    return sum(g * w for g, w in zip(grades, normalize_weights(weights)))
