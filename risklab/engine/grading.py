"""Letter grades for trailing stop outcomes.

A trade is graded on its capture ratio: realized profit divided by the
best profit the path offered (highest price minus entry).
"""

from enum import Enum


class Grade(str, Enum):
    """Trailing stop outcome grades."""

    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C = "C"
    C_MINUS = "C-"
    D = "D"
    F = "F"
    IN_PROGRESS = "In Progress"


# (minimum capture ratio, grade), checked top-down with a strict ">" test.
GRADE_THRESHOLDS: tuple[tuple[float, Grade], ...] = (
    (0.8, Grade.A_PLUS),
    (0.7, Grade.A),
    (0.6, Grade.B_PLUS),
    (0.5, Grade.B),
    (0.3, Grade.C),
)

# Grade for a profitable trade below every threshold.
FLOOR_GRADE = Grade.C_MINUS

# Grade for a losing trade, regardless of ratio.
LOSS_GRADE = Grade.D


def capture_ratio(profit: float, entry_price: float, max_price: float) -> float:
    """Fraction of the available move that was captured.

    Returns 0.0 on a path that never rose above entry.
    """
    max_potential = max_price - entry_price
    if max_potential <= 0:
        return 0.0
    return profit / max_potential


def letter_grade(profit: float, ratio: float) -> Grade:
    """Map profit and capture ratio to a letter grade."""
    if profit < 0:
        return LOSS_GRADE
    for threshold, grade in GRADE_THRESHOLDS:
        if ratio > threshold:
            return grade
    return FLOOR_GRADE
