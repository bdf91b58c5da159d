"""Tests for stop outcome grading."""

import pytest

from risklab.engine.grading import Grade, capture_ratio, letter_grade


class TestCaptureRatio:
    """Tests for capture ratio."""

    def test_full_capture(self) -> None:
        """Exiting at the high captures the whole move."""
        assert capture_ratio(20.0, 100.0, 120.0) == pytest.approx(1.0)

    def test_partial_capture(self) -> None:
        """Half the move gives 0.5."""
        assert capture_ratio(10.0, 100.0, 120.0) == pytest.approx(0.5)

    def test_loss_is_negative(self) -> None:
        """A loss gives a negative ratio."""
        assert capture_ratio(-5.0, 100.0, 120.0) == pytest.approx(-0.25)

    def test_no_upside_is_zero(self) -> None:
        """A path that never rose gives zero, not a division error."""
        assert capture_ratio(0.0, 100.0, 100.0) == 0.0
        assert capture_ratio(-3.0, 100.0, 99.0) == 0.0


class TestLetterGrade:
    """Tests for grade mapping."""

    @pytest.mark.parametrize(
        ("ratio", "expected"),
        [
            (0.95, Grade.A_PLUS),
            (0.75, Grade.A),
            (0.65, Grade.B_PLUS),
            (0.55, Grade.B),
            (0.4, Grade.C),
            (0.1, Grade.C_MINUS),
            (0.0, Grade.C_MINUS),
        ],
    )
    def test_profitable_bands(self, ratio: float, expected: Grade) -> None:
        """Each ratio band maps to its grade."""
        assert letter_grade(1.0, ratio) == expected

    def test_thresholds_are_strict(self) -> None:
        """A ratio exactly on a threshold falls to the grade below."""
        assert letter_grade(1.0, 0.8) == Grade.A
        assert letter_grade(1.0, 0.5) == Grade.C
        assert letter_grade(1.0, 0.3) == Grade.C_MINUS

    def test_loss_is_d(self) -> None:
        """Any loss grades D."""
        assert letter_grade(-0.01, 0.9) == Grade.D
        assert letter_grade(-50.0, -2.0) == Grade.D

    def test_breakeven_is_not_loss(self) -> None:
        """Zero profit is graded on the ratio."""
        assert letter_grade(0.0, 0.0) == Grade.C_MINUS

    def test_grade_values(self) -> None:
        """Grades render as their display labels."""
        assert Grade.A_PLUS.value == "A+"
        assert Grade.IN_PROGRESS.value == "In Progress"
