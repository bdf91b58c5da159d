"""Tests for shared outcome sequences."""

import pytest

from risklab.engine.outcomes import (
    Outcome,
    count_wins,
    generate_outcome_sequence,
    parse_outcomes,
)


class TestGenerateOutcomeSequence:
    """Tests for outcome generation."""

    def test_length(self, seed: int) -> None:
        """Sequence has the requested length."""
        assert len(generate_outcome_sequence(0.55, 100, seed=seed)) == 100

    def test_same_seed_same_sequence(self, seed: int) -> None:
        """Seeded generation is reproducible."""
        first = generate_outcome_sequence(0.55, 50, seed=seed)
        second = generate_outcome_sequence(0.55, 50, seed=seed)

        assert first == second

    def test_different_seeds_differ(self) -> None:
        """Different seeds give different sequences."""
        assert generate_outcome_sequence(0.5, 100, seed=1) != generate_outcome_sequence(
            0.5, 100, seed=2
        )

    def test_is_immutable(self, seed: int) -> None:
        """Sequence is a tuple of Outcome members."""
        sequence = generate_outcome_sequence(0.55, 10, seed=seed)

        assert isinstance(sequence, tuple)
        assert all(isinstance(o, Outcome) for o in sequence)

    def test_extreme_rates(self, seed: int) -> None:
        """Win rate 0 never wins, win rate 1 always wins."""
        assert count_wins(generate_outcome_sequence(0.0, 200, seed=seed)) == 0
        assert count_wins(generate_outcome_sequence(1.0, 200, seed=seed)) == 200

    def test_win_rate_clamped(self, seed: int, caplog: pytest.LogCaptureFixture) -> None:
        """Out-of-range win rates are clamped and logged."""
        sequence = generate_outcome_sequence(1.5, 50, seed=seed)

        assert count_wins(sequence) == 50
        assert "win_rate" in caplog.text

    def test_nan_win_rate_falls_back(self, seed: int) -> None:
        """A NaN win rate uses a coin flip instead of failing."""
        sequence = generate_outcome_sequence(float("nan"), 20, seed=seed)

        assert len(sequence) == 20

    def test_total_trades_clamped(self, seed: int) -> None:
        """Non-positive trade counts become one trade."""
        assert len(generate_outcome_sequence(0.5, 0, seed=seed)) == 1

    def test_wins_near_expected(self) -> None:
        """55% win rate over 100 trades lands in [40, 70] wins almost always."""
        inside = sum(
            40 <= count_wins(generate_outcome_sequence(0.55, 100, seed=s)) <= 70
            for s in range(1000)
        )

        assert inside >= 990


class TestParseOutcomes:
    """Tests for parsing outcome strings."""

    def test_aliases_and_case(self) -> None:
        """Accepts full names and W/L in any case."""
        assert parse_outcomes(["WIN", "loss", "w", " L "]) == (
            Outcome.WIN,
            Outcome.LOSS,
            Outcome.WIN,
            Outcome.LOSS,
        )

    def test_unknown_raises(self) -> None:
        """Unknown outcome strings raise ValueError."""
        with pytest.raises(ValueError):
            parse_outcomes(["DRAW"])
