"""Shared win/loss sequences for sizing comparisons.

Every sizing policy in a comparison consumes the same sequence, so any
difference between their equity curves comes from sizing alone.
"""

from enum import Enum

import numpy as np

from risklab.logging_setup import get_logger
from risklab.validation import clamp_count, clamp_param

logger = get_logger("engine.outcomes")


class Outcome(str, Enum):
    """Result of a single trade."""

    WIN = "WIN"
    LOSS = "LOSS"


OutcomeSequence = tuple[Outcome, ...]


def generate_outcome_sequence(
    win_rate: float,
    total_trades: int,
    seed: int | None = None,
) -> OutcomeSequence:
    """Draw independent Bernoulli trade outcomes.

    Args:
        win_rate: Probability of a WIN, clamped to [0, 1].
        total_trades: Sequence length, clamped to at least 1.
        seed: Seed for a local generator. None draws fresh entropy.

    Returns:
        Immutable sequence of ``total_trades`` outcomes.
    """
    win_rate = clamp_param("win_rate", win_rate, lower=0.0, upper=1.0, default=0.5)
    total_trades = clamp_count("total_trades", total_trades)

    rng = np.random.default_rng(seed)
    draws = rng.random(total_trades)
    sequence = tuple(Outcome.WIN if u < win_rate else Outcome.LOSS for u in draws)

    logger.debug(
        f"Generated {total_trades} outcomes at win_rate={win_rate:.2f}: "
        f"{count_wins(sequence)} wins"
    )
    return sequence


def count_wins(outcomes: OutcomeSequence) -> int:
    """Number of WIN outcomes."""
    return sum(1 for outcome in outcomes if outcome is Outcome.WIN)


def parse_outcomes(values: list[str] | tuple[str, ...]) -> OutcomeSequence:
    """Build a sequence from strings such as ``["WIN", "loss", "W", "L"]``."""
    aliases = {"W": Outcome.WIN, "L": Outcome.LOSS}
    sequence = []
    for value in values:
        key = value.strip().upper()
        sequence.append(aliases[key] if key in aliases else Outcome(key))
    return tuple(sequence)
