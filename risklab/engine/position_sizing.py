"""Position sizing ruin simulation.

Three traders take the same sequence of trades with different sizing:
- conservative: fixed 1% of equity per trade
- aggressive: fixed 5% of equity per trade
- emotional: revenge sizing that escalates after consecutive losses

Each trader's equity curve, drawdown, survival and stress are recorded
per trade. Falling to the ruin threshold zeroes the account and ends
trading for the rest of the run.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum

import pandas as pd

from risklab.config import get_config
from risklab.engine.outcomes import Outcome, OutcomeSequence
from risklab.logging_setup import get_logger
from risklab.validation import clamp_param

logger = get_logger("engine.position_sizing")


class SizingPolicy(str, Enum):
    """Sizing policies under comparison."""

    CONSERVATIVE = "conservative"
    AGGRESSIVE = "aggressive"
    EMOTIONAL = "emotional"


POLICY_ORDER: tuple[SizingPolicy, ...] = (
    SizingPolicy.CONSERVATIVE,
    SizingPolicy.AGGRESSIVE,
    SizingPolicy.EMOTIONAL,
)

FIXED_FRACTIONS: dict[SizingPolicy, float] = {
    SizingPolicy.CONSERVATIVE: 0.01,
    SizingPolicy.AGGRESSIVE: 0.05,
}

# Drawdown percent at which each trader's stress saturates.
STRESS_DRAWDOWN_SCALE: dict[SizingPolicy, float] = {
    SizingPolicy.CONSERVATIVE: 20.0,
    SizingPolicy.AGGRESSIVE: 50.0,
    SizingPolicy.EMOTIONAL: 60.0,
}

TILT_STRESS_PER_LOSS = 0.25


class TiltState(IntEnum):
    """Consecutive-loss buckets of the revenge trader.

    The value is the number of consecutive losses, saturating at FULL_TILT.
    """

    CALM = 0
    SHAKEN = 1
    FRUSTRATED = 2
    REVENGE = 3
    FULL_TILT = 4

    def after(self, outcome: Outcome) -> "TiltState":
        """State after a trade: a win resets, a loss escalates one bucket."""
        if outcome is Outcome.WIN:
            return TiltState.CALM
        return TiltState(min(self.value + 1, TiltState.FULL_TILT.value))

    @property
    def stress(self) -> float:
        """Tilt contribution to stress, in [0, 1]."""
        return min(self.value * TILT_STRESS_PER_LOSS, 1.0)


@dataclass(frozen=True)
class RevengeSchedule:
    """Risk fraction per tilt state."""

    base_fraction: float = 0.02
    tiers: tuple[tuple[TiltState, float], ...] = (
        (TiltState.FRUSTRATED, 0.05),
        (TiltState.REVENGE, 0.10),
        (TiltState.FULL_TILT, 0.20),
    )

    def risk_fraction(self, state: TiltState) -> float:
        """Fraction of equity risked in ``state``; the highest reached tier wins."""
        fraction = self.base_fraction
        for tier_state, tier_fraction in self.tiers:
            if state >= tier_state:
                fraction = tier_fraction
        return fraction


@dataclass(frozen=True)
class SimulationConfig:
    """Account parameters shared by every trader in a comparison."""

    initial_balance: float = 10000.0
    reward_ratio: float = 2.0
    ruin_threshold: float = 100.0

    @classmethod
    def from_config(cls) -> "SimulationConfig":
        """Create SimulationConfig from config."""
        config = get_config()
        return cls(
            initial_balance=config.sizing.initial_balance,
            reward_ratio=config.sizing.reward_ratio,
            ruin_threshold=config.sizing.ruin_threshold,
        )

    def validated(self) -> "SimulationConfig":
        """Return a copy with negative amounts clamped to zero."""
        return replace(
            self,
            initial_balance=clamp_param("initial_balance", self.initial_balance, lower=0.0),
            reward_ratio=clamp_param("reward_ratio", self.reward_ratio, lower=0.0),
            ruin_threshold=clamp_param("ruin_threshold", self.ruin_threshold, lower=0.0),
        )


@dataclass(frozen=True)
class TraderPath:
    """Per-trade record of one trader.

    Every series has ``total_trades + 1`` entries; index 0 is the state
    before the first trade.
    """

    policy: SizingPolicy
    balance_series: tuple[float, ...]
    drawdown_series: tuple[float, ...]
    alive_series: tuple[bool, ...]
    stress_series: tuple[float, ...]
    risk_fraction_series: tuple[float, ...]
    outcomes: OutcomeSequence = field(repr=False)

    @property
    def total_trades(self) -> int:
        return len(self.balance_series) - 1

    @property
    def final_balance(self) -> float:
        return self.balance_series[-1]

    @property
    def is_ruined(self) -> bool:
        return not self.alive_series[-1]

    @property
    def ruined_at(self) -> int | None:
        """First index at which the trader is no longer alive."""
        for i, alive in enumerate(self.alive_series):
            if not alive:
                return i
        return None

    @property
    def max_drawdown(self) -> float:
        return max(self.drawdown_series)

    def to_frame(self) -> pd.DataFrame:
        """Series as DataFrame columns, indexed by trade number.

        ``outcome`` is None on the pre-trade row.
        """
        index = pd.RangeIndex(len(self.balance_series), name="trade")
        outcome = pd.Series(
            [None] + [o.value for o in self.outcomes], index=index, dtype=object
        )
        return pd.DataFrame(
            {
                "balance": self.balance_series,
                "drawdown_pct": self.drawdown_series,
                "alive": self.alive_series,
                "stress": self.stress_series,
                "risk_fraction": self.risk_fraction_series,
                "outcome": outcome,
            },
            index=index,
        )


def risk_fraction(
    policy: SizingPolicy,
    tilt: TiltState,
    schedule: RevengeSchedule,
) -> float:
    """Fraction of equity the trader risks on the next trade."""
    if policy is SizingPolicy.EMOTIONAL:
        return schedule.risk_fraction(tilt)
    return FIXED_FRACTIONS[policy]


def _drawdown_pct(peak: float, balance: float) -> float:
    if peak <= 0:
        return 0.0
    return (peak - balance) / peak * 100.0


def _stress(policy: SizingPolicy, drawdown_pct: float, tilt: TiltState) -> float:
    stress = drawdown_pct / STRESS_DRAWDOWN_SCALE[policy]
    if policy is SizingPolicy.EMOTIONAL:
        stress = max(tilt.stress, stress)
    return min(max(stress, 0.0), 1.0)


def simulate_trader(
    outcomes: OutcomeSequence,
    policy: SizingPolicy | str,
    config: SimulationConfig | None = None,
    schedule: RevengeSchedule | None = None,
) -> TraderPath:
    """Simulate one trader over a fixed outcome sequence.

    Args:
        outcomes: Trade outcomes, consumed in order and never modified.
        policy: Sizing policy.
        config: Account parameters. Defaults to config.
        schedule: Revenge sizing tiers for the emotional policy.

    Returns:
        TraderPath covering every trade.
    """
    policy = SizingPolicy(policy)
    config = (config or SimulationConfig.from_config()).validated()
    schedule = schedule or RevengeSchedule()

    balance = config.initial_balance
    alive = balance > config.ruin_threshold
    if not alive:
        logger.warning(
            f"Initial balance {balance} is at or below the ruin threshold "
            f"{config.ruin_threshold}, {policy.value} trader starts ruined"
        )
        balance = 0.0

    tilt = TiltState.CALM
    peak = balance
    drawdown = _drawdown_pct(peak, balance)

    balances = [balance]
    drawdowns = [drawdown]
    alives = [alive]
    stresses = [_stress(policy, drawdown, tilt)]
    fractions = [0.0]

    for i, outcome in enumerate(outcomes, start=1):
        fraction = 0.0
        if alive:
            fraction = risk_fraction(policy, tilt, schedule)
            risk_amount = balance * fraction
            pnl = risk_amount * config.reward_ratio if outcome is Outcome.WIN else -risk_amount
            balance = max(0.0, balance + pnl)
            tilt = tilt.after(outcome)

            if balance <= config.ruin_threshold:
                alive = False
                balance = 0.0
                logger.debug(f"{policy.value} trader ruined at trade {i}")

        peak = max(peak, balance)
        drawdown = _drawdown_pct(peak, balance)

        balances.append(balance)
        drawdowns.append(drawdown)
        alives.append(alive)
        stresses.append(_stress(policy, drawdown, tilt))
        fractions.append(fraction)

    return TraderPath(
        policy=policy,
        balance_series=tuple(balances),
        drawdown_series=tuple(drawdowns),
        alive_series=tuple(alives),
        stress_series=tuple(stresses),
        risk_fraction_series=tuple(fractions),
        outcomes=outcomes,
    )


def run_position_sizing_comparison(
    outcomes: Sequence[Outcome],
    config: SimulationConfig | None = None,
) -> dict[SizingPolicy, TraderPath]:
    """Simulate every sizing policy against one shared outcome sequence.

    Args:
        outcomes: Shared trade outcomes.
        config: Account parameters. Defaults to config.

    Returns:
        Dict mapping each policy (in POLICY_ORDER) to its path.
    """
    shared = outcomes if isinstance(outcomes, tuple) else tuple(outcomes)
    config = config or SimulationConfig.from_config()
    return {policy: simulate_trader(shared, policy, config) for policy in POLICY_ORDER}
