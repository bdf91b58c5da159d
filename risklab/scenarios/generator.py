"""Deterministic synthetic price paths for the trailing stop lessons.

Each scenario archetype produces the same path on every call:
- strong_trend: steady climb with minor pullbacks
- choppy_rally: uptrend with deep, noisy pullbacks
- parabolic: accelerating blow-off followed by a crash
- reversal: V-shaped drop and recovery

Every point carries a price, a per-step volatility (the ATR input) and a
lagging structural support level (the swing-low input).
"""

import math
from dataclasses import dataclass
from enum import Enum

import pandas as pd

from risklab.config import get_config
from risklab.logging_setup import get_logger
from risklab.validation import clamp_count

logger = get_logger("scenarios.generator")

# Support can never sit above price; violations are pulled this far below it.
SUPPORT_EPSILON = 0.5

# Initial support sits this far below the first price.
INITIAL_SUPPORT_OFFSET = 2.0

# Fraction of the path spent climbing before the parabolic crash.
PARABOLIC_CRASH_AT = 0.6


class ScenarioType(str, Enum):
    """Market scenario archetypes."""

    STRONG_TREND = "strong_trend"
    CHOPPY_RALLY = "choppy_rally"
    PARABOLIC = "parabolic"
    REVERSAL = "reversal"


@dataclass(frozen=True)
class PricePoint:
    """One synthetic time step."""

    index: int
    price: float
    volatility: float
    structural_support: float | None


@dataclass(frozen=True)
class SupportRule:
    """How often the structural support steps up, and how far below price."""

    cadence: int  # Steps between recomputes
    offset: float
    second_half_only: bool = False


SUPPORT_RULES: dict[ScenarioType, SupportRule] = {
    ScenarioType.STRONG_TREND: SupportRule(cadence=10, offset=3.0),
    ScenarioType.CHOPPY_RALLY: SupportRule(cadence=15, offset=6.0),
    # Structure lags badly in a vertical move
    ScenarioType.PARABOLIC: SupportRule(cadence=8, offset=5.0),
    ScenarioType.REVERSAL: SupportRule(cadence=10, offset=3.0, second_half_only=True),
}

SCENARIO_DETAILS: dict[ScenarioType, dict[str, str]] = {
    ScenarioType.STRONG_TREND: {
        "label": "Strong Uptrend",
        "description": "Steady climb with minor pullbacks. Ideal for all methods.",
        "insight": (
            "All three trails stay alive. Watch how the structural stop "
            "rides the trend longest."
        ),
    },
    ScenarioType.CHOPPY_RALLY: {
        "label": "Choppy Rally",
        "description": "High volatility uptrend. Tight stops often fail here.",
        "insight": (
            "ATR dynamically widens in the chop zone while the fixed stop "
            "often gets shaken out."
        ),
    },
    ScenarioType.PARABOLIC: {
        "label": "Parabolic Move",
        "description": "Explosive move followed by a crash. Needs fast reaction.",
        "insight": (
            "The fixed trail is quickest to lock the vertical gains once the "
            "blow-off cracks."
        ),
    },
    ScenarioType.REVERSAL: {
        "label": "V-Shaped Reversal",
        "description": "Sharp drop followed by recovery. Testing short vs long logic.",
        "insight": (
            "Technical swing-low logic re-enters the move fastest after the "
            "V-bottom turnaround."
        ),
    },
}


def seeded_noise(seed: int) -> float:
    """Deterministic pseudo-random value in [0, 1).

    ``frac(sin(seed) * 10000)``: a cheap hash, not a statistically sound
    generator. Kept exact so recorded paths stay reproducible.
    """
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def _step(scenario: ScenarioType, i: int, length: int) -> tuple[float, float]:
    """Return (price change, volatility) for step ``i``."""
    noise = seeded_noise(i)

    if scenario == ScenarioType.STRONG_TREND:
        return 0.8 + (noise - 0.5) * 1.5, 1.2

    if scenario == ScenarioType.CHOPPY_RALLY:
        return 0.6 + (noise - 0.5) * 4.0, 2.5

    if scenario == ScenarioType.PARABOLIC:
        if i < int(length * PARABOLIC_CRASH_AT):
            return 0.5 + i * 0.05 + (noise - 0.5), 1.0
        return -4.0 - noise * 2, 4.0

    # Reversal: down first half, up second half
    if i < length // 2:
        return -1.0 + (noise - 0.5), 1.5
    return 1.2 + (noise - 0.5), 1.5


def generate_scenario(
    scenario: ScenarioType | str,
    length: int | None = None,
    start_price: float | None = None,
) -> tuple[PricePoint, ...]:
    """Generate the price path for a scenario.

    Args:
        scenario: Scenario tag (enum member or its string value).
        length: Number of points. Defaults to config.
        start_price: Price before the first step. Defaults to config.

    Returns:
        Tuple of ``length`` price points, index 0..length-1.

    Raises:
        ValueError: If the scenario tag is unknown.
    """
    config = get_config()
    scenario = ScenarioType(scenario)
    n = clamp_count("length", length if length is not None else config.scenario.length)
    price = start_price if start_price is not None else config.scenario.start_price

    rule = SUPPORT_RULES[scenario]
    support = price
    counter = 0
    points: list[PricePoint] = []

    for i in range(n):
        change, volatility = _step(scenario, i, n)
        price += change

        if i == 0:
            support = price - INITIAL_SUPPORT_OFFSET

        counter += 1
        in_window = not rule.second_half_only or i > n // 2
        if in_window and counter > rule.cadence:
            support = price - rule.offset
            counter = 0

        if support > price:
            support = price - SUPPORT_EPSILON

        points.append(
            PricePoint(
                index=i,
                price=round(price, 2),
                volatility=round(volatility, 2),
                structural_support=round(support, 2),
            )
        )

    logger.debug(
        f"Generated {scenario.value} path: {n} points, "
        f"first={points[0].price:.2f} last={points[-1].price:.2f}"
    )
    return tuple(points)


def scenario_to_frame(path: tuple[PricePoint, ...] | list[PricePoint]) -> pd.DataFrame:
    """Convert a price path into a DataFrame indexed by step."""
    frame = pd.DataFrame(
        {
            "price": [p.price for p in path],
            "volatility": [p.volatility for p in path],
            "structural_support": [p.structural_support for p in path],
        },
        index=pd.Index([p.index for p in path], name="index"),
    )
    return frame
