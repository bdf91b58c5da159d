"""Trailing stop race over a price path.

Three long-only stop placement methods trail the same path:
- fixed: a constant distance below price
- volatility: a multiple of the step's volatility (the ATR input) below price
- structural: a buffer below the structural swing-low support

Each stop only ratchets upward. The first bar (after the first) whose price
is at or below the stop closes the trade at the stop level, and the stop is
frozen there for the rest of the history.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from enum import Enum

import pandas as pd

from risklab.config import get_config
from risklab.engine.grading import Grade, capture_ratio, letter_grade
from risklab.logging_setup import get_logger
from risklab.scenarios.generator import PricePoint
from risklab.validation import clamp_param

logger = get_logger("engine.trailing_stop")


class StopMethod(str, Enum):
    """Stop placement methods."""

    FIXED = "fixed"
    VOLATILITY = "volatility"
    STRUCTURAL = "structural"


METHOD_ORDER: tuple[StopMethod, ...] = (
    StopMethod.FIXED,
    StopMethod.VOLATILITY,
    StopMethod.STRUCTURAL,
)


@dataclass(frozen=True)
class TrailingStopParams:
    """Stop placement parameters, in price units."""

    fixed_distance: float = 5.0
    atr_multiplier: float = 2.0
    technical_buffer: float = 2.0
    default_structural_offset: float = 5.0

    @classmethod
    def from_config(cls) -> "TrailingStopParams":
        """Create TrailingStopParams from config."""
        config = get_config()
        return cls(
            fixed_distance=config.stops.fixed_distance,
            atr_multiplier=config.stops.atr_multiplier,
            technical_buffer=config.stops.technical_buffer,
            default_structural_offset=config.stops.structural_offset,
        )

    def validated(self) -> "TrailingStopParams":
        """Return a copy with negative distances clamped to zero."""
        return replace(
            self,
            fixed_distance=clamp_param("fixed_distance", self.fixed_distance, lower=0.0),
            atr_multiplier=clamp_param("atr_multiplier", self.atr_multiplier, lower=0.0),
            technical_buffer=clamp_param("technical_buffer", self.technical_buffer, lower=0.0),
            default_structural_offset=clamp_param(
                "default_structural_offset", self.default_structural_offset, lower=0.0
            ),
        )


@dataclass(frozen=True)
class StopHistoryEntry:
    """Stop level at one step."""

    index: int
    stop_level: float


@dataclass(frozen=True)
class StopPolicyResult:
    """Full outcome of one stop method over one path."""

    method: StopMethod
    exited: bool
    exit_index: int
    exit_price: float
    profit: float
    grade: Grade
    history: tuple[StopHistoryEntry, ...]
    capture_ratio: float = 0.0
    letter_grade: Grade = Grade.F

    def stop_levels(self) -> list[float]:
        """Stop level per step, in path order."""
        return [entry.stop_level for entry in self.history]


PotentialStop = Callable[[PricePoint, TrailingStopParams], float]


def _fixed_stop(point: PricePoint, params: TrailingStopParams) -> float:
    return point.price - params.fixed_distance


def _volatility_stop(point: PricePoint, params: TrailingStopParams) -> float:
    return point.price - point.volatility * params.atr_multiplier


def _structural_stop(point: PricePoint, params: TrailingStopParams) -> float:
    support = point.structural_support
    if support is None:
        support = point.price - params.default_structural_offset
    return support - params.technical_buffer


POTENTIAL_STOPS: dict[StopMethod, PotentialStop] = {
    StopMethod.FIXED: _fixed_stop,
    StopMethod.VOLATILITY: _volatility_stop,
    StopMethod.STRUCTURAL: _structural_stop,
}


def potential_stop(method: StopMethod | str, point: PricePoint, params: TrailingStopParams) -> float:
    """Stop level a method would place at ``point`` if it could move freely."""
    return POTENTIAL_STOPS[StopMethod(method)](point, params)


def trail_stop(
    path: Sequence[PricePoint],
    method: StopMethod | str,
    params: TrailingStopParams,
    completed: bool = True,
) -> StopPolicyResult:
    """Run one stop method over a path.

    Args:
        path: Price points in order. Not modified.
        method: Stop placement method.
        params: Validated stop parameters.
        completed: Whether the path is the finished simulation. A method that
            is still in the trade at the end of a finished run is graded
            In Progress; otherwise it gets a provisional letter grade.

    Returns:
        StopPolicyResult with one history entry per price point.
    """
    method = StopMethod(method)

    if not path:
        logger.warning(f"Empty price path, {method.value} stop not evaluated")
        return StopPolicyResult(
            method=method,
            exited=False,
            exit_index=-1,
            exit_price=0.0,
            profit=0.0,
            grade=Grade.F,
            history=(),
        )

    place = POTENTIAL_STOPS[method]
    history: list[StopHistoryEntry] = []
    exited = False
    exit_index = -1
    exit_price = 0.0
    current_stop = place(path[0], params)

    for i, point in enumerate(path):
        if exited:
            history.append(StopHistoryEntry(index=point.index, stop_level=exit_price))
            continue

        if i > 0:
            candidate = place(point, params)
            # Long-only ratchet
            if candidate > current_stop:
                current_stop = candidate

            if point.price <= current_stop:
                exited = True
                exit_index = i
                exit_price = current_stop
                logger.debug(
                    f"{method.value} stop hit at step {i}: "
                    f"price={point.price:.2f} stop={current_stop:.2f}"
                )

        history.append(StopHistoryEntry(index=point.index, stop_level=current_stop))

    entry_price = path[0].price
    final_price = exit_price if exited else path[-1].price
    profit = final_price - entry_price
    max_price = max(point.price for point in path)

    ratio = capture_ratio(profit, entry_price, max_price)
    letter = letter_grade(profit, ratio)
    grade = Grade.IN_PROGRESS if (completed and not exited) else letter

    return StopPolicyResult(
        method=method,
        exited=exited,
        exit_index=exit_index,
        exit_price=exit_price,
        profit=profit,
        grade=grade,
        history=tuple(history),
        capture_ratio=ratio,
        letter_grade=letter,
    )


def run_trailing_stop_comparison(
    path: Sequence[PricePoint],
    params: TrailingStopParams | None = None,
    completed: bool = True,
) -> dict[StopMethod, StopPolicyResult]:
    """Race every stop method over the same path.

    Args:
        path: Price points shared read-only by all methods.
        params: Stop parameters. Defaults to config.
        completed: See ``trail_stop``.

    Returns:
        Dict mapping each method (in METHOD_ORDER) to its result.
    """
    params = (params or TrailingStopParams.from_config()).validated()
    return {method: trail_stop(path, method, params, completed) for method in METHOD_ORDER}


def best_method(results: dict[StopMethod, StopPolicyResult]) -> StopMethod | None:
    """Method with the highest profit; ties go to the earlier method."""
    best: StopMethod | None = None
    for method in METHOD_ORDER:
        if method not in results:
            continue
        if best is None or results[method].profit > results[best].profit:
            best = method
    return best


def history_to_frame(results: dict[StopMethod, StopPolicyResult]) -> pd.DataFrame:
    """Stop levels of every method as columns, indexed by step."""
    columns = {}
    index: list[int] = []
    for method, result in results.items():
        columns[method.value] = result.stop_levels()
        if not index:
            index = [entry.index for entry in result.history]
    return pd.DataFrame(columns, index=pd.Index(index, name="index"))
