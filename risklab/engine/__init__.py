"""Simulation engines.

Trailing stop races, shared trade outcomes, position sizing ruin
simulation and ATR stop sizing.
"""

from risklab.engine.atr_stop import AtrStopResult, calculate_atr_stop
from risklab.engine.grading import Grade, capture_ratio, letter_grade
from risklab.engine.outcomes import (
    Outcome,
    OutcomeSequence,
    count_wins,
    generate_outcome_sequence,
)
from risklab.engine.position_sizing import (
    RevengeSchedule,
    SimulationConfig,
    SizingPolicy,
    TiltState,
    TraderPath,
    run_position_sizing_comparison,
    simulate_trader,
)
from risklab.engine.trailing_stop import (
    METHOD_ORDER,
    StopHistoryEntry,
    StopMethod,
    StopPolicyResult,
    TrailingStopParams,
    best_method,
    run_trailing_stop_comparison,
    trail_stop,
)

__all__ = [
    "AtrStopResult",
    "calculate_atr_stop",
    "Grade",
    "capture_ratio",
    "letter_grade",
    "Outcome",
    "OutcomeSequence",
    "count_wins",
    "generate_outcome_sequence",
    "RevengeSchedule",
    "SimulationConfig",
    "SizingPolicy",
    "TiltState",
    "TraderPath",
    "run_position_sizing_comparison",
    "simulate_trader",
    "METHOD_ORDER",
    "StopHistoryEntry",
    "StopMethod",
    "StopPolicyResult",
    "TrailingStopParams",
    "best_method",
    "run_trailing_stop_comparison",
    "trail_stop",
]
