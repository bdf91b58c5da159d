"""Metrics and summaries for simulation runs.

Lightweight equity-curve metrics plus flat summaries of the engine results
for text, JSON and CSV output.
"""

from typing import Any

import numpy as np
import pandas as pd

from risklab.engine.outcomes import count_wins
from risklab.engine.position_sizing import SizingPolicy, TraderPath
from risklab.engine.trailing_stop import StopMethod, StopPolicyResult, best_method


def total_return(equity_series: pd.Series) -> float:
    """Calculate total return percentage.

    Args:
        equity_series: Series of equity values over time.

    Returns:
        Total return as percentage (e.g., 5.0 for 5% gain).
    """
    if len(equity_series) < 2:
        return 0.0

    initial = equity_series.iloc[0]
    final = equity_series.iloc[-1]

    if initial <= 0:
        return 0.0

    return float(((final / initial) - 1.0) * 100.0)


def drawdown_series(equity_series: pd.Series) -> pd.Series:
    """Percent drawdown from the running peak at every point.

    Points where the running peak is not positive have zero drawdown.
    """
    running_max = equity_series.cummax()
    safe_max = running_max.where(running_max > 0, np.nan)
    drawdown = (running_max - equity_series) / safe_max * 100.0
    return drawdown.fillna(0.0)


def max_drawdown(equity_series: pd.Series) -> float:
    """Calculate maximum drawdown percentage.

    Args:
        equity_series: Series of equity values over time.

    Returns:
        Maximum drawdown as positive percentage (e.g., 10.0 for 10% drawdown).
    """
    if len(equity_series) < 2:
        return 0.0

    return float(drawdown_series(equity_series).max())


def summarize_stop_results(results: dict[StopMethod, StopPolicyResult]) -> dict[str, Any]:
    """Flatten a trailing stop race into a JSON-ready dict."""
    methods = {}
    for method, result in results.items():
        methods[method.value] = {
            "exited": result.exited,
            "exit_index": result.exit_index,
            "exit_price": round(result.exit_price, 4),
            "profit": round(result.profit, 4),
            "capture_ratio": round(result.capture_ratio, 4),
            "grade": result.grade.value,
            "letter_grade": result.letter_grade.value,
        }

    leader = best_method(results)
    return {
        "methods": methods,
        "leader": leader.value if leader is not None else None,
    }


def summarize_trader_paths(paths: dict[SizingPolicy, TraderPath]) -> dict[str, Any]:
    """Flatten a sizing comparison into a JSON-ready dict."""
    traders = {}
    for policy, path in paths.items():
        balance = pd.Series(path.balance_series)
        traders[policy.value] = {
            "final_balance": round(path.final_balance, 2),
            "total_return_pct": round(total_return(balance), 2),
            "max_drawdown_pct": round(path.max_drawdown, 2),
            "ruined": path.is_ruined,
            "ruined_at": path.ruined_at,
            "peak_stress": round(max(path.stress_series), 4),
        }

    survivors = [policy for policy, path in paths.items() if not path.is_ruined]
    first = next(iter(paths.values()), None)
    return {
        "total_trades": first.total_trades if first is not None else 0,
        "wins": count_wins(first.outcomes) if first is not None else 0,
        "traders": traders,
        "survivors": [policy.value for policy in survivors],
    }


def trader_paths_to_frame(paths: dict[SizingPolicy, TraderPath]) -> pd.DataFrame:
    """Balance of every trader as columns, indexed by trade number."""
    return pd.DataFrame(
        {policy.value: path.balance_series for policy, path in paths.items()},
        index=pd.RangeIndex(
            len(next(iter(paths.values())).balance_series) if paths else 0, name="trade"
        ),
    )
