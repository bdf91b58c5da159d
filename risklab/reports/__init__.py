"""Run metrics and summaries."""

from risklab.reports.metrics import (
    drawdown_series,
    max_drawdown,
    summarize_stop_results,
    summarize_trader_paths,
    total_return,
    trader_paths_to_frame,
)

__all__ = [
    "drawdown_series",
    "max_drawdown",
    "summarize_stop_results",
    "summarize_trader_paths",
    "total_return",
    "trader_paths_to_frame",
]
