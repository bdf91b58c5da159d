"""risklab - simulation core for risk-management lessons.

Deterministic price scenarios, trailing-stop races and position-sizing
ruin simulations that feed the interactive charts.
"""

__version__ = "0.3.1"
