"""Boundary checks for simulation parameters.

Out-of-range inputs are clamped into range and logged instead of raised: a
corrected chart is more useful in a lesson than a broken one.
"""

import math

from risklab.logging_setup import get_logger

logger = get_logger("validation")


def clamp_param(
    name: str,
    value: float,
    lower: float | None = None,
    upper: float | None = None,
    default: float | None = None,
) -> float:
    """Clamp a numeric parameter into ``[lower, upper]``.

    Args:
        name: Parameter name used in the log message.
        value: Supplied value.
        lower: Inclusive lower bound, or None for unbounded.
        upper: Inclusive upper bound, or None for unbounded.
        default: Replacement for NaN/inf values. Falls back to ``lower``
            (then ``upper``, then 0.0) when not given.

    Returns:
        A finite value inside the bounds.
    """
    if value is None or not math.isfinite(value):
        fallback = default
        if fallback is None:
            fallback = lower if lower is not None else upper if upper is not None else 0.0
        logger.warning(
            f"Parameter {name}={value!r} is not a finite number, using {fallback}",
            extra={"extra_fields": {"param": name, "value": repr(value)}},
        )
        return float(fallback)

    clamped = float(value)
    if lower is not None and clamped < lower:
        clamped = float(lower)
    if upper is not None and clamped > upper:
        clamped = float(upper)

    if clamped != value:
        logger.warning(
            f"Parameter {name}={value} out of range, clamped to {clamped}",
            extra={"extra_fields": {"param": name, "value": value, "clamped": clamped}},
        )
    return clamped


def clamp_count(name: str, value: int, minimum: int = 1) -> int:
    """Clamp an integer count to at least ``minimum``."""
    if value < minimum:
        logger.warning(
            f"Parameter {name}={value} below minimum, clamped to {minimum}",
            extra={"extra_fields": {"param": name, "value": value, "clamped": minimum}},
        )
        return minimum
    return int(value)
