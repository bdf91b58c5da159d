"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator

import pytest

from risklab.config import reset_config
from risklab.engine.outcomes import Outcome, OutcomeSequence
from risklab.logging_setup import reset_logging
from risklab.scenarios.generator import PricePoint


@pytest.fixture(autouse=True)
def reset_globals() -> Generator[None, None, None]:
    """Reset global state before each test."""
    reset_config()
    reset_logging()
    yield
    reset_config()
    reset_logging()


@pytest.fixture
def seed() -> int:
    """Provide deterministic seed."""
    return 42


@pytest.fixture
def rising_path() -> tuple[PricePoint, ...]:
    """Monotonically rising path 100, 101, ..., 199."""
    return tuple(
        PricePoint(index=i, price=100.0 + i, volatility=1.0, structural_support=None)
        for i in range(100)
    )


@pytest.fixture
def losing_streak() -> OutcomeSequence:
    """Ten consecutive losses."""
    return (Outcome.LOSS,) * 10


@pytest.fixture
def make_path() -> Callable[..., tuple[PricePoint, ...]]:
    """Factory building a path from raw prices with no structural support."""

    def _make(prices: list[float], volatility: float = 1.0) -> tuple[PricePoint, ...]:
        return tuple(
            PricePoint(index=i, price=p, volatility=volatility, structural_support=None)
            for i, p in enumerate(prices)
        )

    return _make
