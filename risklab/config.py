"""Configuration management for risklab.

Loads configuration from environment variables with sane defaults.
Uses python-dotenv to load from .env file if present.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


def _get_env_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_env_int(key: str, default: int) -> int:
    """Get int from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_env_str(key: str, default: str) -> str:
    """Get string from environment variable."""
    return os.getenv(key, default)


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str
    format: str

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Create LoggingConfig from environment variables."""
        return cls(
            level=_get_env_str("LOG_LEVEL", "INFO"),
            format=_get_env_str("LOG_FORMAT", "json"),
        )


@dataclass(frozen=True)
class ScenarioConfig:
    """Synthetic price scenario configuration."""

    length: int
    start_price: float

    @classmethod
    def from_env(cls) -> "ScenarioConfig":
        """Create ScenarioConfig from environment variables."""
        return cls(
            length=_get_env_int("SCENARIO_LENGTH", 100),
            start_price=_get_env_float("SCENARIO_START_PRICE", 100.0),
        )


@dataclass(frozen=True)
class TrailingStopConfig:
    """Trailing stop race configuration."""

    fixed_distance: float
    atr_multiplier: float
    technical_buffer: float
    structural_offset: float  # Fallback distance when no swing low is known

    @classmethod
    def from_env(cls) -> "TrailingStopConfig":
        """Create TrailingStopConfig from environment variables."""
        return cls(
            fixed_distance=_get_env_float("STOP_FIXED_DISTANCE", 5.0),
            atr_multiplier=_get_env_float("STOP_ATR_MULTIPLIER", 2.0),
            technical_buffer=_get_env_float("STOP_TECHNICAL_BUFFER", 2.0),
            structural_offset=_get_env_float("STOP_STRUCTURAL_OFFSET", 5.0),
        )


@dataclass(frozen=True)
class SizingConfig:
    """Position sizing simulation configuration."""

    initial_balance: float
    win_rate: float
    reward_ratio: float
    total_trades: int
    ruin_threshold: float

    @classmethod
    def from_env(cls) -> "SizingConfig":
        """Create SizingConfig from environment variables."""
        return cls(
            initial_balance=_get_env_float("SIZING_INITIAL_BALANCE", 10000.0),
            win_rate=_get_env_float("SIZING_WIN_RATE", 0.55),
            reward_ratio=_get_env_float("SIZING_REWARD_RATIO", 2.0),
            total_trades=_get_env_int("SIZING_TOTAL_TRADES", 100),
            ruin_threshold=_get_env_float("SIZING_RUIN_THRESHOLD", 100.0),
        )


@dataclass(frozen=True)
class Config:
    """Main configuration container."""

    logging: LoggingConfig
    scenario: ScenarioConfig
    stops: TrailingStopConfig
    sizing: SizingConfig
    random_seed: int

    @classmethod
    def from_env(cls) -> "Config":
        """Create Config from environment variables."""
        return cls(
            logging=LoggingConfig.from_env(),
            scenario=ScenarioConfig.from_env(),
            stops=TrailingStopConfig.from_env(),
            sizing=SizingConfig.from_env(),
            random_seed=_get_env_int("RANDOM_SEED", 42),
        )


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
