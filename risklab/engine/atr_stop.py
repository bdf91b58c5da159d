"""ATR-based initial stop and position size.

Places a stop ``atr * multiplier`` away from entry and sizes the position so
that hitting the stop loses exactly the risk budget.
"""

from dataclasses import dataclass
from enum import Enum

from risklab.validation import clamp_param

# Multipliers below this sit inside normal noise.
SAFE_MULTIPLIER = 2.0


class AssetType(str, Enum):
    """Asset classes with their own volatility norms."""

    FOREX = "forex"
    CRYPTO = "crypto"
    STOCK = "stock"


class Direction(str, Enum):
    """Trade direction."""

    LONG = "long"
    SHORT = "short"


class VolatilityZone(str, Enum):
    """How loud an ATR is relative to its asset class."""

    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    EXTREME = "EXTREME"


# Upper bounds (ATR as percent of price) for LOW, MODERATE, HIGH.
ZONE_CUTOFFS: dict[AssetType, tuple[float, float, float]] = {
    AssetType.FOREX: (0.3, 0.6, 1.0),
    AssetType.CRYPTO: (2.0, 4.0, 7.0),
    AssetType.STOCK: (1.0, 2.5, 4.0),
}


@dataclass(frozen=True)
class AtrPreset:
    """Example market for the calculator."""

    label: str
    asset_type: AssetType
    entry_price: float
    atr: float
    description: str


ATR_PRESETS: tuple[AtrPreset, ...] = (
    AtrPreset("Forex (Calm)", AssetType.FOREX, 1.1, 0.003, "Typical EUR/USD session"),
    AtrPreset("Forex (News)", AssetType.FOREX, 1.1, 0.012, "High impact news event"),
    AtrPreset("Crypto (BTC)", AssetType.CRYPTO, 65000.0, 1200.0, "Standard Bitcoin volatility"),
    AtrPreset("Stock (Tech)", AssetType.STOCK, 150.0, 3.5, "Volatile tech stock"),
)


@dataclass(frozen=True)
class AtrStopResult:
    """Result of an ATR stop calculation."""

    stop_distance: float
    stop_price: float
    risk_amount: float
    position_size: float
    leverage: float
    is_safe: bool
    volatility_zone: VolatilityZone


def volatility_zone(atr: float, entry_price: float, asset_type: AssetType | str) -> VolatilityZone:
    """Classify ATR as a percentage of price for the asset class."""
    if entry_price <= 0:
        return VolatilityZone.EXTREME
    atr_pct = atr / entry_price * 100.0
    low, moderate, high = ZONE_CUTOFFS[AssetType(asset_type)]
    if atr_pct < low:
        return VolatilityZone.LOW
    if atr_pct < moderate:
        return VolatilityZone.MODERATE
    if atr_pct < high:
        return VolatilityZone.HIGH
    return VolatilityZone.EXTREME


def calculate_atr_stop(
    entry_price: float,
    atr: float,
    multiplier: float = 2.0,
    direction: Direction | str = Direction.LONG,
    account_size: float = 10000.0,
    risk_percent: float = 1.0,
    asset_type: AssetType | str = AssetType.STOCK,
) -> AtrStopResult:
    """Calculate stop placement and size for one trade.

    Args:
        entry_price: Planned entry price.
        atr: Average true range, in price units.
        multiplier: ATR multiple for the stop distance.
        direction: Long stops sit below entry, short stops above.
        account_size: Account equity.
        risk_percent: Percent of equity lost if the stop is hit.
        asset_type: Asset class for the volatility zone.

    Returns:
        AtrStopResult. Position size is 0 when the stop distance is 0.
    """
    direction = Direction(direction)
    atr = clamp_param("atr", atr, lower=0.0)
    multiplier = clamp_param("multiplier", multiplier, lower=0.0)
    account_size = clamp_param("account_size", account_size, lower=0.0)
    risk_percent = clamp_param("risk_percent", risk_percent, lower=0.0, upper=100.0)

    stop_distance = atr * multiplier
    if direction is Direction.LONG:
        stop_price = entry_price - stop_distance
    else:
        stop_price = entry_price + stop_distance

    risk_amount = account_size * (risk_percent / 100.0)
    position_size = risk_amount / stop_distance if stop_distance > 0 else 0.0

    notional = position_size * entry_price
    leverage = notional / account_size if account_size > 0 else 0.0

    return AtrStopResult(
        stop_distance=stop_distance,
        stop_price=stop_price,
        risk_amount=risk_amount,
        position_size=position_size,
        leverage=leverage,
        is_safe=multiplier >= SAFE_MULTIPLIER,
        volatility_zone=volatility_zone(atr, entry_price, asset_type),
    )
