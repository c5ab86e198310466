"""
Market data service producing simulated quotes.
Each quote starts from a reference price per (asset class, symbol) and
applies a random variation whose band depends on the asset class.
The random source is injectable so quotes can be made deterministic.
"""

import logging
import random
from decimal import Decimal
from typing import Dict, Optional, Protocol

from config import get_settings
from exceptions import PricingUnavailableError
from models import AssetClass
from services.common import normalize_symbol, quantize_money, to_decimal

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything with random.Random's `uniform` method."""

    def uniform(self, a: float, b: float) -> float:  # pragma: no cover - interface
        ...


# Reference prices for the symbols the simulator knows about
BASE_PRICES: Dict[AssetClass, Dict[str, Decimal]] = {
    AssetClass.STOCK: {
        "PETR4": Decimal("30.50"),
        "VALE3": Decimal("68.90"),
        "ITUB4": Decimal("32.15"),
        "BBAS3": Decimal("56.80"),
        "BBDC4": Decimal("17.45"),
    },
    AssetClass.CRYPTO: {
        "BTC": Decimal("250000.00"),
        "ETH": Decimal("16000.00"),
        "ADA": Decimal("2.50"),
        "SOL": Decimal("350.00"),
        "XRP": Decimal("3.20"),
    },
    AssetClass.FUND: {
        "BOVA11": Decimal("105.30"),
        "IVVB11": Decimal("245.80"),
        "HGLG11": Decimal("178.90"),
        "SMAL11": Decimal("121.70"),
        "HASH11": Decimal("59.80"),
    },
    AssetClass.FIXED_INCOME: {
        "CDB": Decimal("1000.00"),
        "LCI": Decimal("1000.00"),
        "LCA": Decimal("1000.00"),
        "TESOURO": Decimal("1000.00"),
    },
    AssetClass.OTHER: {},
}

# Used when the symbol is not in the class table
DEFAULT_BASE_PRICES: Dict[AssetClass, Decimal] = {
    AssetClass.STOCK: Decimal("50.00"),
    AssetClass.CRYPTO: Decimal("100.00"),
    AssetClass.FUND: Decimal("100.00"),
    AssetClass.FIXED_INCOME: Decimal("1000.00"),
    AssetClass.OTHER: Decimal("100.00"),
}

# Multiplier applied to the configured variation percentage
VARIATION_MULTIPLIERS: Dict[AssetClass, float] = {
    AssetClass.STOCK: 1.5,
    AssetClass.CRYPTO: 2.0,
    AssetClass.FUND: 1.0,
    AssetClass.FIXED_INCOME: 1.0,
    AssetClass.OTHER: 1.0,
}


def _coerce_asset_class(symbol: str, asset_class) -> AssetClass:
    if isinstance(asset_class, AssetClass):
        return asset_class
    try:
        return AssetClass(asset_class)
    except ValueError:
        raise PricingUnavailableError(symbol, asset_class, "unsupported asset class")


class MarketDataService:
    """
    Service for simulated market quotes.

    Args:
        variation_percentage: Base +/- band in percent; defaults to the
            `price_variation_percentage` setting
        rng: Random source, defaults to a fresh random.Random()
    """

    def __init__(self, variation_percentage: Optional[float] = None, rng: Optional[RandomSource] = None):
        if variation_percentage is None:
            variation_percentage = get_settings().price_variation_percentage
        if variation_percentage < 0:
            raise ValueError("variation_percentage must be >= 0")
        self.variation_percentage = float(variation_percentage)
        self.rng = rng if rng is not None else random.Random()

    @staticmethod
    def base_price(symbol: Optional[str], asset_class: AssetClass) -> Decimal:
        """Reference price before variation; class default for unknown symbols."""
        key = normalize_symbol(symbol)
        asset_class = _coerce_asset_class(key, asset_class)
        return BASE_PRICES[asset_class].get(key, DEFAULT_BASE_PRICES[asset_class])

    def variation_range(self, asset_class: AssetClass) -> float:
        """Width of the +/- band, in percent, for one asset class."""
        asset_class = _coerce_asset_class("", asset_class)
        return self.variation_percentage * VARIATION_MULTIPLIERS[asset_class]

    def get_current_price(self, symbol: Optional[str], asset_class: AssetClass) -> Decimal:
        """
        Produce a simulated quote.

        Args:
            symbol: Symbol as stored or typed; normalized before lookup
            asset_class: Asset class of the holding

        Returns:
            Positive price rounded to 2 places (half-up)

        Raises:
            PricingUnavailableError: if the asset class is not supported
        """
        key = normalize_symbol(symbol)
        asset_class = _coerce_asset_class(key, asset_class)
        base = self.base_price(key, asset_class)

        u = self.rng.uniform(-1.0, 1.0)
        delta = to_decimal(u) * to_decimal(self.variation_range(asset_class))
        multiplier = Decimal(1) + delta / Decimal(100)

        price = quantize_money(base * multiplier)
        if price <= 0:
            raise PricingUnavailableError(key, asset_class, f"non-positive quote {price}")
        logger.debug(f"Quote {key} ({asset_class.value}): base={base} price={price}")
        return price
