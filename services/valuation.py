"""
Valuation of a single holding.
All values are derived on demand from the stored fields and never persisted.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

from models import Asset
from services.common import quantize_percentage

ZERO = Decimal("0")


@dataclass(frozen=True)
class AssetValuation:
    """Derived figures for one holding."""
    invested_value: Decimal
    current_value: Decimal
    profit_loss: Decimal
    profit_loss_percentage: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "invested_value": self.invested_value,
            "current_value": self.current_value,
            "profit_loss": self.profit_loss,
            "profit_loss_percentage": self.profit_loss_percentage,
        }


def _or_zero(value) -> Decimal:
    return ZERO if value is None else value


def invested_value(asset: Asset) -> Decimal:
    """purchase_price x quantity."""
    return _or_zero(asset.purchase_price) * _or_zero(asset.quantity)


def current_value(asset: Asset) -> Decimal:
    """current_price x quantity; zero while the asset has not been priced."""
    return _or_zero(asset.current_price) * _or_zero(asset.quantity)


def profit_loss(asset: Asset) -> Decimal:
    """current value minus invested value."""
    return current_value(asset) - invested_value(asset)


def profit_loss_percentage(asset: Asset) -> Decimal:
    """
    Profit/loss relative to the invested value, in percent, rounded to
    4 places half-up. Zero when nothing was invested.
    """
    invested = invested_value(asset)
    if invested <= 0:
        return ZERO
    return quantize_percentage(profit_loss(asset) / invested * 100)


def value_asset(asset: Asset) -> AssetValuation:
    """Compute every derived figure for one asset."""
    return AssetValuation(
        invested_value=invested_value(asset),
        current_value=current_value(asset),
        profit_loss=profit_loss(asset),
        profit_loss_percentage=profit_loss_percentage(asset),
    )
