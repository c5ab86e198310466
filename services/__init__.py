"""
Services package for PortfolioSim.
Provides core business logic separated from the data layer.
"""

from services.common import (
    normalize_symbol,
    quantize_money,
    quantize_quantity,
    quantize_percentage,
)
from services.market_data import MarketDataService
from services.validation import AssetRequest
from services.valuation import (
    AssetValuation,
    invested_value,
    current_value,
    profit_loss,
    profit_loss_percentage,
    value_asset,
)
from services.portfolio import PortfolioService, PortfolioSummary, summarize_assets

__all__ = [
    # Common utilities
    'normalize_symbol',
    'quantize_money',
    'quantize_quantity',
    'quantize_percentage',
    # Request validation
    'AssetRequest',
    # Valuation
    'AssetValuation',
    'invested_value',
    'current_value',
    'profit_loss',
    'profit_loss_percentage',
    'value_asset',
    # Services
    'MarketDataService',
    'PortfolioService',
    'PortfolioSummary',
    'summarize_assets',
]
