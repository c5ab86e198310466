"""
Portfolio service for managing holdings and summarizing the portfolio.
Request-path pricing calls the market data service once, with a timeout,
and falls back to the purchase price when no quote is available.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as QuoteTimeoutError
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from config import get_settings
from db_engine import get_session
from exceptions import AssetNotFoundError, AssetValidationError
from models import Asset, AssetClass
from repositories import AssetRepository
from services.common import quantize_money, to_decimal
from services.market_data import MarketDataService
from services.valuation import AssetValuation, invested_value, value_asset
from services.validation import AssetRequest, MIN_PRICE

logger = logging.getLogger(__name__)

# Shared by all request-path quotes so a stuck call never blocks the caller
_quote_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="quote")


@dataclass
class PortfolioSummary:
    """Portfolio-wide totals over invested value."""
    total_invested: Decimal
    total_by_class: Dict[AssetClass, Decimal]
    asset_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_invested': self.total_invested,
            'total_by_class': {c.value: v for c, v in self.total_by_class.items()},
            'asset_count': self.asset_count,
        }


def _class_of(asset: Asset) -> Optional[AssetClass]:
    value = asset.asset_class
    if isinstance(value, AssetClass):
        return value
    try:
        return AssetClass(value)
    except ValueError:
        return None


def summarize_assets(assets: Iterable[Asset]) -> PortfolioSummary:
    """
    Aggregate invested value over a set of assets.

    Every AssetClass appears in `total_by_class`, zero when empty.
    Assets with a missing or unknown class still count toward
    `asset_count` and `total_invested` but not toward any class total.
    """
    total_by_class = {asset_class: Decimal("0") for asset_class in AssetClass}
    total_invested = Decimal("0")
    count = 0

    for asset in assets:
        count += 1
        value = invested_value(asset)
        total_invested += value

        asset_class = _class_of(asset)
        if asset_class is None:
            logger.warning(f"Asset {asset.id} has unrecognized class {asset.asset_class!r}, "
                           f"excluded from class totals")
            continue
        total_by_class[asset_class] += value

    return PortfolioSummary(
        total_invested=total_invested,
        total_by_class=total_by_class,
        asset_count=count,
    )


class PortfolioService:
    """
    Service for portfolio operations on the asset store.

    Args:
        market_data: Quote source; a MarketDataService built from settings by default
        quote_timeout: Seconds to wait for a request-path quote
    """

    def __init__(self, market_data: Optional[MarketDataService] = None,
                 quote_timeout: Optional[float] = None):
        self.market_data = market_data if market_data is not None else MarketDataService()
        if quote_timeout is None:
            quote_timeout = get_settings().quote_timeout_seconds
        self.quote_timeout = quote_timeout

    def _quote_or_fallback(self, asset: Asset) -> Decimal:
        """
        Quote the asset; on any failure or timeout use its purchase price.
        """
        try:
            future = _quote_executor.submit(
                self.market_data.get_current_price, asset.symbol, asset.asset_class
            )
            return future.result(timeout=self.quote_timeout)
        except QuoteTimeoutError:
            # A quote still queued behind stuck calls never starts
            future.cancel()
            logger.warning(
                f"Market price for {asset.symbol} timed out after {self.quote_timeout}s. "
                f"Using purchase price as fallback."
            )
            return asset.purchase_price
        except Exception as e:
            logger.warning(
                f"Could not fetch market price for {asset.symbol}: {e!r}. "
                f"Using purchase price as fallback."
            )
            return asset.purchase_price

    def _find(self, asset_id: int, session=None) -> Asset:
        asset = AssetRepository.get_by_id(asset_id, session=session)
        if asset is None:
            logger.error(f"Asset not found with ID: {asset_id}")
            raise AssetNotFoundError(asset_id)
        return asset

    def create_asset(self, request: AssetRequest) -> Asset:
        """
        Create and price a new asset.

        Args:
            request: Validated asset fields

        Returns:
            The stored Asset, with id and current price set
        """
        logger.info(f"Creating asset: {request.symbol}")

        asset = Asset(
            asset_class=request.asset_class,
            symbol=request.symbol,
            name=request.symbol,
            quantity=request.quantity,
            purchase_price=request.purchase_price,
            purchase_date=request.purchase_date,
        )
        asset.current_price = self._quote_or_fallback(asset)

        saved = AssetRepository.save(asset)
        logger.info(f"Asset created with ID: {saved.id}")
        return saved

    def list_assets(self) -> List[Asset]:
        logger.info("Fetching all assets")
        return AssetRepository.get_all()

    def list_assets_by_class(self, asset_class: AssetClass) -> List[Asset]:
        logger.info(f"Fetching assets by class: {asset_class}")
        return AssetRepository.get_by_class(asset_class)

    def get_asset(self, asset_id: int) -> Asset:
        """Get one asset; raises AssetNotFoundError for unknown ids."""
        logger.info(f"Fetching asset ID: {asset_id}")
        return self._find(asset_id)

    def update_asset(self, asset_id: int, request: AssetRequest) -> Asset:
        """
        Replace the mutable fields of an asset.
        The current price is only filled in when the asset has none;
        otherwise it is left to the refresh job or update_market_price.
        """
        logger.info(f"Updating asset ID: {asset_id}")

        with AssetRepository.lock(asset_id), get_session() as session:
            asset = self._find(asset_id, session=session)

            asset.asset_class = request.asset_class
            asset.symbol = request.symbol
            asset.name = request.symbol
            asset.quantity = request.quantity
            asset.purchase_price = request.purchase_price
            asset.purchase_date = request.purchase_date

            if asset.current_price is None:
                asset.current_price = self._quote_or_fallback(asset)

            updated = AssetRepository.save(asset, session=session)

        logger.info(f"Asset ID: {asset_id} updated")
        return updated

    def delete_asset(self, asset_id: int) -> None:
        """Delete an asset; raises AssetNotFoundError without touching the store."""
        logger.info(f"Deleting asset ID: {asset_id}")

        with AssetRepository.lock(asset_id):
            if not AssetRepository.exists(asset_id):
                logger.error(f"Asset not found with ID: {asset_id}")
                raise AssetNotFoundError(asset_id)
            AssetRepository.delete(asset_id)

        logger.info(f"Asset ID: {asset_id} deleted")

    def update_market_price(self, asset_id: int, current_price) -> Asset:
        """
        Overwrite the current price of one asset.

        Args:
            asset_id: Asset to update
            current_price: New price, must be positive; rounded to 2 places

        Raises:
            AssetValidationError: for a non-positive price
            AssetNotFoundError: for an unknown id
        """
        logger.info(f"Updating market price for asset ID: {asset_id}")

        try:
            price = quantize_money(to_decimal(current_price))
        except (ArithmeticError, ValueError, TypeError):
            raise AssetValidationError([{"field": "current_price", "message": "must be a number"}])
        if not price.is_finite() or price < MIN_PRICE:
            raise AssetValidationError(
                [{"field": "current_price", "message": "current price must be greater than zero"}]
            )

        with AssetRepository.lock(asset_id), get_session() as session:
            asset = self._find(asset_id, session=session)
            asset.current_price = price
            updated = AssetRepository.save(asset, session=session)

        logger.info(f"Market price updated for asset ID: {asset_id}")
        return updated

    def search_assets(self, symbol: Optional[str] = None, name: Optional[str] = None) -> List[Asset]:
        """
        Search by symbol substring, else by name substring, else return everything.
        """
        logger.info(f"Searching assets with symbol: {symbol}, name: {name}")

        if symbol is not None and symbol.strip():
            return AssetRepository.search_by_symbol(symbol)
        if name is not None and name.strip():
            return AssetRepository.search_by_name(name)
        return AssetRepository.get_all()

    def get_summary(self) -> PortfolioSummary:
        logger.info("Generating portfolio summary")
        return summarize_assets(AssetRepository.get_all())

    def get_valuation(self, asset_id: int) -> AssetValuation:
        """Derived figures (invested, current, P/L) for one asset."""
        return value_asset(self._find(asset_id))
