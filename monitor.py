"""
Background price refresh using APScheduler.
Runs on a fixed interval to re-price every stored asset with the
simulated market data service and persist the new prices in one batch.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from config import get_settings
from models import AssetClass
from repositories import AssetRepository
from services.market_data import MarketDataService

logger = logging.getLogger(__name__)

JOB_ID = 'price_refresh'

STATUS_SUCCESS = "SUCCESS"
STATUS_PARTIAL = "PARTIAL"
STATUS_NOOP = "NOOP"
STATUS_SKIPPED = "SKIPPED"
STATUS_FAILED = "FAILED"


@dataclass
class RefreshResult:
    """Outcome of one refresh tick."""
    status: str
    updated: int = 0
    skipped_symbols: List[str] = field(default_factory=list)
    stale_symbols: List[str] = field(default_factory=list)
    error: Optional[str] = None
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        return self.status != STATUS_FAILED


class PriceRefreshScheduler:
    """
    Periodic re-pricing of the whole portfolio.

    Only one tick runs at a time: a tick that fires while another is in
    flight returns immediately with status SKIPPED.

    Args:
        market_data: Quote source; built from settings by default
        interval_seconds: Tick interval; defaults to `refresh_interval_ms`
    """

    def __init__(self, market_data: Optional[MarketDataService] = None,
                 interval_seconds: Optional[float] = None):
        self.market_data = market_data if market_data is not None else MarketDataService()
        if interval_seconds is None:
            interval_seconds = get_settings().refresh_interval_seconds
        self.interval_seconds = interval_seconds
        self._running = threading.Lock()
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def is_running(self) -> bool:
        """True while the background scheduler is started."""
        return self._scheduler is not None and self._scheduler.running

    @property
    def tick_in_progress(self) -> bool:
        return self._running.locked()

    def refresh_prices(self) -> RefreshResult:
        """
        Run one refresh tick.

        Assets whose quote fails are logged and left untouched; a failure
        while writing the batch marks the tick FAILED and is not retried
        until the next tick.
        """
        if not self._running.acquire(blocking=False):
            logger.info("Previous price refresh still running, skipping this tick.")
            return RefreshResult(status=STATUS_SKIPPED)

        try:
            return self._refresh()
        finally:
            self._running.release()

    def _refresh(self) -> RefreshResult:
        assets = AssetRepository.get_all()
        if not assets:
            logger.info("No assets in database to refresh.")
            return RefreshResult(status=STATUS_NOOP)

        logger.info(f"Refreshing prices for {len(assets)} assets...")

        prices: Dict[int, Decimal] = {}
        priced_as: Dict[int, Tuple[str, AssetClass]] = {}
        skipped: List[str] = []
        for asset in assets:
            try:
                prices[asset.id] = self.market_data.get_current_price(asset.symbol, asset.asset_class)
                priced_as[asset.id] = (asset.symbol, asset.asset_class)
            except Exception as e:
                logger.warning(f"Could not price {asset.symbol} (ID {asset.id}), skipping: {e}")
                skipped.append(asset.symbol)

        if not prices:
            logger.warning("No prices could be computed in this tick.")
            return RefreshResult(status=STATUS_FAILED, skipped_symbols=skipped,
                                 error="no asset could be priced")

        try:
            written = AssetRepository.update_current_prices(prices, expected=priced_as)
        except Exception as e:
            logger.exception(f"Failed to persist refreshed prices: {e}")
            return RefreshResult(status=STATUS_FAILED, skipped_symbols=skipped, error=str(e))

        # Rows deleted or re-labelled while this tick was pricing them
        written_ids = set(written)
        stale = [priced_as[asset_id][0] for asset_id in prices if asset_id not in written_ids]
        if stale:
            logger.info(f"Prices discarded for assets changed during the tick: {stale}")

        status = STATUS_PARTIAL if skipped or stale else STATUS_SUCCESS
        logger.info(f"Price refresh complete. Updated: {len(written)}, skipped: {len(skipped)}, "
                    f"stale: {len(stale)}")
        return RefreshResult(status=status, updated=len(written), skipped_symbols=skipped,
                             stale_symbols=stale)

    def start(self, run_immediately: bool = False) -> BackgroundScheduler:
        """
        Start the background scheduler.

        Args:
            run_immediately: Also run one tick synchronously before starting
        """
        if self.is_running:
            return self._scheduler

        scheduler = BackgroundScheduler()
        scheduler.add_job(
            self.refresh_prices,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=JOB_ID,
            name='Price Refresh',
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )

        if run_immediately:
            logger.info("Running initial price refresh on startup...")
            self.refresh_prices()

        scheduler.start()
        self._scheduler = scheduler
        logger.info(f"Price refresh scheduler started. Running every {self.interval_seconds:g}s.")
        return scheduler

    def shutdown(self, wait: bool = True) -> None:
        """Stop the background scheduler if it is running."""
        if self._scheduler is not None:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=wait)
            self._scheduler = None
            logger.info("Price refresh scheduler stopped.")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point: `python monitor.py [--once]`."""
    import argparse

    from db_engine import init_db
    from seed import seed_sample_assets

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(description="PortfolioSim price refresh job")
    parser.add_argument("--once", action="store_true", help="run a single refresh tick and exit")
    args = parser.parse_args(argv)

    init_db()
    if get_settings().seed_sample_data:
        seed_sample_assets()

    refresher = PriceRefreshScheduler()

    if args.once:
        result = refresher.refresh_prices()
        return 0 if result.ok else 1

    refresher.start(run_immediately=True)
    print("\n" + "=" * 60)
    print("PortfolioSim price refresh is running...")
    print("Press Ctrl+C to stop.")
    print("=" * 60 + "\n")

    try:
        while True:
            time.sleep(1)
    except (KeyboardInterrupt, SystemExit):
        logger.info("Shutting down price refresh...")
    finally:
        refresher.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
