"""
Sample data for PortfolioSim.
Inserts a small demo portfolio when the asset table is empty.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Tuple

from sqlmodel import Session

from db_engine import get_engine, init_db
from models import Asset, AssetClass
from repositories import AssetRepository

logger = logging.getLogger(__name__)

# (class, symbol, name, quantity, purchase price, current price, purchase date)
SAMPLE_ASSETS: List[Tuple[AssetClass, str, str, str, str, str, date]] = [
    (AssetClass.STOCK, "PETR4", "Petrobras PN", "100", "28.50", "30.50", date(2024, 1, 15)),
    (AssetClass.STOCK, "VALE3", "Vale ON", "50", "65.80", "68.90", date(2024, 2, 20)),
    (AssetClass.STOCK, "ITUB4", "Itau Unibanco PN", "200", "30.15", "32.15", date(2024, 3, 10)),
    (AssetClass.CRYPTO, "BTC", "Bitcoin", "0.5", "200000.00", "250000.00", date(2023, 12, 10)),
    (AssetClass.CRYPTO, "ETH", "Ethereum", "2.0", "14000.00", "16000.00", date(2024, 3, 5)),
    (AssetClass.FUND, "BOVA11", "iShares Ibovespa", "20", "100.50", "105.30", date(2024, 4, 12)),
    (AssetClass.FUND, "IVVB11", "iShares S&P 500", "15", "240.80", "245.80", date(2024, 5, 1)),
    (AssetClass.FIXED_INCOME, "CDB", "CDB Banco XP", "10", "1000.00", "1025.00", date(2024, 5, 18)),
]


def seed_sample_assets() -> int:
    """
    Insert the sample holdings if no asset is stored yet.

    Returns:
        Number of assets inserted (0 when the table already had data)
    """
    with Session(get_engine(), expire_on_commit=False) as session:
        if AssetRepository.count(session=session) > 0:
            logger.info("Database already has assets. Skipping sample data.")
            return 0

        logger.info("Inserting sample assets...")
        assets = [
            Asset(
                asset_class=asset_class,
                symbol=symbol,
                name=name,
                quantity=Decimal(quantity),
                purchase_price=Decimal(purchase_price),
                current_price=Decimal(current_price),
                purchase_date=purchase_date,
            )
            for asset_class, symbol, name, quantity, purchase_price, current_price, purchase_date
            in SAMPLE_ASSETS
        ]
        AssetRepository.save_all(assets, session=session)

    for asset in assets:
        logger.info(f"Asset created: {asset.symbol} - {asset.name}")
    logger.info("Sample assets inserted successfully!")
    return len(assets)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    init_db()
    print("=" * 60)
    print("PortfolioSim Sample Data")
    print("=" * 60)
    inserted = seed_sample_assets()
    print(f"Inserted {inserted} assets.")
    print("=" * 60)
