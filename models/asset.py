"""
Asset model - represents a holding in the portfolio.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


class AssetClass(str, Enum):
    """Fixed set of investment categories."""
    STOCK = "STOCK"
    CRYPTO = "CRYPTO"
    FUND = "FUND"
    FIXED_INCOME = "FIXED_INCOME"
    OTHER = "OTHER"


class Asset(SQLModel, table=True):
    """Represents a holding in the portfolio."""
    id: Optional[int] = Field(default=None, primary_key=True)
    asset_class: AssetClass = Field(index=True)
    symbol: str = Field(index=True, max_length=20)  # e.g., "PETR4", "BTC", "BOVA11"
    name: str = Field(max_length=100)  # Display name, mirrors symbol for user-created assets
    quantity: Decimal = Field(max_digits=15, decimal_places=4)
    purchase_price: Decimal = Field(max_digits=15, decimal_places=2)
    current_price: Optional[Decimal] = Field(default=None, max_digits=15, decimal_places=2)
    purchase_date: date

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
