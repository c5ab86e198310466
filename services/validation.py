"""Validation of incoming asset data before it reaches the store."""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from exceptions import AssetValidationError
from models import AssetClass
from services.common import MAX_SYMBOL_LENGTH, normalize_symbol, quantize_money, quantize_quantity

MIN_QUANTITY = Decimal("0.0001")
MIN_PRICE = Decimal("0.01")


class AssetRequest(BaseModel):
    """Mutable fields of an asset as supplied on create or update."""

    model_config = ConfigDict(frozen=True)

    asset_class: AssetClass
    symbol: str
    quantity: Decimal
    purchase_price: Decimal
    purchase_date: date

    @field_validator("symbol", mode="before")
    @classmethod
    def _normalize_symbol(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("symbol must be text")
        symbol = normalize_symbol(value)
        if not symbol:
            raise ValueError("symbol is required")
        if len(symbol) > MAX_SYMBOL_LENGTH:
            raise ValueError(f"symbol must have at most {MAX_SYMBOL_LENGTH} characters")
        return symbol

    @field_validator("quantity")
    @classmethod
    def _check_quantity(cls, value: Decimal) -> Decimal:
        if not value.is_finite() or value < MIN_QUANTITY:
            raise ValueError("quantity must be greater than zero")
        return quantize_quantity(value)

    @field_validator("purchase_price")
    @classmethod
    def _check_purchase_price(cls, value: Decimal) -> Decimal:
        if not value.is_finite() or value < MIN_PRICE:
            raise ValueError("purchase price must be greater than zero")
        return quantize_money(value)

    @field_validator("purchase_date")
    @classmethod
    def _check_purchase_date(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("purchase date must not be in the future")
        return value

    @classmethod
    def from_input(cls, **fields: Any) -> "AssetRequest":
        """
        Build a request, translating pydantic errors into AssetValidationError.

        Raises:
            AssetValidationError: one entry per rejected field
        """
        try:
            return cls(**fields)
        except ValidationError as e:
            raise AssetValidationError(_field_errors(e)) from e


def _field_errors(error: ValidationError) -> List[Dict[str, str]]:
    errors = []
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or "__root__"
        message = item.get("msg", "invalid value")
        # pydantic prefixes messages raised from validators
        message = message.removeprefix("Value error, ")
        errors.append({"field": field, "message": message})
    return errors
