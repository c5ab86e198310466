from datetime import date, timedelta
from decimal import Decimal

import pytest

from exceptions import AssetValidationError
from models import AssetClass
from services.validation import AssetRequest


def _fields(**overrides):
    fields = dict(
        asset_class="STOCK",
        symbol="BBAS3",
        quantity="100",
        purchase_price="19.68",
        purchase_date=date(2025, 7, 31),
    )
    fields.update(overrides)
    return fields


def _error_fields(excinfo):
    return {error["field"] for error in excinfo.value.errors}


def test_valid_request():
    request = AssetRequest.from_input(**_fields())

    assert request.asset_class is AssetClass.STOCK
    assert request.symbol == "BBAS3"
    assert request.quantity == Decimal("100.0000")
    assert request.purchase_price == Decimal("19.68")


def test_symbol_is_trimmed_and_uppercased():
    assert AssetRequest.from_input(**_fields(symbol=" bbas3 ")).symbol == "BBAS3"


@pytest.mark.parametrize("symbol", ["", "   ", None, "X" * 21])
def test_bad_symbols_are_rejected(symbol):
    with pytest.raises(AssetValidationError) as excinfo:
        AssetRequest.from_input(**_fields(symbol=symbol))
    assert _error_fields(excinfo) == {"symbol"}


def test_symbol_of_twenty_characters_is_accepted():
    assert len(AssetRequest.from_input(**_fields(symbol="y" * 20)).symbol) == 20


@pytest.mark.parametrize("quantity", ["0", "-1", "0.00001"])
def test_non_positive_quantity_is_rejected(quantity):
    with pytest.raises(AssetValidationError) as excinfo:
        AssetRequest.from_input(**_fields(quantity=quantity))
    assert _error_fields(excinfo) == {"quantity"}


@pytest.mark.parametrize("price", ["0", "-19.68", "0.001"])
def test_non_positive_purchase_price_is_rejected(price):
    with pytest.raises(AssetValidationError) as excinfo:
        AssetRequest.from_input(**_fields(purchase_price=price))
    assert _error_fields(excinfo) == {"purchase_price"}


def test_future_purchase_date_is_rejected():
    tomorrow = date.today() + timedelta(days=1)
    with pytest.raises(AssetValidationError) as excinfo:
        AssetRequest.from_input(**_fields(purchase_date=tomorrow))
    assert _error_fields(excinfo) == {"purchase_date"}


def test_purchase_today_is_accepted():
    assert AssetRequest.from_input(**_fields(purchase_date=date.today())).purchase_date == date.today()


def test_unknown_asset_class_is_rejected():
    with pytest.raises(AssetValidationError) as excinfo:
        AssetRequest.from_input(**_fields(asset_class="ACAO"))
    assert _error_fields(excinfo) == {"asset_class"}


def test_values_are_rounded_half_up():
    request = AssetRequest.from_input(**_fields(quantity="1.23455", purchase_price="19.685"))
    assert request.quantity == Decimal("1.2346")
    assert request.purchase_price == Decimal("19.69")


def test_every_invalid_field_is_reported():
    with pytest.raises(AssetValidationError) as excinfo:
        AssetRequest.from_input(**_fields(symbol=" ", quantity="0", purchase_price="0"))
    assert _error_fields(excinfo) == {"symbol", "quantity", "purchase_price"}
    assert "symbol is required" in str(excinfo.value)


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        AssetRequest.from_input(**_fields(quantity="0"))
