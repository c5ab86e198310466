from decimal import Decimal

import pytest

from services import common
from services.common import (
    normalize_symbol,
    quantize_money,
    quantize_percentage,
    quantize_quantity,
    to_decimal,
)


class TestNormalizeSymbol:
    def test_trims_and_upper_cases(self):
        assert normalize_symbol(" bbas3 ") == "BBAS3"

    def test_none_is_empty(self):
        assert normalize_symbol(None) == ""


class TestRounding:
    def test_float_keeps_its_short_form(self):
        assert to_decimal(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("value, expected", [
        ("2.005", Decimal("2.01")),
        ("2.004", Decimal("2.00")),
        (Decimal("-1.125"), Decimal("-1.13")),
    ])
    def test_money_rounds_half_up(self, value, expected):
        assert quantize_money(value) == expected

    def test_quantity_and_percentage_keep_four_places(self):
        assert quantize_quantity("0.00005") == Decimal("0.0001")
        assert quantize_percentage("7.01754") == Decimal("7.0175")


def test_module_has_no_logger():
    assert not hasattr(common, "logger")
