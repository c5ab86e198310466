from decimal import Decimal

from models import AssetClass
from services.portfolio import summarize_assets


def test_empty_portfolio_lists_every_class():
    summary = summarize_assets([])

    assert summary.asset_count == 0
    assert summary.total_invested == 0
    assert set(summary.total_by_class) == set(AssetClass)
    assert all(value == 0 for value in summary.total_by_class.values())


def test_totals_per_class(make_asset):
    assets = [
        make_asset(asset_class=AssetClass.STOCK, quantity=Decimal("100"), purchase_price=Decimal("28.50")),
        make_asset(asset_class=AssetClass.STOCK, symbol="VALE3", quantity=Decimal("50"),
                   purchase_price=Decimal("65.80")),
        make_asset(asset_class=AssetClass.CRYPTO, symbol="BTC", quantity=Decimal("0.5"),
                   purchase_price=Decimal("200000.00")),
        make_asset(asset_class=AssetClass.FIXED_INCOME, symbol="CDB", quantity=Decimal("10"),
                   purchase_price=Decimal("1000.00")),
    ]

    summary = summarize_assets(assets)

    assert summary.asset_count == 4
    assert summary.total_by_class[AssetClass.STOCK] == Decimal("6140.00")
    assert summary.total_by_class[AssetClass.CRYPTO] == Decimal("100000.00")
    assert summary.total_by_class[AssetClass.FIXED_INCOME] == Decimal("10000.00")
    assert summary.total_by_class[AssetClass.FUND] == 0
    assert summary.total_by_class[AssetClass.OTHER] == 0
    assert summary.total_invested == Decimal("116140.00")
    assert sum(summary.total_by_class.values()) == summary.total_invested


def test_current_price_does_not_affect_summary(make_asset):
    priced = summarize_assets([make_asset(current_price=Decimal("99.99"))])
    unpriced = summarize_assets([make_asset(current_price=None)])
    assert priced.total_invested == unpriced.total_invested == Decimal("2850.00")


def test_unrecognized_class_is_counted_but_not_classified(make_asset):
    assets = [
        make_asset(asset_class=AssetClass.FUND, symbol="BOVA11", quantity=Decimal("20"),
                   purchase_price=Decimal("100.50")),
        make_asset(asset_class=None, symbol="MYSTERY", quantity=Decimal("1"),
                   purchase_price=Decimal("10.00")),
        make_asset(asset_class="REAL_ESTATE", symbol="HOUSE", quantity=Decimal("1"),
                   purchase_price=Decimal("5.00")),
    ]

    summary = summarize_assets(assets)

    assert summary.asset_count == 3
    assert summary.total_by_class[AssetClass.FUND] == Decimal("2010.00")
    assert sum(summary.total_by_class.values()) == Decimal("2010.00")
    assert summary.total_invested == Decimal("2025.00")


def test_class_stored_as_plain_string(make_asset):
    summary = summarize_assets([make_asset(asset_class="CRYPTO", quantity=Decimal("2"),
                                           purchase_price=Decimal("14000.00"))])
    assert summary.total_by_class[AssetClass.CRYPTO] == Decimal("28000.00")


def test_to_dict_uses_class_values(make_asset):
    data = summarize_assets([make_asset()]).to_dict()

    assert data["asset_count"] == 1
    assert data["total_invested"] == Decimal("2850.00")
    assert data["total_by_class"] == {
        "STOCK": Decimal("2850.00"),
        "CRYPTO": Decimal("0"),
        "FUND": Decimal("0"),
        "FIXED_INCOME": Decimal("0"),
        "OTHER": Decimal("0"),
    }
