"""Pytest configuration and shared fixtures for PortfolioSim tests.

Provides an isolated SQLite database per test, asset factories and
deterministic random sources for the market data service.
"""

from datetime import date
from decimal import Decimal

import pytest

import config
import db_engine
from models import Asset, AssetClass
from repositories import AssetRepository

SETTINGS_ENV_VARS = (
    "DATABASE_URL",
    "DB_ECHO",
    "PRICE_VARIATION_PERCENTAGE",
    "REFRESH_INTERVAL_MS",
    "QUOTE_TIMEOUT_SECONDS",
    "SEED_SAMPLE_DATA",
)


class FixedRandom:
    """Random source whose `uniform` always returns the same draw."""

    def __init__(self, value: float):
        self.value = value
        self.calls = 0

    def uniform(self, a: float, b: float) -> float:
        self.calls += 1
        return self.value


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Run every test with default settings, isolated from the real environment."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)  # keep any .env in the checkout out of the way
    config.reload_settings()
    yield
    db_engine.reset_engine()
    config._settings = None


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Point the engine at a fresh SQLite file and create the tables."""
    db_path = tmp_path / "test_portfolio.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_path}")
    config.reload_settings()
    db_engine.reset_engine()
    db_engine.init_db()
    yield db_path
    db_engine.reset_engine()


@pytest.fixture
def make_asset():
    """Build an unsaved Asset with sensible defaults."""

    def _make(**overrides) -> Asset:
        fields = dict(
            asset_class=AssetClass.STOCK,
            symbol="PETR4",
            name="PETR4",
            quantity=Decimal("100"),
            purchase_price=Decimal("28.50"),
            current_price=Decimal("30.50"),
            purchase_date=date(2024, 1, 15),
        )
        fields.update(overrides)
        return Asset(**fields)

    return _make


@pytest.fixture
def stored_asset(db, make_asset):
    """Build and persist an Asset."""

    def _store(**overrides) -> Asset:
        return AssetRepository.save(make_asset(**overrides))

    return _store


@pytest.fixture
def fixed_rng():
    """Factory for FixedRandom sources."""
    return FixedRandom
