"""
Domain errors raised by the PortfolioSim services.
"""

from typing import Any, Dict, List, Optional


class PortfolioError(Exception):
    """Base class for all portfolio domain errors."""


class AssetNotFoundError(PortfolioError):
    """Raised when an asset identifier does not exist in the store."""

    def __init__(self, asset_id: Any):
        self.asset_id = asset_id
        super().__init__(f"Asset not found with ID: {asset_id}")


class AssetValidationError(PortfolioError, ValueError):
    """
    Raised when asset input is malformed.
    `errors` holds one {"field", "message"} entry per rejected field.
    """

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        self.errors = errors
        if message is None:
            details = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
            message = f"Validation failed: {details}" if details else "Validation failed"
        super().__init__(message)


class PricingUnavailableError(PortfolioError):
    """Raised when no market price can be produced for an asset."""

    def __init__(self, symbol: Optional[str], asset_class: Any, reason: str = ""):
        self.symbol = symbol
        self.asset_class = asset_class
        message = f"Price unavailable for {symbol!r} ({asset_class})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
