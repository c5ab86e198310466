"""
Repositories package for PortfolioSim.
Provides data access layer for all database operations.
"""

from repositories.asset_repository import AssetRepository

__all__ = [
    'AssetRepository',
]
