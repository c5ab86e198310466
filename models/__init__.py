"""
Database models for PortfolioSim.
All SQLModel table definitions are centralized here.
"""

from models.asset import Asset, AssetClass

__all__ = [
    'Asset',
    'AssetClass',
]
