"""
Configuration management for PortfolioSim.
Uses pydantic-settings for type-safe, centralized configuration.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Uses pydantic-settings for validation and type safety.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'  # Allow extra fields in .env for flexibility
    )

    # Database
    database_url: str = "sqlite:///portfolio_sim.db"
    db_echo: bool = False

    # Simulated market data
    price_variation_percentage: float = Field(default=10.0, ge=0)
    refresh_interval_ms: int = Field(default=60000, gt=0)
    quote_timeout_seconds: float = Field(default=2.0, gt=0)

    # Insert the sample holdings when the store is empty
    seed_sample_data: bool = False

    @property
    def refresh_interval_seconds(self) -> float:
        """Refresh interval expressed in seconds for the scheduler trigger."""
        return self.refresh_interval_ms / 1000.0


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings
