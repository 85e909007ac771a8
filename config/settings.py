"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Fixed rule thresholds live in config/thresholds.py; only the tunable
windows, staffing economics and defaults are configurable here.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """
    Engine settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on first access.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SALES WINDOWS
    # ===================
    sales_window_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Trailing window for average daily sales"
    )
    sales_trend_window_days: int = Field(
        default=7,
        ge=1,
        le=60,
        description="Short window compared against the primary window for trend"
    )

    # ===================
    # STOCK RISK NOTES
    # ===================
    low_stock_days: int = Field(
        default=14,
        ge=1,
        le=90,
        description="Stock days remaining below this add a low stock note"
    )
    overstock_days: int = Field(
        default=180,
        ge=30,
        le=730,
        description="Stock days remaining above this add an overstock note"
    )

    # ===================
    # SEASON
    # ===================
    default_season_score: float = Field(
        default=50,
        ge=0,
        le=100,
        description="Season score used for sorting when no curve is loaded"
    )

    # ===================
    # TEMPORARY STAFF
    # ===================
    capacity_per_worker: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Units one part-time worker ships in a day"
    )
    base_cost_per_worker: float = Field(
        default=60,
        ge=0,
        description="Daily cost of one part-time worker before regional salary multiplier"
    )
    staff_count_max: int = Field(
        default=200,
        ge=0,
        le=10000,
        description="Upper bound on part-time workers bought in a single day"
    )

    # ===================
    # WAREHOUSE
    # ===================
    default_warehouse_tier: int = Field(
        default=1,
        ge=1,
        le=5,
        description="Tier used for band lookup when the warehouse has no metric level"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Engine settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
