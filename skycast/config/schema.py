"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

from skycast.config.defaults import DEFAULT_CITY, DEFAULT_DB_PATH, OPENWEATHER_BASE_URL
from skycast.models.common import UnitSystem


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = OPENWEATHER_BASE_URL
    api_key: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class RetryConfig(BaseModel):
    model_config = {"extra": "forbid"}

    max_retries: int = Field(default=3, ge=0)
    initial_delay_ms: int = Field(default=1000, gt=0)


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    units: UnitSystem = UnitSystem.METRIC
    default_city: str = DEFAULT_CITY
    hourly_limit: int = Field(default=24, ge=1, le=48)
    daily_limit: int = Field(default=5, ge=1, le=7)
    dark_mode: bool = False


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = DEFAULT_DB_PATH


class DashboardConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    retry: RetryConfig = RetryConfig()
    display: DisplayConfig = DisplayConfig()
    storage: StorageConfig = StorageConfig()
