"""
Configuration for the analysis dashboard.

Values come from NAUTA_* environment variables or a .env file.
"""
from functools import lru_cache
from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nauta.currency import EXCHANGE_RATES


class NautaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NAUTA_", env_file=".env", extra="ignore")

    display_currency: str = "EUR"
    data_path: str = "data/snapshot.json"
    store_path: str = "data/store.json"
    log_level: str = "INFO"
    exchange_rates: Dict[str, float] = Field(default_factory=lambda: dict(EXCHANGE_RATES))
    score_alert_threshold: float = 40.0


@lru_cache
def get_settings() -> NautaSettings:
    return NautaSettings()
