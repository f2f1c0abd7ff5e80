# config.py

"""Shop settings, loaded from environment variables or a ``.env`` file."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# GST slabs top out at 28%
MAX_GST_RATE = 28.0


class Settings(BaseSettings):
    """Shop details and data paths; every field can be overridden by env var (e.g. ``SHOP_STATE``)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    shop_name: str = "Friends Group Company Pvt. Ltd."
    shop_gstin: str = "27ABCDE1234F1Z5"
    shop_state: str = "Maharashtra"
    shop_address: str = "Wiman Nagar, Pune, Maharashtra"
    currency_symbol: str = "₹"
    hsn_csv_path: str = "Data/HSN DATA 400.csv"

    @property
    def shop_info(self) -> dict:
        return {
            "name": self.shop_name,
            "gstin": self.shop_gstin,
            "state": self.shop_state,
            "address": self.shop_address,
        }


# Cached singleton; call get_settings.cache_clear() after changing the environment
@lru_cache
def get_settings() -> Settings:
    return Settings()
