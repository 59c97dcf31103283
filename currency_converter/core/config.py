from functools import lru_cache
from typing import List
from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


ALLOWED_RATE_PROVIDERS = {"mock", "exchangerate-api"}
ALLOWED_LOCALES = {"pt-BR", "en-US"}


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    EXCHANGE_API_KEY, RATES_CACHE_TTL_SECONDS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Currency Converter"
    debug: bool = False
    version: str = "1.0.0"

    # Exchange rates / caching
    rates_cache_ttl_seconds: int = 600  # 10 minutes
    exchange_api_base_url: AnyHttpUrl = "https://v6.exchangerate-api.com/v6"
    exchange_api_key: str = "YOUR_API_KEY"
    http_timeout_seconds: float = 10.0

    # Allowed: 'mock' (built-in tables), 'exchangerate-api' (remote HTTP provider)
    exchange_rate_provider: str = "mock"
    mock_latency_seconds: float = 0.3

    # Presentation
    display_locale: str = "pt-BR"
    supported_currencies: List[str] = ["USD", "EUR", "BRL", "GBP", "JPY"]

    def init_post_load(self) -> None:
        """Normalize and validate derived fields."""
        if self.exchange_rate_provider not in ALLOWED_RATE_PROVIDERS:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {ALLOWED_RATE_PROVIDERS}"
            )
        if self.display_locale not in ALLOWED_LOCALES:
            raise ValueError(
                f"Unsupported display_locale '{self.display_locale}'. Allowed: {ALLOWED_LOCALES}"
            )
        if self.rates_cache_ttl_seconds <= 0:
            raise ValueError("rates_cache_ttl_seconds must be positive")
        self.supported_currencies = [c.upper() for c in self.supported_currencies]

    @property
    def api_root(self) -> str:
        """Provider URL prefix including the API key segment."""
        return f"{str(self.exchange_api_base_url).rstrip('/')}/{self.exchange_api_key}"


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
