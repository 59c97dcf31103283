"""Shared fixtures: counting fake provider, controllable clock, app client."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from currency_converter.core.config import Settings
from currency_converter.main import create_app
from currency_converter.services.rates.base import RateProvider
from currency_converter.services.rates.service import RateService

USD_TABLE = {"USD": 1.0, "BRL": 5.24, "EUR": 0.92}


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class CountingProvider(RateProvider):
    """Returns queued payloads (or a success payload per base) and records calls."""

    name = "counting"

    def __init__(self, tables: Dict[str, Dict[str, float]] | None = None):
        self.tables = tables if tables is not None else {"USD": dict(USD_TABLE)}
        self.calls: List[str] = []
        self.queued: List[Any] = []

    async def fetch_latest(self, base_currency: str) -> Dict[str, Any]:
        self.calls.append(base_currency)
        await asyncio.sleep(0)  # yield like a real fetch
        if self.queued:
            item = self.queued.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        table = self.tables.get(base_currency)
        if table is None:
            return {"result": "error", "error-type": "unsupported-code"}
        return {
            "result": "success",
            "base_code": base_currency,
            "time_last_update_unix": 1700000000,
            "conversion_rates": dict(table),
        }


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def provider() -> CountingProvider:
    return CountingProvider()


@pytest.fixture
def service(provider: CountingProvider, clock: FakeClock) -> RateService:
    return RateService(provider, ttl=timedelta(minutes=10), clock=clock)


@pytest.fixture
def settings() -> Settings:
    s = Settings(exchange_rate_provider="mock", mock_latency_seconds=0, display_locale="pt-BR")
    s.init_post_load()
    return s


@pytest.fixture
def client(settings: Settings, provider: CountingProvider) -> TestClient:
    app = create_app(settings_override=settings, provider_override=provider)
    with TestClient(app) as c:
        yield c
