from __future__ import annotations

"""Concrete rate providers and factory.

'mock' answers from built-in tables after a short simulated delay, so the app
works offline; 'exchangerate-api' talks to the v6 exchangerate-api.com endpoint.
Both return payloads shaped like the remote `latest` response.
"""
import asyncio
import logging
import time
from typing import Any, Dict, Optional

import httpx

from currency_converter.core.config import Settings
from currency_converter.services.http_client import HttpError, get_json
from .base import RateProvider
from .errors import RemoteError, RemoteErrorKind

logger = logging.getLogger(__name__)

_MOCK_RATES: Dict[str, Dict[str, float]] = {
    "USD": {"USD": 1.0, "EUR": 0.92, "BRL": 5.24, "GBP": 0.79, "JPY": 149.5},
    "EUR": {"USD": 1.09, "EUR": 1.0, "BRL": 5.7, "GBP": 0.86, "JPY": 162.5},
    "BRL": {"USD": 0.19, "EUR": 0.18, "BRL": 1.0, "GBP": 0.15, "JPY": 28.5},
    "GBP": {"USD": 1.27, "EUR": 1.16, "BRL": 6.64, "GBP": 1.0, "JPY": 189.2},
    "JPY": {"USD": 0.0067, "EUR": 0.0062, "BRL": 0.035, "GBP": 0.0053, "JPY": 1.0},
}


class MockRateProvider(RateProvider):
    name = "mock"

    def __init__(
        self,
        latency_seconds: float = 0.3,
        tables: Optional[Dict[str, Dict[str, float]]] = None,
    ):
        self._latency = latency_seconds
        self._tables = tables if tables is not None else _MOCK_RATES

    async def fetch_latest(self, base_currency: str) -> Dict[str, Any]:
        if self._latency > 0:
            await asyncio.sleep(self._latency)
        table = self._tables.get(base_currency.upper())
        if table is None:
            return {"result": "error", "error-type": "unsupported-code"}
        return {
            "result": "success",
            "base_code": base_currency.upper(),
            "time_last_update_unix": int(time.time()),
            "conversion_rates": dict(table),
        }


class ExchangeRateApiProvider(RateProvider):
    """HTTP provider for `GET {api_root}/latest/{BASE}`."""

    name = "exchangerate-api"

    def __init__(
        self,
        api_root: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_root = api_root.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def fetch_latest(self, base_currency: str) -> Dict[str, Any]:
        url = f"{self._api_root}/latest/{base_currency.upper()}"
        try:
            return await get_json(url, timeout=self._timeout, transport=self._transport)
        except HttpError as e:
            # A 4xx body may still explain itself (e.g. invalid-key)
            if e.payload and e.payload.get("error-type"):
                raise RemoteError.from_provider(
                    str(e.payload["error-type"]), base_currency
                ) from e
            kind = (
                RemoteErrorKind.NETWORK_ERROR
                if e.network
                else RemoteErrorKind.UNKNOWN_REMOTE_ERROR
            )
            if e.network:
                detail = "transport failure"
            elif e.status and e.status >= 400:
                detail = f"HTTP {e.status}"
            else:
                detail = "malformed response"
            logger.debug("rate fetch for %s failed: %s", base_currency, detail)
            raise RemoteError(
                kind,
                f"Could not fetch rates for {base_currency}: {detail}",
                code=str(e.status) if e.status and e.status >= 400 else None,
                base_currency=base_currency,
            ) from e


_PROVIDER_REGISTRY = {
    "mock": lambda s: MockRateProvider(latency_seconds=s.mock_latency_seconds),
    "exchangerate-api": lambda s: ExchangeRateApiProvider(
        s.api_root, timeout=s.http_timeout_seconds
    ),
}


def make_rate_provider(settings: Settings) -> RateProvider:
    factory = _PROVIDER_REGISTRY.get(settings.exchange_rate_provider)
    if not factory:
        raise ValueError(
            f"Unknown rate provider kind '{settings.exchange_rate_provider}'"
        )
    return factory(settings)
