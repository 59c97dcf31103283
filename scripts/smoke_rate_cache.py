"""Smoke script for the rate cache.

Demonstrates:
 1. First access triggers a provider fetch.
 2. Second access within TTL is served from cache (same fetched_at).
 3. Backdating the entry past TTL forces a refresh.

Uses the configured provider (mock by default). NOTE: This is a lightweight
diagnostic and not a formal test.
"""

import asyncio
from datetime import timedelta
from pprint import pprint

from currency_converter.core.config import get_settings
from currency_converter.services.rates.service import RateService


async def run():
    svc = RateService.from_settings(get_settings())
    out = {}

    for label in ("initial", "second"):
        snap = await svc.get_rates("USD")
        out[label] = {
            "cached": snap.cached,
            "BRL": snap.rates.get("BRL"),
            "fetched_at": svc.cache.get_entry("USD").fetched_at.isoformat(),
        }

    entry = svc.cache.get_entry("USD")
    svc.cache.put(
        "USD",
        entry.rates,
        fetched_at=entry.fetched_at - svc.ttl - timedelta(seconds=5),
        provider_timestamp=entry.provider_timestamp,
    )
    snap = await svc.get_rates("USD")
    out["forced_refresh"] = {
        "cached": snap.cached,
        "BRL": snap.rates.get("BRL"),
        "fetched_at": svc.cache.get_entry("USD").fetched_at.isoformat(),
    }

    pprint(out)


if __name__ == "__main__":
    asyncio.run(run())
