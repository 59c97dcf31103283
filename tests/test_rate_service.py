import asyncio
from datetime import datetime, timezone

import pytest

from currency_converter.services.rates.errors import (
    MissingCurrencyError,
    RemoteError,
    RemoteErrorKind,
)


def run(coro):
    return asyncio.run(coro)


def test_cold_cache_issues_one_call_then_hits(service, provider):
    snap = run(service.get_rates("USD"))
    assert snap.cached is False
    assert snap.rates["BRL"] == 5.24
    assert provider.calls == ["USD"]

    again = run(service.get_rates("USD"))
    assert again.cached is True
    assert again.rates == snap.rates
    assert provider.calls == ["USD"]


def test_conversion_math_with_cached_table(service, provider):
    snap = run(service.get_rates("USD"))
    assert 100 * snap.rates["BRL"] == pytest.approx(524.0)
    run(service.get_rates("USD"))
    assert len(provider.calls) == 1


def test_stale_entry_refetches_exactly_once(service, provider, clock):
    run(service.get_rates("USD"))
    clock.advance(minutes=9)
    run(service.get_rates("USD"))
    assert len(provider.calls) == 1
    clock.advance(minutes=1)  # age == ttl
    snap = run(service.get_rates("USD"))
    assert snap.cached is False
    assert len(provider.calls) == 2


def test_freshness_follows_fetch_time(service, clock):
    assert service.is_fresh("USD") is False
    run(service.get_rates("USD"))
    assert service.is_fresh("USD") is True
    clock.advance(minutes=10)
    assert service.is_fresh("USD") is False


def test_base_code_is_normalised(service, provider):
    run(service.get_rates("usd"))
    run(service.get_rates("USD"))
    assert provider.calls == ["USD"]


def test_timestamp_comes_from_provider(service):
    snap = run(service.get_rates("USD"))
    assert snap.timestamp == datetime.fromtimestamp(1700000000, tz=timezone.utc)


def test_provider_failure_payload_raises_and_keeps_cache_empty(service, provider):
    provider.queued.append({"result": "error", "error-type": "invalid-key"})
    with pytest.raises(RemoteError) as ei:
        run(service.get_rates("USD"))
    assert ei.value.kind is RemoteErrorKind.INVALID_API_KEY
    assert ei.value.code == "invalid-key"
    assert service.cache.get("USD") is None
    assert not service.is_fresh("USD")


def test_failed_refresh_does_not_touch_stale_entry(service, provider, clock):
    run(service.get_rates("USD"))
    fetched_at = service.cache.get_entry("USD").fetched_at
    clock.advance(minutes=15)
    provider.queued.append({"result": "error", "error-type": "quota-reached"})
    with pytest.raises(RemoteError) as ei:
        run(service.get_rates("USD"))
    assert ei.value.kind is RemoteErrorKind.UNKNOWN_REMOTE_ERROR
    assert service.cache.get_entry("USD").fetched_at == fetched_at


def test_transport_error_propagates(service, provider):
    provider.queued.append(
        RemoteError(RemoteErrorKind.NETWORK_ERROR, "connection refused", base_currency="USD")
    )
    with pytest.raises(RemoteError) as ei:
        run(service.get_rates("USD"))
    assert ei.value.kind is RemoteErrorKind.NETWORK_ERROR
    assert "USD" not in service.cache


def test_malformed_success_payload_is_remote_error(service, provider):
    provider.queued.append({"result": "success", "conversion_rates": "nope"})
    with pytest.raises(RemoteError) as ei:
        run(service.get_rates("USD"))
    assert ei.value.kind is RemoteErrorKind.UNKNOWN_REMOTE_ERROR
    assert service.cache.get("USD") is None


def test_missing_status_field_is_failure(service, provider):
    provider.queued.append({"conversion_rates": {"BRL": 5.0}})
    with pytest.raises(RemoteError):
        run(service.get_rates("USD"))
    assert service.cache.get("USD") is None


def test_base_currency_maps_to_one(service, provider):
    provider.tables["GBP"] = {"USD": 1.27, "BRL": 6.64}
    snap = run(service.get_rates("GBP"))
    assert snap.rates["GBP"] == 1.0


def test_get_rate_missing_target(service):
    with pytest.raises(MissingCurrencyError) as ei:
        run(service.get_rate("USD", "XYZ"))
    assert ei.value.target_currency == "XYZ"
    assert ei.value.base_currency == "USD"


def test_get_rate_returns_rate_and_timestamp(service):
    rate, ts = run(service.get_rate("USD", "brl"))
    assert rate == 5.24
    assert ts.year == 2023


def test_concurrent_cold_calls_each_fetch(service, provider):
    async def both():
        return await asyncio.gather(service.get_rates("USD"), service.get_rates("USD"))

    first, second = run(both())
    assert first.rates == second.rates
    assert provider.calls == ["USD", "USD"]


def test_non_string_error_type_still_typed(service, provider):
    provider.queued.append({"result": "error", "error-type": ["invalid-key"]})
    with pytest.raises(RemoteError) as ei:
        run(service.get_rates("USD"))
    assert ei.value.kind is RemoteErrorKind.UNKNOWN_REMOTE_ERROR
    assert service.cache.get("USD") is None


def test_returned_table_cannot_alter_cache(service):
    snap = run(service.get_rates("USD"))
    with pytest.raises(TypeError):
        snap.rates["BRL"] = 999.0
    again = run(service.get_rates("USD"))
    assert again.cached is True
    assert again.rates["BRL"] == 5.24


@pytest.mark.parametrize("bad", [float("inf"), float("nan"), 0, -1.5])
def test_unusable_rates_are_dropped(service, provider, bad):
    provider.queued.append(
        {"result": "success", "conversion_rates": {"BRL": bad, "EUR": 0.92}}
    )
    snap = run(service.get_rates("USD"))
    assert "BRL" not in snap.rates
    assert snap.rates == {"EUR": 0.92, "USD": 1.0}
    with pytest.raises(MissingCurrencyError):
        run(service.get_rate("USD", "BRL"))
