from datetime import datetime, timedelta, timezone

from currency_converter.services.rates.cache import RateCache

T0 = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
TTL = timedelta(minutes=10)


def test_empty_cache_is_never_fresh():
    cache = RateCache()
    assert cache.is_fresh("USD", T0, TTL) is False
    assert cache.get("USD") is None
    assert cache.last_fetch_time is None


def test_fresh_until_ttl_then_stale():
    cache = RateCache()
    cache.put("USD", {"USD": 1.0, "BRL": 5.24}, fetched_at=T0)
    assert cache.is_fresh("USD", T0, TTL)
    assert cache.is_fresh("USD", T0 + timedelta(minutes=9, seconds=59), TTL)
    # age == ttl counts as stale
    assert not cache.is_fresh("USD", T0 + TTL, TTL)
    assert not cache.is_fresh("USD", T0 + timedelta(hours=2), TTL)
    # stale entries stay readable
    assert cache.get("USD") == {"USD": 1.0, "BRL": 5.24}


def test_put_overwrites_and_tracks_last_fetch():
    cache = RateCache()
    cache.put("usd", {"BRL": 5.0}, fetched_at=T0)
    later = T0 + timedelta(minutes=30)
    cache.put("USD", {"BRL": 5.5}, fetched_at=later)
    assert cache.get("USD") == {"BRL": 5.5}
    assert cache.get_entry("usd").fetched_at == later
    assert cache.last_fetch_time == later
    assert len(cache) == 1
    assert "usd" in cache


def test_entries_are_per_base_currency():
    cache = RateCache()
    cache.put("USD", {"BRL": 5.24}, fetched_at=T0)
    assert cache.is_fresh("USD", T0, TTL)
    assert not cache.is_fresh("EUR", T0, TTL)


def test_stored_table_is_a_copy():
    cache = RateCache()
    table = {"BRL": 5.24}
    cache.put("USD", table, fetched_at=T0)
    table["BRL"] = 99.0
    assert cache.get("USD") == {"BRL": 5.24}


def test_entry_timestamp_prefers_provider_time():
    cache = RateCache()
    provider_time = T0 - timedelta(hours=3)
    entry = cache.put("USD", {"BRL": 5.24}, fetched_at=T0, provider_timestamp=provider_time)
    assert entry.timestamp == provider_time
    entry = cache.put("EUR", {"BRL": 5.7}, fetched_at=T0)
    assert entry.timestamp == T0
