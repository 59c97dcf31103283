from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Dict, Mapping, Optional

"""In-memory rate cache keyed by base currency.

Each entry holds the full rate table for one base plus the local time it was
fetched. Freshness is judged when read; nothing is swept or evicted, a stale
entry just waits to be overwritten by the next successful fetch.
"""


@dataclass(frozen=True)
class CacheEntry:
    base_currency: str
    rates: Mapping[str, float]
    fetched_at: datetime
    provider_timestamp: Optional[datetime] = None

    @property
    def timestamp(self) -> datetime:
        """Provider update time when known, else local fetch time."""
        return self.provider_timestamp or self.fetched_at


class RateCache:
    def __init__(self) -> None:
        self._entries: Dict[str, CacheEntry] = {}
        self._last_fetch_time: Optional[datetime] = None

    @property
    def last_fetch_time(self) -> Optional[datetime]:
        return self._last_fetch_time

    def is_fresh(self, base_currency: str, now: datetime, ttl: timedelta) -> bool:
        entry = self._entries.get(base_currency.upper())
        if entry is None:
            return False
        return now - entry.fetched_at < ttl

    def get(self, base_currency: str) -> Optional[Mapping[str, float]]:
        entry = self._entries.get(base_currency.upper())
        return entry.rates if entry else None

    def get_entry(self, base_currency: str) -> Optional[CacheEntry]:
        return self._entries.get(base_currency.upper())

    def put(
        self,
        base_currency: str,
        rates: Mapping[str, float],
        fetched_at: datetime,
        provider_timestamp: Optional[datetime] = None,
    ) -> CacheEntry:
        base = base_currency.upper()
        # Whole-entry replacement; readers never see a partial table.
        # Tables are read-only views so callers cannot edit cached rates.
        entry = CacheEntry(
            base_currency=base,
            rates=MappingProxyType(dict(rates)),
            fetched_at=fetched_at,
            provider_timestamp=provider_timestamp,
        )
        self._entries[base] = entry
        self._last_fetch_time = fetched_at
        return entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, base_currency: object) -> bool:
        return isinstance(base_currency, str) and base_currency.upper() in self._entries
