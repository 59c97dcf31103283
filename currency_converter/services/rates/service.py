from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
import logging
import math

from currency_converter.core.config import Settings
from .base import RateProvider
from .cache import CacheEntry, RateCache
from .errors import MissingCurrencyError, RemoteError, RemoteErrorKind
from .providers import make_rate_provider

"""Rate service: cache-first lookup of whole rate tables per base currency.

Flow per get_rates() call:
    - Fresh cache entry -> return it, no provider call.
    - Otherwise exactly one provider call. A payload with result == "success"
      and a usable `conversion_rates` mapping is cached and returned; anything
      else raises RemoteError and leaves the cache untouched.

Concurrent callers with a cold cache each issue their own provider call.
"""

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RatesSnapshot:
    base_currency: str
    rates: Mapping[str, float]
    timestamp: datetime
    cached: bool

    @classmethod
    def from_entry(cls, entry: CacheEntry, cached: bool) -> "RatesSnapshot":
        return cls(
            base_currency=entry.base_currency,
            rates=entry.rates,
            timestamp=entry.timestamp,
            cached=cached,
        )


def _parse_rates(payload: Dict[str, Any], base_currency: str) -> Dict[str, float]:
    raw = payload.get("conversion_rates")
    if not isinstance(raw, dict) or not raw:
        raise RemoteError(
            RemoteErrorKind.UNKNOWN_REMOTE_ERROR,
            f"Malformed payload for {base_currency}: missing conversion_rates",
            base_currency=base_currency,
        )
    rates: Dict[str, float] = {}
    for code, value in raw.items():
        try:
            rate = float(value)
        except (TypeError, ValueError):
            raise RemoteError(
                RemoteErrorKind.UNKNOWN_REMOTE_ERROR,
                f"Malformed rate for {code} in {base_currency} table: {value!r}",
                base_currency=base_currency,
            ) from None
        # Non-positive or non-finite factors are unusable for conversion; drop them
        if math.isfinite(rate) and rate > 0:
            rates[str(code).upper()] = rate
    rates[base_currency] = 1.0
    return rates


def _parse_timestamp(payload: Dict[str, Any]) -> Optional[datetime]:
    value = payload.get("time_last_update_unix")
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


class RateService:
    """Cached rate lookup in front of a RateProvider.

    Owns its RateCache; build one service per application (or per test).
    """

    def __init__(
        self,
        provider: RateProvider,
        *,
        ttl: timedelta = timedelta(minutes=10),
        cache: Optional[RateCache] = None,
        clock: Clock = utcnow,
    ):
        self._provider = provider
        self._ttl = ttl
        self._cache = cache if cache is not None else RateCache()
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "RateService":
        return cls(
            make_rate_provider(settings),
            ttl=timedelta(seconds=settings.rates_cache_ttl_seconds),
        )

    @property
    def cache(self) -> RateCache:
        return self._cache

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def is_fresh(self, base_currency: str) -> bool:
        return self._cache.is_fresh(base_currency, self._clock(), self._ttl)

    async def get_rates(self, base_currency: str) -> RatesSnapshot:
        base = base_currency.upper()
        if self._cache.is_fresh(base, self._clock(), self._ttl):
            entry = self._cache.get_entry(base)
            if entry is not None:
                logger.debug("rate cache hit for %s", base, extra={"base_currency": base, "cached": True})
                return RatesSnapshot.from_entry(entry, cached=True)

        logger.info(
            "rate cache miss for %s; fetching",
            base,
            extra={"base_currency": base, "provider": self._provider.name},
        )
        try:
            payload = await self._provider.fetch_latest(base)
        except RemoteError as e:
            logger.warning(
                "rate fetch for %s failed: %s",
                base,
                e,
                extra={"base_currency": base, "error_kind": e.kind.value},
            )
            raise

        if payload.get("result") != "success":
            err = RemoteError.from_provider(payload.get("error-type"), base)
            logger.warning(
                "provider rejected %s: %s",
                base,
                err.code,
                extra={"base_currency": base, "error_kind": err.kind.value},
            )
            raise err

        rates = _parse_rates(payload, base)
        entry = self._cache.put(
            base,
            rates,
            fetched_at=self._clock(),
            provider_timestamp=_parse_timestamp(payload),
        )
        logger.info(
            "cached %d rates for %s", len(rates), base, extra={"base_currency": base}
        )
        return RatesSnapshot.from_entry(entry, cached=False)

    async def get_rate(self, base_currency: str, target_currency: str) -> Tuple[float, datetime]:
        snapshot = await self.get_rates(base_currency)
        target = target_currency.upper()
        rate = snapshot.rates.get(target)
        if rate is None:
            raise MissingCurrencyError(snapshot.base_currency, target)
        return rate, snapshot.timestamp
