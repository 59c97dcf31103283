from __future__ import annotations

from fastapi import APIRouter, Depends

from currency_converter.models.rates import ErrorOut, FreshnessOut, RatesOut
from currency_converter.services.rates.conversion import normalize_code
from currency_converter.services.rates.service import RateService
from .deps import get_rate_service

"""Rates router exposing the cached rate tables.

Endpoints:
    - GET /rates/{base}            -> full table (cache-first)
    - GET /rates/{base}/freshness  -> whether the cached table is still within TTL
"""

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get(
    "/{base}",
    response_model=RatesOut,
    summary="Rate table for a base currency",
    responses={
        422: {"model": ErrorOut, "description": "Invalid currency code"},
        502: {"model": ErrorOut, "description": "Rate provider failure"},
    },
)
async def get_rates(base: str, svc: RateService = Depends(get_rate_service)):
    code = normalize_code(base)
    snapshot = await svc.get_rates(code)
    return RatesOut(
        base=snapshot.base_currency,
        rates=dict(snapshot.rates),
        timestamp=snapshot.timestamp,
        cached=snapshot.cached,
        fresh=svc.is_fresh(code),
    )


@router.get(
    "/{base}/freshness",
    response_model=FreshnessOut,
    summary="Check whether cached rates are still fresh",
)
async def get_freshness(base: str, svc: RateService = Depends(get_rate_service)):
    code = normalize_code(base)
    entry = svc.cache.get_entry(code)
    return FreshnessOut(
        base=code,
        fresh=svc.is_fresh(code),
        fetched_at=entry.fetched_at if entry else None,
        ttl_seconds=int(svc.ttl.total_seconds()),
    )
