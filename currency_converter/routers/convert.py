from fastapi import APIRouter, Depends, Query

from currency_converter.core.config import ALLOWED_LOCALES, Settings
from currency_converter.models.rates import ConversionOut, ErrorOut
from currency_converter.services.money import (
    format_currency,
    format_datetime,
    format_rate,
)
from currency_converter.services.rates.conversion import ConversionResult, convert
from currency_converter.services.rates.errors import ValidationError
from currency_converter.services.rates.service import RateService
from .deps import get_app_settings, get_rate_service

router = APIRouter(tags=["convert"])


def to_output(result: ConversionResult, locale: str) -> ConversionOut:
    return ConversionOut(
        amount=result.amount,
        from_currency=result.from_currency,
        to_currency=result.to_currency,
        rate=result.rate,
        result=result.result,
        timestamp=result.timestamp,
        formatted_result=format_currency(result.result, result.to_currency, locale),
        formatted_rate=format_rate(result.from_currency, result.to_currency, result.rate),
        formatted_timestamp=format_datetime(result.timestamp, locale),
    )


@router.get(
    "/convert",
    response_model=ConversionOut,
    summary="Convert an amount",
    responses={
        404: {"model": ErrorOut, "description": "Target currency missing from rate table"},
        422: {"model": ErrorOut, "description": "Invalid amount, currency code or locale"},
        502: {"model": ErrorOut, "description": "Rate provider failure"},
    },
)
async def convert_amount(
    amount: str = Query(..., description="Amount in the source currency"),
    from_currency: str = Query(..., alias="from", description="Source currency code"),
    to_currency: str = Query(..., alias="to", description="Target currency code"),
    locale: str | None = Query(None, description="Display locale (pt-BR or en-US)"),
    svc: RateService = Depends(get_rate_service),
    settings: Settings = Depends(get_app_settings),
):
    locale = locale or settings.display_locale
    if locale not in ALLOWED_LOCALES:
        raise ValidationError(f"Unsupported locale '{locale}'")
    result = await convert(amount, from_currency, to_currency, svc)
    return to_output(result, locale)
