from pathlib import Path
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from currency_converter.core.config import Settings
from currency_converter.core.errors import GENERIC_FAILURE, remote_hint
from currency_converter.services.money import (
    format_currency,
    format_datetime,
    format_rate,
)
from currency_converter.services.rates.conversion import convert, swap
from currency_converter.services.rates.errors import (
    MissingCurrencyError,
    RemoteError,
    ValidationError,
)
from currency_converter.services.rates.service import RateService
from .deps import get_app_settings, get_rate_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ui"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


def _form_context(
    request: Request,
    settings: Settings,
    amount: str = "1",
    from_currency: str = "USD",
    to_currency: str = "BRL",
) -> Dict[str, Any]:
    return {
        "request": request,
        "version": settings.version,
        "currencies": settings.supported_currencies,
        "amount": amount,
        "from_currency": from_currency,
        "to_currency": to_currency,
        "result": None,
        "error": None,
    }


@router.get("/", response_class=HTMLResponse)
async def ui_home(request: Request, settings: Settings = Depends(get_app_settings)):
    return templates.TemplateResponse(request, "converter.html", _form_context(request, settings))


@router.post("/", response_class=HTMLResponse)
async def ui_convert(
    request: Request,
    amount: str = Form(""),
    from_currency: str = Form("USD"),
    to_currency: str = Form("BRL"),
    action: Optional[str] = Form(None),
    svc: RateService = Depends(get_rate_service),
    settings: Settings = Depends(get_app_settings),
):
    if action == "swap":
        from_currency, to_currency = swap(from_currency, to_currency)
    context = _form_context(request, settings, amount, from_currency, to_currency)
    if action == "swap" and not amount.strip():
        # Nothing to reconvert yet; just show the swapped pair
        return templates.TemplateResponse(request, "converter.html", context)
    locale = settings.display_locale
    try:
        result = await convert(amount, from_currency, to_currency, svc)
    except ValidationError as e:
        context["error"] = {"message": str(e), "hint": None}
    except MissingCurrencyError as e:
        context["error"] = {"message": GENERIC_FAILURE, "hint": str(e)}
    except RemoteError as e:
        logger.warning("conversion failed (%s): %s", e.kind.value, e)
        context["error"] = {"message": GENERIC_FAILURE, "hint": remote_hint(e)}
    else:
        context["result"] = {
            "converted": format_currency(result.result, result.to_currency, locale),
            "rate": format_rate(result.from_currency, result.to_currency, result.rate),
            "updated": format_datetime(result.timestamp, locale),
        }
    return templates.TemplateResponse(request, "converter.html", context)
