from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, Tuple
import math
import re

from .errors import ValidationError

"""Amount conversion on top of the rate service.

Responsibilities:
    - Validate the raw amount and currency codes.
    - Short-circuit same-currency conversions (rate 1, no rate lookup).
    - Multiply by the looked-up rate; rounding is left to display code.
"""

_CODE_RE = re.compile(r"^[A-Z]{3}$")


class SupportsRateLookup(Protocol):
    async def get_rate(
        self, base_currency: str, target_currency: str
    ) -> Tuple[float, datetime]: ...


@dataclass(frozen=True)
class ConversionResult:
    amount: float
    from_currency: str
    to_currency: str
    rate: float
    result: float
    timestamp: datetime


def parse_amount(raw: Any) -> float:
    if raw is None or isinstance(raw, bool):
        raise ValidationError("Please enter a valid amount")
    if isinstance(raw, str):
        # Accept decimal comma as typed in pt-BR forms
        raw = raw.strip().replace(",", ".")
    try:
        amount = float(raw)
    except (TypeError, ValueError):
        raise ValidationError("Please enter a valid amount") from None
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Please enter a valid amount")
    return amount


def normalize_code(code: Optional[str]) -> str:
    value = (code or "").strip().upper()
    if not _CODE_RE.match(value):
        raise ValidationError(f"Invalid currency code '{code}'")
    return value


def swap(from_currency: str, to_currency: str) -> Tuple[str, str]:
    return to_currency, from_currency


async def convert(
    amount: Any,
    from_currency: str,
    to_currency: str,
    rate_service: SupportsRateLookup,
    *,
    now: Optional[datetime] = None,
) -> ConversionResult:
    value = parse_amount(amount)
    src = normalize_code(from_currency)
    dst = normalize_code(to_currency)
    if src == dst:
        return ConversionResult(
            amount=value,
            from_currency=src,
            to_currency=dst,
            rate=1.0,
            result=value,
            timestamp=now or datetime.now(timezone.utc),
        )
    rate, timestamp = await rate_service.get_rate(src, dst)
    return ConversionResult(
        amount=value,
        from_currency=src,
        to_currency=dst,
        rate=rate,
        result=value * rate,
        timestamp=timestamp,
    )
