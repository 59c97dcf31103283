from __future__ import annotations
import math
from datetime import datetime
from typing import Dict, Optional
from pydantic import BaseModel, Field, field_validator


class RatesOut(BaseModel):
    base: str
    rates: Dict[str, float]
    timestamp: datetime
    cached: bool
    fresh: bool

    @field_validator("rates")
    @classmethod
    def positive_rates(cls, v: Dict[str, float]) -> Dict[str, float]:
        if any(not math.isfinite(rate) or rate <= 0 for rate in v.values()):
            raise ValueError("rates must be positive and finite")
        return v


class FreshnessOut(BaseModel):
    base: str
    fresh: bool
    fetched_at: Optional[datetime] = None
    ttl_seconds: int


class ConversionOut(BaseModel):
    amount: float = Field(..., gt=0)
    from_currency: str
    to_currency: str
    rate: float = Field(..., gt=0)
    result: float
    timestamp: datetime
    formatted_result: str
    formatted_rate: str
    formatted_timestamp: str


class ErrorOut(BaseModel):
    error: str
    detail: str
