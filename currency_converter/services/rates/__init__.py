"""Rate lookup: provider, cache, service and conversion."""

from .cache import CacheEntry, RateCache
from .conversion import ConversionResult, convert, swap
from .errors import (
    ConverterError,
    MissingCurrencyError,
    RemoteError,
    RemoteErrorKind,
    ValidationError,
)
from .service import RateService, RatesSnapshot

__all__ = [
    "CacheEntry",
    "RateCache",
    "ConversionResult",
    "convert",
    "swap",
    "ConverterError",
    "MissingCurrencyError",
    "RemoteError",
    "RemoteErrorKind",
    "ValidationError",
    "RateService",
    "RatesSnapshot",
]
