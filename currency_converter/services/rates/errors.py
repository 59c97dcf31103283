from __future__ import annotations

"""Error taxonomy for rate lookup and conversion.

Every failure path in the rates package ends in one of these types so the
presentation layer can pick a message without inspecting exception text.
"""
from enum import Enum
from typing import Optional


class RemoteErrorKind(str, Enum):
    INVALID_API_KEY = "invalid_api_key"
    NETWORK_ERROR = "network_error"
    UNKNOWN_REMOTE_ERROR = "unknown_remote_error"


# Provider `error-type` values that mean the credentials are unusable.
_KEY_ERROR_TYPES = {"invalid-key", "inactive-account"}


class ConverterError(Exception):
    """Base class for all converter failures."""


class ValidationError(ConverterError):
    """Input amount or currency code rejected before any rate lookup."""


class MissingCurrencyError(ConverterError):
    def __init__(self, base_currency: str, target_currency: str):
        self.base_currency = base_currency
        self.target_currency = target_currency
        super().__init__(
            f"Currency {target_currency} not present in rate table for {base_currency}"
        )


class RemoteError(ConverterError):
    """Provider-signalled or transport failure while fetching rates."""

    def __init__(
        self,
        kind: RemoteErrorKind,
        message: str,
        *,
        code: Optional[str] = None,
        base_currency: Optional[str] = None,
    ):
        self.kind = kind
        self.code = code
        self.base_currency = base_currency
        super().__init__(message)

    @classmethod
    def from_provider(cls, error_type: Optional[object], base_currency: str) -> "RemoteError":
        # Malformed payloads may carry lists or numbers here
        error_type = str(error_type) if error_type is not None else None
        kind = (
            RemoteErrorKind.INVALID_API_KEY
            if error_type in _KEY_ERROR_TYPES
            else RemoteErrorKind.UNKNOWN_REMOTE_ERROR
        )
        return cls(
            kind,
            f"Provider reported failure for {base_currency}: {error_type or 'unknown'}",
            code=error_type,
            base_currency=base_currency,
        )


__all__ = [
    "ConverterError",
    "ValidationError",
    "MissingCurrencyError",
    "RemoteError",
    "RemoteErrorKind",
]
