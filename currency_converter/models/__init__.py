"""Pydantic API models for the currency converter."""

from .rates import ConversionOut, ErrorOut, FreshnessOut, RatesOut

__all__ = [
    "ConversionOut",
    "ErrorOut",
    "FreshnessOut",
    "RatesOut",
]
