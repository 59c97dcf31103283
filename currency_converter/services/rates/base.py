from __future__ import annotations

"""Rate provider abstraction.

A provider performs exactly one remote lookup per call and hands back the raw
`latest` payload; validation and caching belong to RateService.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict


class RateProvider(ABC):
    name: str = "abstract"

    @abstractmethod
    async def fetch_latest(self, base_currency: str) -> Dict[str, Any]:
        """Return the provider payload for `latest/{base_currency}`.

        Transport failures must be raised as RemoteError.
        """
        raise NotImplementedError
