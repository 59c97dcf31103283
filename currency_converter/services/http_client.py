from __future__ import annotations

"""Async HTTP helper for rate providers.

Single GET returning decoded JSON. No retries: any transport problem, non-2xx
status or undecodable body surfaces as HttpError and the caller decides.
"""
from typing import Any, Dict, Optional

import httpx


class HttpError(Exception):
    def __init__(
        self,
        message: str,
        *,
        network: bool = False,
        status: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.network = network
        self.status = status
        # Error bodies often still carry the provider's JSON explanation
        self.payload = payload


def _safe_json(resp: httpx.Response) -> Optional[Dict[str, Any]]:
    try:
        data = resp.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


async def get_json(
    url: str,
    *,
    timeout: float = 10.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.get(url)
    except httpx.DecodingError as e:  # body arrived but could not be decoded
        raise HttpError(f"Undecodable body from {url}: {e}") from e
    except httpx.RequestError as e:  # connect errors, timeouts, protocol errors
        raise HttpError(f"Failed to reach {url}: {e}", network=True) from e
    if resp.status_code >= 400:
        raise HttpError(
            f"HTTP {resp.status_code} for {url}",
            status=resp.status_code,
            payload=_safe_json(resp),
        )
    try:
        data = resp.json()
    except ValueError as e:  # JSON decode
        raise HttpError(f"Malformed JSON from {url}: {e}", status=resp.status_code) from e
    if not isinstance(data, dict):
        raise HttpError(f"Unexpected JSON payload from {url}", status=resp.status_code)
    return data
