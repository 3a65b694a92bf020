"""Shared async HTTP client and single-attempt GET helper."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from litsearch.config import Settings
from litsearch.models import Outcome

logger = logging.getLogger(__name__)

USER_AGENT = "litsearch/0.1"


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the connection-pooled client shared by every backend."""
    return httpx.AsyncClient(
        timeout=settings.api_timeout,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    )


async def get(
    client: httpx.AsyncClient,
    url: str,
    *,
    source: str,
    params: Optional[dict] = None,
    headers: Optional[dict[str, str]] = None,
) -> Outcome[Optional[httpx.Response]]:
    """GET once; never raises for timeouts, transport errors or non-2xx."""
    try:
        resp = await client.get(url, params=params, headers=headers)
        resp.raise_for_status()
    except httpx.TimeoutException as e:
        logger.warning("%s request timed out: %s", source, e)
        return Outcome.failed(None, source, "timeout", str(e))
    except httpx.HTTPStatusError as e:
        logger.warning("%s returned HTTP %s", source, e.response.status_code)
        return Outcome.failed(None, source, "http_status", str(e.response.status_code))
    except httpx.HTTPError as e:
        logger.warning("%s request failed: %s", source, e)
        return Outcome.failed(None, source, "transport", str(e))
    return Outcome(resp)
