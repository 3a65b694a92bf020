"""Semantic Scholar paper search."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from litsearch.backends.http import get
from litsearch.models import SCHOLAR, Outcome

logger = logging.getLogger(__name__)

S2_BASE = "https://api.semanticscholar.org/graph/v1"
PAPER_FIELDS = "title,authors,abstract,year,externalIds"


class SearchEnvelope(BaseModel):
    """Top level of a /paper/search response."""

    model_config = ConfigDict(extra="allow")

    total: Optional[int] = None
    # Records stay untyped; normalize_scholar degrades bad ones per record
    data: Optional[list[Any]] = None


class ScholarClient:
    """Keyword search against the Semantic Scholar Graph API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: Optional[str] = None,
        limit: int = 5,
    ):
        self.client = client
        self.api_key = api_key
        self.limit = limit

    def _headers(self) -> dict[str, str]:
        if self.api_key:
            return {"x-api-key": self.api_key}
        return {}

    async def search(self, query: str) -> Outcome[list[Any]]:
        """Return raw paper records, or an empty list on any failure."""
        fetched = await get(
            self.client,
            f"{S2_BASE}/paper/search",
            source=SCHOLAR,
            params={"query": query, "limit": self.limit, "fields": PAPER_FIELDS},
            headers=self._headers(),
        )
        if fetched.error:
            return Outcome([], fetched.error)

        try:
            envelope = SearchEnvelope.model_validate(fetched.value.json())
        except ValueError as e:
            # Covers both JSONDecodeError and pydantic's ValidationError
            reason = "schema" if isinstance(e, ValidationError) else "malformed"
            logger.warning("Semantic Scholar payload rejected (%s): %s", reason, e)
            return Outcome.failed([], SCHOLAR, reason, str(e))

        logger.debug("Semantic Scholar returned %d records for %r", len(envelope.data or []), query)
        return Outcome(envelope.data or [])
