"""Crossref DOI metadata lookup."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from litsearch.backends.http import USER_AGENT, get
from litsearch.models import Outcome

logger = logging.getLogger(__name__)

CROSSREF_BASE = "https://api.crossref.org"
SOURCE = "Crossref"


class WorkEnvelope(BaseModel):
    """Top level of a /works/{doi} response."""

    model_config = ConfigDict(extra="allow")

    status: Optional[str] = None
    message: dict[str, Any]


class MetadataClient:
    """Fetch the Crossref work record for a DOI."""

    def __init__(self, client: httpx.AsyncClient, *, mailto: Optional[str] = None):
        self.client = client
        self.mailto = mailto

    def _headers(self) -> dict[str, str]:
        if self.mailto:
            # Crossref routes requests carrying a contact to its polite pool
            return {"User-Agent": f"{USER_AGENT} (mailto:{self.mailto})"}
        return {}

    async def fetch(self, doi: Optional[str]) -> Outcome[Optional[dict[str, Any]]]:
        """Return the work's ``message`` object, or None."""
        if not doi:
            return Outcome(None)

        fetched = await get(
            self.client,
            f"{CROSSREF_BASE}/works/{urllib.parse.quote(doi, safe='/')}",
            source=SOURCE,
            headers=self._headers(),
        )
        if fetched.error:
            return Outcome(None, fetched.error)

        try:
            envelope = WorkEnvelope.model_validate(fetched.value.json())
        except ValueError as e:
            reason = "schema" if isinstance(e, ValidationError) else "malformed"
            logger.warning("Crossref payload for %s rejected (%s): %s", doi, reason, e)
            return Outcome.failed(None, SOURCE, reason, str(e))

        return Outcome(envelope.message)
