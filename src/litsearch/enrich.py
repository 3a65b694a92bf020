"""Attach Crossref metadata to papers that carry a DOI."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Sequence

from litsearch.backends.crossref import MetadataClient
from litsearch.models import Paper

logger = logging.getLogger(__name__)


class Enricher:
    def __init__(self, metadata: MetadataClient):
        self.metadata = metadata

    async def enrich(self, paper: Paper) -> Paper:
        """Return ``paper`` with its metadata looked up by DOI.

        Papers without a DOI come back unchanged and cost no request. A failed
        lookup leaves ``metadata`` as None.
        """
        if not paper.doi:
            return paper
        outcome = await self.metadata.fetch(paper.doi)
        if outcome.error:
            logger.debug("No metadata for %s: %s", paper.doi, outcome.error)
        return dataclasses.replace(paper, metadata=outcome.value)

    async def enrich_all(self, papers: Sequence[Paper]) -> list[Paper]:
        """Enrich every paper concurrently, keeping input order."""
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(self.enrich(p)) for p in papers]
        return [t.result() for t in tasks]
