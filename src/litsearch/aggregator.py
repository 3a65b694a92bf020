"""Fan a query out to every source and assemble one response."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

import httpx

from litsearch.advisor import EMPTY_CORPUS_SUMMARY, Advisor, build_corpus
from litsearch.backends.arxiv import ArxivClient
from litsearch.backends.crossref import MetadataClient
from litsearch.backends.openrouter import SOURCE as OPENROUTER, OpenRouterClient
from litsearch.backends.semanticscholar import ScholarClient
from litsearch.config import Settings
from litsearch.enrich import Enricher
from litsearch.models import (
    ARXIV,
    SCHOLAR,
    ArxivFeed,
    InvalidQueryError,
    Outcome,
    RawData,
    SearchResponse,
    SourceStatus,
)
from litsearch.normalize import normalize

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_QUERY_LENGTH = 3


def validate_query(text: object) -> str:
    """Return the trimmed query, or raise InvalidQueryError."""
    prompt = text.strip() if isinstance(text, str) else ""
    if len(prompt) < MIN_QUERY_LENGTH:
        raise InvalidQueryError(f"Please enter at least {MIN_QUERY_LENGTH} characters")
    return prompt


async def _soft_timeout(
    work: Awaitable[Outcome[T]],
    *,
    default: T,
    source: str,
    timeout: Optional[float],
) -> Outcome[T]:
    """Resolve to ``default`` if a branch runs past ``timeout`` seconds."""
    try:
        return await asyncio.wait_for(work, timeout)
    except TimeoutError:
        logger.warning("%s branch exceeded %ss, continuing without it", source, timeout)
        return Outcome.failed(default, source, "timeout", f"branch exceeded {timeout}s")


class Aggregator:
    """Run sources, enrichment and the advisor for one query at a time."""

    def __init__(
        self,
        scholar: ScholarClient,
        arxiv: ArxivClient,
        enricher: Enricher,
        advisor: Advisor,
        *,
        branch_timeout: Optional[float] = None,
    ):
        self.scholar = scholar
        self.arxiv = arxiv
        self.enricher = enricher
        self.advisor = advisor
        self.branch_timeout = branch_timeout

    async def search(self, text: object) -> SearchResponse:
        """Search every source for ``text``.

        Raises InvalidQueryError before any request when the query is too
        short. Upstream failures never raise; they degrade to empty results
        and are reported in ``SearchResponse.sources``.
        """
        query = validate_query(text)
        logger.info("Searching for %r", query)

        async with asyncio.TaskGroup() as tg:
            scholar_task = tg.create_task(
                _soft_timeout(
                    self.scholar.search(query),
                    default=[],
                    source=SCHOLAR,
                    timeout=self.branch_timeout,
                )
            )
            arxiv_task = tg.create_task(
                _soft_timeout(
                    self.arxiv.search(query),
                    default=ArxivFeed(),
                    source=ARXIV,
                    timeout=self.branch_timeout,
                )
            )
            suggest_task = tg.create_task(
                _soft_timeout(
                    self.advisor.suggest(query),
                    default=[],
                    source=OPENROUTER,
                    timeout=self.branch_timeout,
                )
            )

        scholar = scholar_task.result()
        arxiv = arxiv_task.result()
        suggestions = suggest_task.result()

        scholar_papers = await self.enricher.enrich_all(
            [normalize(raw, SCHOLAR) for raw in scholar.value]
        )
        arxiv_papers = [normalize(entry, ARXIV) for entry in arxiv.value.entries]
        results = scholar_papers + arxiv_papers

        if results:
            summary = await self.advisor.summarize(build_corpus(results))
        else:
            summary = Outcome(EMPTY_CORPUS_SUMMARY)

        logger.info(
            "Found %d papers for %r (%d Semantic Scholar, %d arXiv)",
            len(results), query, len(scholar_papers), len(arxiv_papers),
        )
        return SearchResponse(
            results=results,
            summary=summary.value,
            suggestions=suggestions.value,
            raw_data=RawData(
                arxiv=arxiv.value.raw,
                semantic=scholar.value,
                crossref=[p.metadata for p in scholar_papers],
            ),
            sources={
                "semantic": SourceStatus.from_outcome(scholar, len(scholar_papers)),
                "arxiv": SourceStatus.from_outcome(arxiv, len(arxiv_papers)),
                "suggestions": SourceStatus.from_outcome(suggestions, len(suggestions.value)),
                "summary": SourceStatus.from_outcome(summary),
            },
        )


def build_aggregator(settings: Settings, http_client: httpx.AsyncClient) -> Aggregator:
    """Wire every client around one shared HTTP client."""
    advisor = Advisor(
        OpenRouterClient(
            http_client,
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
        ),
        suggest_model=settings.suggest_model,
        summary_model=settings.summary_model,
    )
    return Aggregator(
        scholar=ScholarClient(
            http_client, api_key=settings.s2_api_key, limit=settings.max_results
        ),
        arxiv=ArxivClient(http_client, max_results=settings.max_results),
        enricher=Enricher(MetadataClient(http_client, mailto=settings.crossref_mailto)),
        advisor=advisor,
        branch_timeout=settings.branch_timeout,
    )
