"""arXiv search via the Atom export API."""

from __future__ import annotations

import logging
from xml.etree import ElementTree

import httpx

from litsearch.backends.http import get
from litsearch.models import ARXIV, ArxivFeed, Outcome

logger = logging.getLogger(__name__)

ARXIV_API_URL = "http://export.arxiv.org/api/query"
ATOM = "http://www.w3.org/2005/Atom"
ATOM_NS = {"atom": ATOM, "arxiv": "http://arxiv.org/schemas/atom"}


def parse_feed(xml_text: str) -> list[ElementTree.Element]:
    """Parse an Atom feed and return its <entry> elements.

    Raises ElementTree.ParseError for invalid XML and ValueError when the
    document is well-formed but not an Atom feed.
    """
    root = ElementTree.fromstring(xml_text)
    if root.tag != f"{{{ATOM}}}feed":
        raise ValueError(f"unexpected root element {root.tag!r}")
    return root.findall("atom:entry", ATOM_NS)


class ArxivClient:
    """Query arXiv and hand back the parsed entry tree."""

    def __init__(self, client: httpx.AsyncClient, *, max_results: int = 5):
        self.client = client
        self.max_results = max_results

    async def search(self, query: str) -> Outcome[ArxivFeed]:
        """Return the feed's entries, or an empty feed on any failure."""
        fetched = await get(
            self.client,
            ARXIV_API_URL,
            source=ARXIV,
            params={"search_query": query, "start": 0, "max_results": self.max_results},
        )
        if fetched.error:
            return Outcome(ArxivFeed(), fetched.error)

        xml_text = fetched.value.text
        try:
            entries = parse_feed(xml_text)
        except (ElementTree.ParseError, ValueError) as e:
            logger.warning("arXiv returned an unreadable feed: %s", e)
            return Outcome.failed(ArxivFeed(), ARXIV, "malformed", str(e))

        logger.debug("arXiv returned %d entries for %r", len(entries), query)
        return Outcome(ArxivFeed(entries=entries, raw=xml_text))
