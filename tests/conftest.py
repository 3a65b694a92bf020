"""Shared fakes: a recording HTTP upstream and a scripted completion client."""

from typing import Callable, Optional

import httpx
import pytest

from litsearch.models import Outcome

S2_HOST = "api.semanticscholar.org"
ARXIV_HOST = "export.arxiv.org"
CROSSREF_HOST = "api.crossref.org"

ARXIV_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>ArXiv Query</title>
  <entry>
    <id>http://arxiv.org/abs/2101.00001v1</id>
    <published>2021-01-04T18:59:59Z</published>
    <title>Quantum Error Correction:
      A Survey</title>
    <summary>
      We survey surface codes.
    </summary>
    <author><name>Alice Smith</name></author>
    <author><name>Bob Jones</name></author>
  </entry>
</feed>"""

EMPTY_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom"><title>ArXiv Query</title></feed>"""

S2_PAPERS = [
    {
        "paperId": "p1",
        "title": "Quantum Computing in the NISQ era",
        "abstract": "  Noisy intermediate-scale quantum devices.  ",
        "year": 2018,
        "authors": [{"authorId": "1", "name": "John Preskill"}],
        "externalIds": {"DOI": "10.22331/q-2018-08-06-79"},
    },
    {
        "paperId": "p2",
        "title": "Qubits without a DOI",
        "abstract": None,
        "year": None,
        "authors": [],
        "externalIds": {},
    },
]

CROSSREF_WORK = {
    "DOI": "10.22331/q-2018-08-06-79",
    "publisher": "Verein zur Förderung des Open Access Publizierens",
    "container-title": ["Quantum"],
    "is-referenced-by-count": 5000,
}


class Upstream:
    """MockTransport handler that routes by host and records every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def route(self, host: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[host] = handler

    def json(self, host: str, payload, status_code: int = 200) -> None:
        self.route(host, lambda request: httpx.Response(status_code, json=payload))

    def text(self, host: str, body: str, status_code: int = 200) -> None:
        self.route(host, lambda request: httpx.Response(status_code, text=body))

    def hits(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.host)
        if handler is None:
            return httpx.Response(404, json={"error": "not routed"})
        return handler(request)


class FakeCompletions:
    """Scripted CompletionClient; replies are keyed by model name."""

    def __init__(self, replies: Optional[dict] = None):
        self.replies = replies or {}
        self.calls: list[dict] = []

    async def complete(self, model, messages, *, temperature=None, max_tokens=None):
        self.calls.append({
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        reply = self.replies.get(model)
        if isinstance(reply, Outcome):
            return reply
        if reply is None:
            return Outcome.failed(None, "OpenRouter", "http_status", "500")
        return Outcome(reply)

    def calls_for(self, model: str) -> list[dict]:
        return [c for c in self.calls if c["model"] == model]


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
async def http_client(upstream):
    async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as client:
        yield client
