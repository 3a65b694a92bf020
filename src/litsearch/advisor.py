"""LLM-backed query suggestions and result summaries.

Both operations are best-effort: an upstream or parse failure is logged and
turned into a fallback value, never raised.
"""

from __future__ import annotations

import json
import logging
from typing import Sequence

from litsearch.backends.openrouter import SOURCE, CompletionClient
from litsearch.config import DEFAULT_SUGGEST_MODEL, DEFAULT_SUMMARY_MODEL
from litsearch.models import Outcome, Paper

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3
SUMMARY_FALLBACK = "Summary unavailable due to API error"
EMPTY_CORPUS_SUMMARY = "No papers found to summarize"

SUGGEST_SYSTEM_PROMPT = (
    "You're a research assistant. Suggest 3 better search queries based on the "
    "user's input. Respond only with a JSON array of suggestions, no explanations."
)
SUMMARY_PROMPT_TEMPLATE = "Summarize these research papers in simple terms:\n\n{corpus}"


def strip_code_fences(content: str) -> str:
    """Remove ```json / ``` markers the model wraps around JSON."""
    return content.replace("```json", "").replace("```", "").strip()


def parse_suggestions(content: str) -> list[str]:
    """Parse the model's JSON array. Raises ValueError when it isn't one."""
    data = json.loads(strip_code_fences(content))
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")
    return [s for s in data if isinstance(s, str) and s.strip()][:MAX_SUGGESTIONS]


def build_corpus(papers: Sequence[Paper]) -> str:
    """Join each paper's title and abstract, separated by blank lines."""
    return "\n\n".join(f"{p.title}\n{p.abstract}" for p in papers)


class Advisor:
    def __init__(
        self,
        completions: CompletionClient,
        *,
        suggest_model: str = DEFAULT_SUGGEST_MODEL,
        summary_model: str = DEFAULT_SUMMARY_MODEL,
    ):
        self.completions = completions
        self.suggest_model = suggest_model
        self.summary_model = summary_model

    async def suggest(self, query: str) -> Outcome[list[str]]:
        """Ask for up to three alternative queries."""
        reply = await self.completions.complete(
            self.suggest_model,
            [
                {"role": "system", "content": SUGGEST_SYSTEM_PROMPT},
                {"role": "user", "content": f"Original query: {query}"},
            ],
            temperature=0.7,
            max_tokens=100,
        )
        if reply.error:
            return Outcome([], reply.error)

        try:
            suggestions = parse_suggestions(reply.value or "")
        except ValueError as e:
            logger.warning("Could not parse suggestions: %s", e)
            return Outcome.failed([], SOURCE, "malformed", str(e))
        return Outcome(suggestions)

    async def summarize(self, corpus: str) -> Outcome[str]:
        """Summarize the concatenated titles and abstracts."""
        reply = await self.completions.complete(
            self.summary_model,
            [{"role": "user", "content": SUMMARY_PROMPT_TEMPLATE.format(corpus=corpus)}],
        )
        if reply.error:
            return Outcome(SUMMARY_FALLBACK, reply.error)
        return Outcome(reply.value)
