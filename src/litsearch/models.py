"""Data models for aggregated search results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Literal, Optional, TypeVar

SCHOLAR = "Semantic Scholar"
ARXIV = "arXiv"

T = TypeVar("T")


@dataclass
class Paper:
    """A search result normalized from any source."""

    title: str = "Untitled"
    authors: list[str] = field(default_factory=list)
    abstract: str = ""
    year: Optional[int] = None
    doi: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    # Keyword-only with no default: every Paper names its source
    source: Literal["Semantic Scholar", "arXiv"] = field(kw_only=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "authors": list(self.authors),
            "abstract": self.abstract,
            "year": self.year,
            "doi": self.doi,
            "source": self.source,
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class UpstreamError:
    """Why a single upstream call produced no usable value."""

    source: str
    reason: str
    message: str = ""

    def __str__(self) -> str:
        if self.message:
            return f"{self.source}: {self.reason} ({self.message})"
        return f"{self.source}: {self.reason}"


@dataclass
class Outcome(Generic[T]):
    """A value that is always usable, plus the error that produced it, if any.

    On failure ``value`` holds the caller's default (an empty list, ``None``,
    a fallback string), so callers that only want the value can ignore
    ``error``. Callers that care can still tell "ran and got nothing" from
    "failed".
    """

    value: T
    error: Optional[UpstreamError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, default: T, source: str, reason: str, message: str = "") -> Outcome[T]:
        return cls(value=default, error=UpstreamError(source, reason, message))


@dataclass
class ArxivFeed:
    """Parsed arXiv Atom feed: the entry elements and the raw XML text."""

    entries: list[Any] = field(default_factory=list)
    raw: str = ""


@dataclass
class SourceStatus:
    """Per-branch status reported alongside the results."""

    ok: bool
    count: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: Outcome, count: Optional[int] = None) -> SourceStatus:
        return cls(
            ok=outcome.ok,
            count=count,
            error=outcome.error.reason if outcome.error else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ok": self.ok}
        if self.count is not None:
            data["count"] = self.count
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class RawData:
    """Upstream payloads echoed back for diagnostics."""

    arxiv: str = ""
    semantic: list[dict[str, Any]] = field(default_factory=list)
    crossref: list[Optional[dict[str, Any]]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "arxiv": self.arxiv,
            "semantic": self.semantic,
            "crossref": self.crossref,
        }


@dataclass
class SearchResponse:
    """Everything one search request produces."""

    results: list[Paper] = field(default_factory=list)
    summary: str = ""
    suggestions: list[str] = field(default_factory=list)
    raw_data: RawData = field(default_factory=RawData)
    sources: dict[str, SourceStatus] = field(default_factory=dict)
    success: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "results": [p.to_dict() for p in self.results],
            "summary": self.summary,
            "suggestions": list(self.suggestions),
            "rawData": self.raw_data.to_dict(),
            "sources": {name: s.to_dict() for name, s in self.sources.items()},
        }


class InvalidQueryError(ValueError):
    """The query was rejected before any network call."""

    kind = "invalid_input"
