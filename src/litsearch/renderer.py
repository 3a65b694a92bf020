"""Rich terminal renderer for aggregated search responses."""

from __future__ import annotations

import re

from rich.console import Console
from rich.text import Text

from litsearch.models import ARXIV, Paper, SearchResponse

console = Console()

SNIPPET_LENGTH = 300


def _detect_arxiv_id(url: str) -> str:
    """Try to extract an arxiv ID from an abs/pdf URL."""
    m = re.search(r"arxiv\.org/(?:abs|pdf)/(\d{4}\.\d{4,5}(?:v\d+)?)", url)
    return m.group(1) if m else ""


def _format_authors(authors: list[str]) -> str:
    names = authors[:3]
    if len(authors) > 3:
        names = names + ["et al."]
    return ", ".join(names)


def _metadata_line(paper: Paper) -> str:
    meta = paper.metadata or {}
    parts = []
    venue = meta.get("container-title")
    if isinstance(venue, list) and venue:
        parts.append(str(venue[0]))
    if meta.get("publisher"):
        parts.append(str(meta["publisher"]))
    if meta.get("is-referenced-by-count") is not None:
        parts.append(f"cited by {meta['is-referenced-by-count']}")
    return " | ".join(parts)


def render_paper(paper: Paper, ref: str) -> None:
    title_line = Text()
    title_line.append(f"[{ref}] ", style="bold cyan")
    title_line.append(paper.title, style="bold")
    console.print(title_line)

    meta_parts = [paper.source]
    if paper.authors:
        meta_parts.append(_format_authors(paper.authors))
    if paper.year:
        meta_parts.append(str(paper.year))
    console.print(Text(f"     {' | '.join(meta_parts)}", style="dim"))

    if paper.doi:
        label = "id" if paper.source == ARXIV else "doi"
        console.print(Text(f"     {label}: {paper.doi}", style="dim"))

    crossref = _metadata_line(paper)
    if crossref:
        console.print(Text(f"     {crossref}", style="dim"))

    if paper.abstract:
        snippet = paper.abstract[:SNIPPET_LENGTH]
        if len(paper.abstract) > SNIPPET_LENGTH:
            snippet += "..."
        console.print(Text(f"     {snippet}"))

    arxiv_id = _detect_arxiv_id(paper.doi or "") if paper.source == ARXIV else ""
    if arxiv_id:
        console.print(f"  > https://arxiv.org/pdf/{arxiv_id}", style="dim italic")

    console.print()


def render_response(response: SearchResponse) -> None:
    """Render results, summary and follow-up suggestions."""
    if not response.results:
        console.print("[yellow]No results found.[/yellow]")
    else:
        counts = {}
        for p in response.results:
            counts[p.source] = counts.get(p.source, 0) + 1
        breakdown = ", ".join(f"{n} from {src}" for src, n in counts.items())
        console.print(f"Found {len(response.results)} results ({breakdown})")
        console.print()
        for i, paper in enumerate(response.results, 1):
            render_paper(paper, f"r{i}")

    console.print("Summary", style="bold")
    console.print(Text(response.summary))
    console.print()

    for name, status in response.sources.items():
        if not status.ok:
            console.print(f"[yellow]{name} unavailable ({status.error})[/yellow]")

    if response.suggestions:
        console.print("Related searches", style="bold")
        for s in response.suggestions:
            console.print(Text(f'  > Use `litsearch search "{s}"` to refine', style="dim italic"))
        console.print()
