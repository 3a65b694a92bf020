"""Tests for terminal rendering of search responses."""

from io import StringIO

from rich.console import Console

from litsearch.models import ARXIV, SCHOLAR, Paper, SearchResponse, SourceStatus
from litsearch.renderer import render_response


def _capture_output(render_fn, *args, **kwargs) -> str:
    """Capture Rich console output as plain text."""
    buf = StringIO()
    import litsearch.renderer as mod
    original = mod.console
    mod.console = Console(file=buf, force_terminal=False, width=400)
    try:
        render_fn(*args, **kwargs)
    finally:
        mod.console = original
    return buf.getvalue()


def _response(**kwargs) -> SearchResponse:
    defaults = dict(
        results=[
            Paper(
                title="Quantum Computing in the NISQ era",
                authors=["John Preskill"],
                abstract="Noisy intermediate-scale quantum devices.",
                year=2018,
                doi="10.22331/q-2018-08-06-79",
                metadata={"container-title": ["Quantum"], "is-referenced-by-count": 5000},
                source=SCHOLAR,
            ),
            Paper(
                title="Quantum Error Correction: A Survey",
                authors=["A", "B", "C", "D"],
                year=2021,
                doi="http://arxiv.org/abs/2101.00001v1",
                source=ARXIV,
            ),
        ],
        summary="These papers study noisy quantum hardware.",
        suggestions=["quantum algorithms"],
        sources={"semantic": SourceStatus(ok=True, count=1), "arxiv": SourceStatus(ok=True, count=1)},
    )
    defaults.update(kwargs)
    return SearchResponse(**defaults)


class TestRenderResponse:
    def test_reference_ids_and_counts(self):
        output = _capture_output(render_response, _response())
        assert "Found 2 results (1 from Semantic Scholar, 1 from arXiv)" in output
        assert "[r1] Quantum Computing in the NISQ era" in output
        assert "[r2] Quantum Error Correction: A Survey" in output

    def test_metadata_lines(self):
        output = _capture_output(render_response, _response())
        assert "Semantic Scholar | John Preskill | 2018" in output
        assert "doi: 10.22331/q-2018-08-06-79" in output
        assert "Quantum | cited by 5000" in output
        assert "A, B, C, et al." in output

    def test_arxiv_pdf_link(self):
        output = _capture_output(render_response, _response())
        assert "https://arxiv.org/pdf/2101.00001v1" in output

    def test_summary_and_suggestions(self):
        output = _capture_output(render_response, _response())
        assert "These papers study noisy quantum hardware." in output
        assert 'litsearch search "quantum algorithms"' in output

    def test_long_abstract_truncated(self):
        paper = Paper(title="Long", abstract="x" * 400, source=SCHOLAR)
        output = _capture_output(render_response, _response(results=[paper]))
        assert "x" * 300 + "..." in output

    def test_empty_results(self):
        output = _capture_output(
            render_response,
            _response(results=[], summary="No papers found to summarize", suggestions=[]),
        )
        assert "No results found" in output
        assert "No papers found to summarize" in output
        assert "Related searches" not in output

    def test_failed_source_is_flagged(self):
        sources = {"arxiv": SourceStatus(ok=False, error="timeout")}
        output = _capture_output(render_response, _response(sources=sources))
        assert "arxiv unavailable (timeout)" in output

    def test_bracketed_upstream_text_is_printed_literally(self):
        paper = Paper(
            title="Graph [x] models",
            authors=["[bold]Eve[/bold]"],
            abstract="We study [link] graphs and [/x] closers",
            source=ARXIV,
        )
        response = _response(
            results=[paper],
            summary="Answer [/INST] done",
            suggestions=["[red]graphs[/red]"],
        )

        output = _capture_output(render_response, response)

        assert "We study [link] graphs and [/x] closers" in output
        assert "Answer [/INST] done" in output
        assert "[bold]Eve[/bold]" in output
        assert 'litsearch search "[red]graphs[/red]"' in output
