"""Map raw source records onto the canonical Paper shape."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from xml.etree import ElementTree

from litsearch.backends.arxiv import ATOM_NS
from litsearch.models import ARXIV, SCHOLAR, Paper

UNTITLED = "Untitled"


def _clean(text: Any) -> str:
    if not isinstance(text, str):
        return ""
    return text.strip()


def _scholar_authors(raw: dict) -> list[str]:
    authors = raw.get("authors")
    if not isinstance(authors, list):
        return []
    names = []
    for author in authors:
        name = author.get("name") if isinstance(author, dict) else None
        if isinstance(name, str) and name:
            names.append(name)
    return names


def _scholar_year(raw: dict) -> Optional[int]:
    year = raw.get("year")
    # bool is an int subclass; a flag is never a year
    if isinstance(year, int) and not isinstance(year, bool):
        return year
    return None


def _scholar_doi(raw: dict) -> Optional[str]:
    doi = raw.get("doi")
    if not doi:
        ext = raw.get("externalIds")
        doi = ext.get("DOI") if isinstance(ext, dict) else None
    return doi if isinstance(doi, str) and doi else None


def normalize_scholar(raw: dict) -> Paper:
    """Normalize one Semantic Scholar record."""
    if not isinstance(raw, dict):
        return Paper(source=SCHOLAR)
    return Paper(
        title=_clean(raw.get("title")) or UNTITLED,
        authors=_scholar_authors(raw),
        abstract=_clean(raw.get("abstract")),
        year=_scholar_year(raw),
        doi=_scholar_doi(raw),
        source=SCHOLAR,
    )


def _read_text(node: ElementTree.Element, path: str) -> str:
    found = node.find(path, ATOM_NS)
    if found is None or found.text is None:
        return ""
    return " ".join(found.text.split())


def _published_year(text: str) -> Optional[int]:
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.strip().replace("Z", "+00:00")).year
    except ValueError:
        return None


def normalize_arxiv(entry: ElementTree.Element) -> Paper:
    """Normalize one arXiv Atom <entry> element."""
    if not isinstance(entry, ElementTree.Element):
        return Paper(source=ARXIV)

    authors = []
    for author in entry.findall("atom:author", ATOM_NS):
        name = _read_text(author, "atom:name")
        if name:
            authors.append(name)

    summary = entry.find("atom:summary", ATOM_NS)
    abstract = summary.text.strip() if summary is not None and summary.text else ""

    return Paper(
        title=_read_text(entry, "atom:title") or UNTITLED,
        authors=authors,
        abstract=abstract,
        year=_published_year(_read_text(entry, "atom:published")),
        doi=_read_text(entry, "atom:id") or None,
        source=ARXIV,
    )


_NORMALIZERS = {
    SCHOLAR: normalize_scholar,
    ARXIV: normalize_arxiv,
}


def normalize(raw: Any, source: str) -> Paper:
    """Normalize a raw record from ``source`` into a Paper."""
    try:
        normalizer = _NORMALIZERS[source]
    except KeyError:
        raise ValueError(f"Unknown source: {source!r}") from None
    return normalizer(raw)
