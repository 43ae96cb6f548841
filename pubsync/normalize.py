"""
Map raw, source-specific records onto the Publication shape.

Raw records come straight from the source adapters and may carry authors as
a list, a string or a mapping, and a venue under one of several keys. All of
that is settled here; nothing downstream sees a raw record.
"""

import logging
import re
from typing import Iterable, List, Mapping, Optional
from urllib.parse import urlparse

from pubsync.sources.data.models import Publication
from pubsync.years import (
    YearContext,
    clean_title,
    description_text,
    primary_url,
    resolve_year,
    secondary_url,
)

logger = logging.getLogger(__name__)

UNKNOWN_VENUE = "Unknown Venue"

# Checked in order against the source URL
PUBLISHER_LABELS = (
    (("mdpi.com",), "MDPI Journal"),
    (("ieee.org",), "IEEE Publication"),
    (("springer.com", "link.springer.com"), "Springer"),
    (("elsevier.com", "sciencedirect.com"), "Elsevier"),
    (("nature.com",), "Nature"),
    (("arxiv.org",), "arXiv"),
)

DOI_PATTERN = re.compile(r"10\.\d{4,}/[^\s<>\"']+")
DOI_URL_PATTERN = re.compile(r"doi\.org/(10\.\d{4,}/[^\s<>\"']+)")
DOI_TRAILING_PUNCTUATION = re.compile(r"[.,;:)}\]]+$")


def _author_name(entry) -> str:
    if isinstance(entry, Mapping):
        name = entry.get("name")
        return name if isinstance(name, str) else ""
    if isinstance(entry, str):
        return entry
    return str(entry) if entry is not None else ""


def format_authors(raw_authors, fallback: str) -> str:
    """
    Turn any recognized author shape into a display string.

    Args:
        raw_authors: List of names or ``{"name": ...}`` objects, a string,
            or a mapping whose values are names
        fallback: Used for unrecognized shapes and empty results

    Returns:
        Comma separated author names
    """
    if isinstance(raw_authors, (list, tuple)):
        names = [n for n in (_author_name(a) for a in raw_authors) if n]
        authors = ", ".join(names)
    elif isinstance(raw_authors, str):
        authors = raw_authors.strip()
    elif isinstance(raw_authors, Mapping):
        authors = ", ".join(str(v) for v in raw_authors.values() if v)
    else:
        authors = ""
    return authors or fallback


def journal_from_url(url: str) -> str:
    """Venue label for a publisher URL."""
    for domains, label in PUBLISHER_LABELS:
        if any(domain in url for domain in domains):
            return label

    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return "Online Publication"
    if not host:
        return "Online Publication"
    if host.startswith("www."):
        host = host[4:]
    return re.sub(r"\.(com|org|edu|net)$", "", host).upper()


def derive_journal(record: Mapping) -> str:
    for key in ("venue", "journal"):
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()

    source = record.get("source")
    if isinstance(source, Mapping):
        for key in ("journal", "name"):
            value = source.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        url = source.get("url")
        if isinstance(url, str) and url:
            return journal_from_url(url)
    elif isinstance(source, str) and source.strip():
        return source.strip()

    publication = record.get("publication")
    if isinstance(publication, str) and publication.strip():
        return publication.strip()

    url = primary_url(record)
    if url:
        return journal_from_url(url)

    return UNKNOWN_VENUE


def clean_doi(doi: str) -> str:
    return DOI_TRAILING_PUNCTUATION.sub("", doi.strip())


def extract_doi_from_url(url: Optional[str]) -> Optional[str]:
    """Find a DOI embedded in a URL or citation string."""
    if not url:
        return None

    match = DOI_PATTERN.search(url)
    if match:
        return clean_doi(match.group())

    match = DOI_URL_PATTERN.search(url)
    if match:
        return clean_doi(match.group(1))

    return None


def extract_doi(record: Mapping) -> Optional[str]:
    doi = record.get("doi")
    if isinstance(doi, str) and doi.strip():
        return extract_doi_from_url(doi) or clean_doi(doi)
    return extract_doi_from_url(primary_url(record)) or extract_doi_from_url(secondary_url(record))


def _optional_text(value) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _citation_count(record: Mapping) -> int:
    value = record.get("citationCount", record.get("num_citations"))
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def normalize_record(
    record: Mapping,
    author_name: str,
    overrides: Optional[Mapping[str, str]] = None,
    context: Optional[YearContext] = None,
) -> Publication:
    """
    Build a Publication from one raw record.

    Args:
        record: Raw record from a source adapter
        author_name: Author the search was made for, used when authors are missing
        overrides: Cleaned title to year mapping
        context: Year resolution context

    Returns:
        Publication with every required field filled
    """
    if not isinstance(record, Mapping):
        logger.warning(f"Unrecognized record of type {type(record).__name__}")
        record = {}

    raw_authors = record.get("authors")
    if raw_authors is None:
        raw_authors = record.get("author")

    return Publication(
        title=clean_title(record.get("title")) or "Untitled",
        authors=format_authors(raw_authors, author_name),
        journal=derive_journal(record),
        year=resolve_year(record, overrides, context),
        volume=_optional_text(record.get("volume")),
        pages=_optional_text(record.get("pages")),
        doi=extract_doi(record),
        link=primary_url(record) or None,
        citation_count=_citation_count(record),
        description=description_text(record) or None,
    )


def normalize_records(
    records: Iterable[Mapping],
    author_name: str,
    overrides: Optional[Mapping[str, str]] = None,
    context: Optional[YearContext] = None,
) -> List[Publication]:
    if context is None:
        context = YearContext.from_settings(overrides or {})
        overrides = None
    return [normalize_record(r, author_name, overrides, context) for r in records]
