"""Search Google Scholar for an author's publications."""

import logging
from itertools import islice
from typing import Callable, Iterable, List, Optional
from urllib.parse import urljoin

from scholarly import scholarly

from config.settings import settings
from pubsync.errors import SourceUnavailableError

logger = logging.getLogger(__name__)

SCHOLAR_BASE_URL = "https://scholar.google.com"


def scholar_record(pub: dict) -> dict:
    """Flatten a scholarly search result into a raw record."""
    bib = pub.get("bib") or {}
    record = {
        "title": bib.get("title"),
        "authors": bib.get("author"),
        "venue": bib.get("venue") or bib.get("journal"),
        "year": bib.get("pub_year"),
        "description": bib.get("abstract"),
        "url": pub.get("pub_url"),
        "citationCount": pub.get("num_citations") or 0,
    }
    if pub.get("eprint_url"):
        record["source"] = {"url": pub["eprint_url"]}
    if pub.get("citedby_url"):
        record["citation"] = {"url": urljoin(SCHOLAR_BASE_URL, pub["citedby_url"])}
    return record


def fetch_scholar_records(
    author_name: str,
    year_low: Optional[int] = None,
    year_high: Optional[int] = None,
    max_results: Optional[int] = None,
    search: Optional[Callable[..., Iterable[dict]]] = None,
) -> List[dict]:
    """
    Fetch raw records for papers by an author from Google Scholar.

    Args:
        author_name: Name to search for with the ``author:`` operator
        year_low: Earliest publication year to ask Scholar for
        year_high: Latest publication year, defaults to the current year
        max_results: Maximum number of results to read
        search: Search function, ``scholarly.search_pubs`` by default

    Returns:
        List of raw records

    Raises:
        SourceUnavailableError: If the search fails
    """
    search = search or scholarly.search_pubs
    year_low = settings.year_low if year_low is None else year_low
    year_high = year_high or settings.current_year
    max_results = max_results or settings.scholar_max_results

    logger.info(f"Fetching publications for {author_name}...")
    try:
        results = search(f'author:"{author_name}"', year_low=year_low, year_high=year_high)
        pubs = list(islice(results, max_results))
    except Exception as e:
        raise SourceUnavailableError("Google Scholar", f"{type(e).__name__}: {e}") from e

    if not pubs:
        logger.warning("No papers found in Google Scholar results")
    return [scholar_record(pub) for pub in pubs]
