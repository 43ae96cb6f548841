"""
Fetch publications from all configured sources and merge them.

Sources are queried one after another (ORCID first, then Google Scholar).
A source that fails contributes nothing; the others still count.
"""

import logging
from typing import Callable, List, Optional

from config.settings import Settings, settings as default_settings
from pubsync.errors import SourceUnavailableError
from pubsync.merge import combine_publications
from pubsync.normalize import normalize_records
from pubsync.sources.data import OverrideStore, Publication
from pubsync.sources.orcid import fetch_orcid_works
from pubsync.sources.scholar import fetch_scholar_records
from pubsync.years import YearContext

logger = logging.getLogger(__name__)


def _fetch_source(name: str, fetch: Callable[[], List[dict]]) -> List[dict]:
    try:
        return fetch()
    except SourceUnavailableError as e:
        logger.warning(f"Failed to fetch from {name}: {e}")
        return []


def fetch_scholar_publications(
    author_name: Optional[str] = None,
    year_low: Optional[int] = None,
    store: Optional[OverrideStore] = None,
    config: Optional[Settings] = None,
) -> List[Publication]:
    """Fetch and normalize Google Scholar results only."""
    config = config or default_settings
    author_name = author_name or config.author_name
    store = store if store is not None else OverrideStore.load(config.publication_dates_path)

    records = _fetch_source(
        "Google Scholar",
        lambda: fetch_scholar_records(author_name, year_low=year_low or config.year_low),
    )
    context = YearContext.from_settings(store.manual_dates, config)
    return normalize_records(records, author_name, context=context)


def fetch_publications(
    config: Optional[Settings] = None,
    store: Optional[OverrideStore] = None,
    year_low: Optional[int] = None,
) -> List[Publication]:
    """
    Fetch publications from every enabled source.

    Args:
        config: Settings to use, defaults to the environment settings
        store: Override store, loaded from ``config.publication_dates_path`` if omitted
        year_low: Earliest year to ask Google Scholar for

    Returns:
        Merged publications, newest first
    """
    config = config or default_settings
    store = store if store is not None else OverrideStore.load(config.publication_dates_path)
    context = YearContext.from_settings(store.manual_dates, config)

    publication_sources = []

    if config.enable_orcid and config.orcid_id:
        records = _fetch_source("ORCID", lambda: fetch_orcid_works(config.orcid_id))
        orcid_pubs = normalize_records(records, config.author_name, context=context)
        publication_sources.append(orcid_pubs)
        logger.info(f"Found {len(orcid_pubs)} publications from ORCID")

    if config.enable_scholar:
        scholar_pubs = fetch_scholar_publications(config.author_name, year_low, store, config)
        publication_sources.append(scholar_pubs)
        logger.info(f"Found {len(scholar_pubs)} publications from Google Scholar")

    combined = combine_publications(*publication_sources)
    logger.info(f"Total unique publications: {len(combined)}")
    return combined
