"""Combine publication lists from several sources into one sorted list."""

import logging
import re
from dataclasses import replace
from typing import Dict, List, Sequence

from pubsync.normalize import UNKNOWN_VENUE
from pubsync.sources.data.models import Publication

logger = logging.getLogger(__name__)

# Filled from a later duplicate when the first occurrence lacks them
BACKFILL_FIELDS = ("volume", "pages", "doi", "link", "description")


def title_key(title: str) -> str:
    """Dedup key: lowercase, punctuation as spaces, whitespace collapsed."""
    return re.sub(r"[\W_]+", " ", (title or "").lower()).strip()


def year_sort_key(publication: Publication) -> int:
    try:
        return int(publication.year)
    except (TypeError, ValueError):
        return 0


def _backfill(kept: Publication, duplicate: Publication) -> Publication:
    changes = {
        name: getattr(duplicate, name)
        for name in BACKFILL_FIELDS
        if getattr(kept, name) is None and getattr(duplicate, name) is not None
    }
    if not kept.citation_count and duplicate.citation_count:
        changes["citation_count"] = duplicate.citation_count
    if kept.journal == UNKNOWN_VENUE and duplicate.journal != UNKNOWN_VENUE:
        changes["journal"] = duplicate.journal
    return replace(kept, **changes) if changes else kept


def combine_publications(*sources: Sequence[Publication]) -> List[Publication]:
    """
    Merge publication lists and drop duplicate titles.

    Sources are read in argument order, so pass the most trusted one first:
    its title, authors and year win on a collision. Fields the winner lacks
    are filled from the duplicates that follow.

    Args:
        *sources: One list of publications per source

    Returns:
        Unique publications, newest year first
    """
    unique: Dict[str, Publication] = {}

    for publications in sources:
        for pub in publications or []:
            key = title_key(pub.title)
            if key in unique:
                unique[key] = _backfill(unique[key], pub)
            else:
                unique[key] = pub

    total = sum(len(p or []) for p in sources)
    if total != len(unique):
        logger.info(f"Merged {total - len(unique)} duplicate publications")

    return sorted(unique.values(), key=year_sort_key, reverse=True)
