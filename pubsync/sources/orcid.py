"""
Fetch works from the public ORCID API.

Works are listed with one request and then fetched one at a time for their
details, pausing between requests.
"""

import logging
import time
from typing import List, Optional

import requests

from config.settings import settings
from pubsync.errors import SourceUnavailableError

logger = logging.getLogger(__name__)

ORCID_API = "https://pub.orcid.org/v3.0"


def clean_orcid_id(orcid_id: str) -> str:
    return orcid_id.strip().replace("https://orcid.org/", "").strip("/")


def _value(node, *path) -> Optional[str]:
    """Walk nested ORCID ``{"value": ...}`` objects, tolerating gaps."""
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    if isinstance(node, dict):
        node = node.get("value")
    return node if isinstance(node, str) else None


def _list(node: dict, *path) -> list:
    """Walk nested objects to a list, giving an empty list for any other shape."""
    for key in path:
        if not isinstance(node, dict):
            return []
        node = node.get(key)
    return node if isinstance(node, list) else []


def transform_orcid_work(work: dict) -> Optional[dict]:
    """
    Convert an ORCID work record into a raw record for normalization.

    Args:
        work: JSON body of ``/{orcid}/work/{put-code}``

    Returns:
        Raw record dict, or None if the work is unusable
    """
    if not isinstance(work, dict):
        return None

    contributors = _list(work, "contributors", "contributor")
    authors = [
        name for name in (_value(c, "credit-name") for c in contributors) if name
    ]

    doi = None
    for ext in _list(work, "external-ids", "external-id"):
        if isinstance(ext, dict) and ext.get("external-id-type") == "doi" and ext.get("external-id-value"):
            doi = ext["external-id-value"]
            break

    pub_date = work.get("publication-date") or {}
    date = "-".join(
        part for part in (
            _value(pub_date, "year"),
            _value(pub_date, "month"),
            _value(pub_date, "day"),
        ) if part
    )

    return {
        "title": _value(work, "title", "title"),
        "authors": authors or None,
        "journal": _value(work, "journal-title"),
        "year": _value(pub_date, "year"),
        "date": date or None,
        "doi": doi,
        "url": f"https://doi.org/{doi}" if doi else _value(work, "url"),
    }


def fetch_orcid_works(
    orcid_id: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
    delay: Optional[float] = None,
) -> List[dict]:
    """
    Fetch all works for an ORCID iD as raw records.

    Args:
        orcid_id: ORCID iD, bare or as an orcid.org URL
        session: Optional requests session
        timeout: Per-request timeout in seconds
        delay: Seconds to wait between work detail requests

    Returns:
        List of raw records

    Raises:
        SourceUnavailableError: If the works listing cannot be fetched
    """
    session = session or requests.Session()
    session.headers.update({"Accept": "application/json"})
    timeout = settings.request_timeout if timeout is None else timeout
    delay = settings.request_delay if delay is None else delay

    orcid_id = clean_orcid_id(orcid_id)
    logger.info(f"Fetching publications from ORCID: {orcid_id}")

    try:
        response = session.get(f"{ORCID_API}/{orcid_id}/works", timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.HTTPError as e:
        raise SourceUnavailableError("ORCID", f"HTTP {e.response.status_code}") from e
    except (requests.exceptions.RequestException, ValueError) as e:
        raise SourceUnavailableError("ORCID", str(e)) from e

    if not isinstance(data, dict):
        raise SourceUnavailableError("ORCID", "unexpected response shape")

    put_codes = [
        summary.get("put-code")
        for group in _list(data, "group")
        for summary in _list(group, "work-summary")
        if isinstance(summary, dict) and summary.get("put-code") is not None
    ]

    records = []
    for i, put_code in enumerate(put_codes):
        try:
            response = session.get(f"{ORCID_API}/{orcid_id}/work/{put_code}", timeout=timeout)
            response.raise_for_status()
            record = transform_orcid_work(response.json())
            if record:
                records.append(record)
        except (requests.exceptions.RequestException, ValueError, AttributeError, TypeError) as e:
            logger.warning(f"Error fetching ORCID work {put_code}: {e}")

        if i < len(put_codes) - 1:
            time.sleep(delay)

    return records
