"""
Suggest publication years by scraping citation and publisher pages.

For each Scholar record the citation page is fetched first and its formatted
citation is searched for a year. If that fails, the publication's own page is
scraped for publication-date meta tags, visible dates or JSON-LD. The results
feed the override store as suggestions.
"""

import json
import logging
import re
import time
from typing import Dict, List, Mapping, Optional, Tuple

import requests
from bs4 import BeautifulSoup

from config.settings import settings
from pubsync.years import citation_url, clean_title, extract_year_from_citation, primary_url

logger = logging.getLogger(__name__)

CITATION_SELECTORS = [
    "#gs_citi",
    ".gs_citr",
    ".citation",
    "#citation-text",
    ".formatted-citation",
]

DATE_META_SELECTORS = [
    'meta[name="citation_publication_date"]',
    'meta[name="citation_date"]',
    'meta[name="dc.date"]',
    'meta[property="article:published_time"]',
    'meta[name="prism.publicationDate"]',
]

DATE_TEXT_SELECTORS = [
    ".publication-date",
    ".article-date",
    ".pub-date",
    "time[datetime]",
    ".date",
]

YEAR_2000S = re.compile(r"\b(20\d{2})\b")


class HTMLFetcher:
    """Handles HTML fetching with retry logic."""

    DEFAULT_HEADERS = {
        "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
        "Accept": "text/html,application/xhtml+xml",
        "Accept-Language": "en-US,en;q=0.9",
    }

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_retries: int = 2,
        retry_delay: float = 1.0,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = settings.request_timeout if timeout is None else timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.session = session or requests.Session()
        self.session.headers.update(self.DEFAULT_HEADERS)

    def fetch(self, url: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Fetch HTML content from URL.

        Returns:
            Tuple of (html_content, error_message)
            If successful: (html, None)
            If failed: (None, error_description)
        """
        last_error = None

        for attempt in range(self.max_retries):
            try:
                response = self.session.get(url, timeout=self.timeout)
                response.raise_for_status()
                return response.text, None

            except requests.exceptions.Timeout:
                last_error = f"Timeout after {self.timeout}s"
            except requests.exceptions.HTTPError as e:
                last_error = f"HTTP {e.response.status_code}"
                if e.response.status_code in (404, 403, 410, 429):
                    break  # Don't retry for permanent errors or rate limits
            except requests.exceptions.RequestException as e:
                last_error = str(e)

            if attempt < self.max_retries - 1:
                time.sleep(self.retry_delay * (attempt + 1))

        return None, last_error


def parse_citation_page(html: str) -> Tuple[str, Dict[str, str]]:
    """
    Pull the formatted citation and the meta tags out of a citation page.

    Returns:
        Tuple of (citation_text, meta name to content mapping)
    """
    soup = BeautifulSoup(html, "html.parser")

    citation_text = ""
    for selector in CITATION_SELECTORS:
        element = soup.select_one(selector)
        if element:
            citation_text = element.get_text(" ", strip=True)
            break

    meta = {}
    for tag in soup.find_all("meta"):
        name = tag.get("name") or tag.get("property")
        content = tag.get("content")
        if name and content:
            meta[name] = content

    return citation_text, meta


def extract_year_from_page(html: str) -> Optional[str]:
    """Find a publication year on a publisher's article page."""
    soup = BeautifulSoup(html, "html.parser")

    for selector in DATE_META_SELECTORS:
        tag = soup.select_one(selector)
        match = YEAR_2000S.search(tag.get("content") or "") if tag else None
        if match:
            return match.group(1)

    for selector in DATE_TEXT_SELECTORS:
        element = soup.select_one(selector)
        if element:
            text = element.get_text(strip=True) or element.get("datetime") or ""
            match = YEAR_2000S.search(text)
            if match:
                return match.group(1)

    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except json.JSONDecodeError:
            continue
        published = data.get("datePublished") if isinstance(data, dict) else None
        match = YEAR_2000S.search(published) if isinstance(published, str) else None
        if match:
            return match.group(1)

    return None


class CitationDateExtractor:
    """Suggests years for Scholar records from their citation and article pages."""

    def __init__(self, fetcher: Optional[HTMLFetcher] = None, delay: Optional[float] = None):
        self.fetcher = fetcher or HTMLFetcher()
        self.delay = settings.request_delay if delay is None else delay

    def extract(self, record: Mapping) -> dict:
        """
        Suggest a year for one raw Scholar record.

        Returns:
            Dict with ``title``, ``extractedYear`` (or None), ``source``,
            ``citationText`` and, on failure, ``error``
        """
        title = clean_title(record.get("title")) or "Untitled"
        result = {"title": title, "extractedYear": None, "source": None, "citationText": ""}

        cite_url = citation_url(record)
        if cite_url:
            result["source"] = "google_scholar_citation"
            html, error = self.fetcher.fetch(cite_url)
            if html:
                citation_text, meta = parse_citation_page(html)
                result["citationText"] = citation_text[:200]
                result["extractedYear"] = extract_year_from_citation(
                    citation_text, meta, min_year=settings.min_citation_year
                )
            else:
                result["error"] = error
            time.sleep(self.delay)

        url = primary_url(record)
        if url and not result["extractedYear"]:
            html, error = self.fetcher.fetch(url)
            year = extract_year_from_page(html) if html else None
            if year:
                result.update(extractedYear=year, source="direct_url")
                result.pop("error", None)
            elif error:
                result["error"] = error

        if result["extractedYear"]:
            logger.info(f"Found year {result['extractedYear']} for '{title[:60]}'")
        else:
            logger.info(f"No year found for '{title[:60]}'")
        return result

    def extract_batch(self, records: List[Mapping]) -> List[dict]:
        results = []
        for i, record in enumerate(records):
            logger.info(f"Processing [{i + 1}/{len(records)}]: {clean_title(record.get('title'))[:60]}")
            results.append(self.extract(record))
        return results
