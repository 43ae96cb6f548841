"""
Publication year resolution for scraped records.

Scraped feeds report years unreliably, so a year is resolved by trying an
ordered list of strategies and keeping the first answer:

    operator override > structured fields > URLs and free text > current year

Each strategy is a plain function ``(record, context) -> Optional[str]`` and
can be tested on its own.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, List, Mapping, Optional, Tuple

from config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

TITLE_TAG_PATTERNS = (
    re.compile(r"^\[HTML\]\[HTML\]\s*"),
    re.compile(r"^\[PDF\]\[PDF\]\s*"),
    re.compile(r"^\[CITATION\]\s*"),
)

YEAR_PATTERN = re.compile(r"\b(?:19|20)\d{2}\b")
URL_SEGMENT_YEAR_PATTERN = re.compile(r"(?<=/)(\d{4})(?=/)")
YEAR_FILTER_PARAM_PATTERN = re.compile(r"as_ylo=(\d{4})")


def clean_title(title: Optional[str]) -> str:
    """Strip Scholar result-type badges such as ``[PDF][PDF]`` and trim."""
    if not isinstance(title, str):
        return ""
    for pattern in TITLE_TAG_PATTERNS:
        title = pattern.sub("", title)
    return title.strip()


@dataclass
class YearContext:
    """Everything a strategy may consult besides the record itself."""

    overrides: Mapping[str, str] = field(default_factory=dict)
    current_year: int = field(default_factory=lambda: datetime.now().year)
    sentinel_years: Tuple[str, ...] = ("2025",)
    min_year: int = 2015

    @classmethod
    def from_settings(
        cls, overrides: Mapping[str, str], settings: Optional[Settings] = None
    ) -> "YearContext":
        settings = settings or default_settings
        return cls(
            overrides=overrides,
            current_year=settings.current_year,
            sentinel_years=tuple(settings.sentinel_years),
            min_year=settings.min_metadata_year,
        )

    def in_range(self, year: int) -> bool:
        return self.min_year <= year <= self.current_year


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value))
    return value if isinstance(value, str) else ""


def _nested_url(record: Mapping, key: str) -> str:
    value = record.get(key)
    if isinstance(value, Mapping):
        return _text(value.get("url"))
    return ""


def primary_url(record: Mapping) -> str:
    for key in ("url", "pub_url", "link"):
        url = _text(record.get(key))
        if url:
            return url
    return ""


def secondary_url(record: Mapping) -> str:
    return _nested_url(record, "source")


def citation_url(record: Mapping) -> str:
    return _nested_url(record, "citation")


def description_text(record: Mapping) -> str:
    return _text(record.get("description")) or _text(record.get("abstract"))


def latest_year(candidates: Iterable[str], context: YearContext) -> Optional[str]:
    """Most recent candidate inside the plausible window, if any."""
    years = [int(c) for c in candidates if context.in_range(int(c))]
    return str(max(years)) if years else None


# Strategies, in precedence order

def from_override(record: Mapping, context: YearContext) -> Optional[str]:
    title = clean_title(_text(record.get("title")))
    if not title or title not in context.overrides:
        return None
    year = str(context.overrides[title]).strip()
    if not re.fullmatch(r"\d{4}", year):
        logger.warning(f"Ignoring malformed override year {year!r} for '{title}'")
        return None
    return year


def from_year_field(record: Mapping, context: YearContext) -> Optional[str]:
    value = record.get("year")
    if value in (None, ""):
        value = record.get("pub_year")
    year = _text(value).strip()
    if not re.fullmatch(r"\d{4}", year):
        return None
    if year in context.sentinel_years:
        logger.info(f"Ignoring placeholder year {year} for '{record.get('title')}'")
        return None
    if not 1900 <= int(year) <= context.current_year + 1:
        return None
    return year


def from_date_field(record: Mapping, context: YearContext) -> Optional[str]:
    match = re.search(r"\d{4}", _text(record.get("date")))
    if match and 1900 <= int(match.group()) <= context.current_year:
        return match.group()
    return None


def from_description(record: Mapping, context: YearContext) -> Optional[str]:
    return latest_year(YEAR_PATTERN.findall(description_text(record)), context)


def from_url_path(record: Mapping, context: YearContext) -> Optional[str]:
    return latest_year(URL_SEGMENT_YEAR_PATTERN.findall(primary_url(record)), context)


def from_source_url_path(record: Mapping, context: YearContext) -> Optional[str]:
    return latest_year(URL_SEGMENT_YEAR_PATTERN.findall(secondary_url(record)), context)


def from_citation_url(record: Mapping, context: YearContext) -> Optional[str]:
    return latest_year(YEAR_FILTER_PARAM_PATTERN.findall(citation_url(record)), context)


def from_all_text(record: Mapping, context: YearContext) -> Optional[str]:
    blob = " ".join([
        _text(record.get("title")),
        description_text(record),
        primary_url(record),
        secondary_url(record),
    ])
    return latest_year(YEAR_PATTERN.findall(blob), context)


YearStrategy = Callable[[Mapping, YearContext], Optional[str]]

YEAR_STRATEGIES: List[YearStrategy] = [
    from_override,
    from_year_field,
    from_date_field,
    from_description,
    from_url_path,
    from_source_url_path,
    from_citation_url,
    from_all_text,
]


def resolve_year(
    record: Mapping,
    overrides: Optional[Mapping[str, str]] = None,
    context: Optional[YearContext] = None,
) -> str:
    """
    Resolve the best-guess publication year of a raw record.

    Args:
        record: Raw scraped record
        overrides: Cleaned title to year mapping, used when no context is given
        context: Strategy context; built from settings if not provided

    Returns:
        A four digit year string. Falls back to the current year.
    """
    if context is None:
        context = YearContext.from_settings(overrides or {})
    elif overrides is not None:
        context = YearContext(
            overrides=overrides,
            current_year=context.current_year,
            sentinel_years=context.sentinel_years,
            min_year=context.min_year,
        )

    if not isinstance(record, Mapping):
        record = {}

    for strategy in YEAR_STRATEGIES:
        year = strategy(record, context)
        if year:
            return year

    logger.warning(
        f"Could not determine year for '{clean_title(_text(record.get('title'))) or 'Untitled'}', "
        f"using {context.current_year}. Consider adding an override."
    )
    return str(context.current_year)


# Citation text

CITATION_PATTERNS = (
    re.compile(r"\((\d{4})\)"),             # APA: (2024)
    re.compile(r"\w+,\s+\w+\.\s+(\d{4})\."),  # MLA: Author, A. 2024.
    re.compile(r"\((\d{4}),"),              # Chicago: (2024, May 3)
    re.compile(r'"(\d{4})"'),               # quoted year
)


def extract_year_from_citation(
    citation_text: Optional[str],
    meta: Optional[Mapping[str, str]] = None,
    current_year: Optional[int] = None,
    min_year: int = 1990,
) -> Optional[str]:
    """
    Extract a year from a formatted citation and the page's meta tags.

    Args:
        citation_text: Citation string as shown on the citation page
        meta: Meta tag name to content mapping from the same page
        current_year: Reference year, defaults to the current one
        min_year: Oldest year accepted

    Returns:
        Year string, or None if nothing plausible was found
    """
    upper = (current_year or datetime.now().year) + 1

    def plausible(year: str) -> bool:
        return min_year <= int(year) <= upper

    for key, value in (meta or {}).items():
        if ("date" in key or "year" in key) and isinstance(value, str):
            match = re.search(r"\b(20\d{2})\b", value)
            if match and plausible(match.group(1)):
                return match.group(1)

    if not citation_text:
        return None

    for pattern in CITATION_PATTERNS:
        match = pattern.search(citation_text)
        if match and plausible(match.group(1)):
            return match.group(1)

    years = [y for y in YEAR_PATTERN.findall(citation_text) if plausible(y)]
    return max(years, key=int) if years else None


def extract_year_hints_from_url(url: Optional[str], current_year: Optional[int] = None) -> List[str]:
    """Hints for an operator checking a publication's year by hand."""
    if not url:
        return []

    upper = (current_year or datetime.now().year) + 2
    hints: List[str] = []

    for year in re.findall(r"\b20\d{2}\b", url):
        if 2000 <= int(year) <= upper and year not in hints:
            hints.append(year)

    if "mdpi.com" in url and re.search(r"/(\d+)/(\d+)/(\d+)$", url):
        hints.append("Check MDPI volume/issue for publication year")

    if "doi.org" in url or "/10." in url:
        match = re.search(r"10\.\d+/[^/]*?(\d{4})", url)
        if match:
            hints.append(f"DOI suggests: {match.group(1)}")

    return hints
