"""Plain-text checklist for verifying publication years by hand."""

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from config.settings import settings
from pubsync.sources.data.models import Publication
from pubsync.years import clean_title, extract_year_hints_from_url

SEPARATOR = "=" * 80


def build_verification_entries(publications: Iterable[Publication]) -> List[dict]:
    """One dict per publication with its current year, URL and year hints."""
    return [
        {
            "title": clean_title(pub.title),
            "currentYear": pub.year,
            "url": pub.link,
            "urlHints": extract_year_hints_from_url(pub.link or ""),
        }
        for pub in publications
    ]


def render_verification_report(entries: List[dict], generated: Optional[datetime] = None) -> str:
    generated = generated or datetime.now()
    lines = [
        "Publication Date Verification Report",
        f"Generated: {generated.isoformat()}",
        "================================================",
        "",
        "Instructions:",
        "1. Visit each URL below",
        "2. Find the actual publication date on the journal website",
        '3. If the date is wrong, update using: python scripts/set_publication_date.py "Title" YYYY',
        "",
        "Publications to verify:",
        "",
    ]

    for index, entry in enumerate(entries, 1):
        lines += [
            f"{index}. {entry['title']}",
            f"   Current Year: {entry['currentYear']}",
            f"   URL: {entry['url'] or 'No URL available'}",
            f"   URL Hints: {', '.join(entry['urlHints']) or 'None'}",
            "",
            "   [ ] Verified correct  [ ] Needs update to: ____",
            "",
            f"   {SEPARATOR}",
            "",
        ]

    lines += [
        "",
        "Quick Commands:",
        "===============",
        "",
        "To update a publication date:",
        'python scripts/set_publication_date.py "Exact Title Here" YYYY',
        "",
        "To see current overrides:",
        "python scripts/set_publication_date.py --list",
        "",
        "To update all publications after setting dates:",
        "python scripts/update_publications.py",
        "",
    ]
    return "\n".join(lines)


def write_verification_report(entries: List[dict], path: Optional[Path] = None) -> Path:
    path = Path(path) if path is not None else settings.verification_report_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_verification_report(entries), encoding="utf-8")
    return path
