"""Manual publication year overrides stored in a JSON sidecar file."""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from config.settings import settings
from pubsync.errors import ConfigCorruptError, OperatorInputError
from pubsync.years import clean_title

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTIONS = {
    "description": "Manual date overrides for publications when Google Scholar doesn't provide accurate dates",
    "usage": "Add entries in the format: 'Exact Publication Title': 'YYYY'",
    "note": "Titles must match exactly (after removing [HTML][HTML] prefixes)",
    "tip": "To find correct years: 1) Visit the publication DOI/URL, 2) Check journal website, 3) Look at your CV/records",
}


def validate_year(year: str, current_year: Optional[int] = None) -> str:
    """
    Check an operator-supplied year.

    Args:
        year: Year string as typed by the operator
        current_year: Reference year, defaults to the current one

    Returns:
        The year, stripped

    Raises:
        OperatorInputError: If the year is not four digits or out of range
    """
    year = (year or "").strip()
    if not re.fullmatch(r"\d{4}", year):
        raise OperatorInputError("Year must be a 4-digit number (e.g., 2024)")

    current_year = current_year or datetime.now().year
    if not 1900 <= int(year) <= current_year + 5:
        raise OperatorInputError(f"Year must be between 1900 and {current_year + 5}")
    return year


def _valid_dates(manual_dates: dict, path: Path) -> Dict[str, str]:
    """Keep entries whose year is four digits, dropping the rest with a warning."""
    valid = {}
    for title, year in manual_dates.items():
        year = str(year).strip()
        if re.fullmatch(r"\d{4}", year):
            valid[title] = year
        else:
            logger.warning(f"Dropping override for '{title}' in {path}: {year!r} is not a 4-digit year")
    return valid


class OverrideStore:
    """Title to year mapping asserted by the operator.

    Keys are cleaned titles. Values are four digit year strings.
    """

    def __init__(self, path: Optional[Path] = None, data: Optional[dict] = None):
        self.path = Path(path) if path is not None else settings.publication_dates_path
        self.data = data if data is not None else self._empty()
        if not isinstance(self.data.get("manualDates"), dict):
            self.data["manualDates"] = {}

    @staticmethod
    def _empty() -> dict:
        return {"manualDates": {}, "_instructions": dict(DEFAULT_INSTRUCTIONS)}

    @classmethod
    def read(cls, path: Optional[Path] = None) -> "OverrideStore":
        """
        Load the override file, raising if it is present but unusable.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigCorruptError: If the file cannot be parsed
        """
        path = Path(path) if path is not None else settings.publication_dates_path
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigCorruptError(f"Could not parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigCorruptError(f"Expected a JSON object in {path}")
        if isinstance(data.get("manualDates"), dict):
            data["manualDates"] = _valid_dates(data["manualDates"], path)
        return cls(path, data)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "OverrideStore":
        """Load the override file, starting empty if it is missing or malformed."""
        path = Path(path) if path is not None else settings.publication_dates_path
        try:
            return cls.read(path)
        except FileNotFoundError:
            logger.info(f"No override file at {path}, starting empty")
        except (OSError, ConfigCorruptError) as e:
            logger.warning(f"Ignoring unreadable override file: {e}")
        return cls(path)

    @property
    def manual_dates(self) -> Dict[str, str]:
        return self.data["manualDates"]

    def __len__(self) -> int:
        return len(self.manual_dates)

    def __contains__(self, title: str) -> bool:
        return clean_title(title) in self.manual_dates

    def get(self, title: str) -> Optional[str]:
        return self.manual_dates.get(clean_title(title))

    def set(self, title: str, year: str) -> Optional[str]:
        """
        Assert the year of a publication.

        Returns:
            The previous year for this title, if one was set
        """
        key = clean_title(title)
        if not key:
            raise OperatorInputError("Please provide a publication title")
        year = validate_year(year)

        previous = self.manual_dates.get(key)
        self.manual_dates[key] = year
        return previous

    def remove(self, title: str) -> bool:
        """Drop an override. Returns False if the title had none."""
        if title not in self:
            return False
        del self.manual_dates[clean_title(title)]
        return True

    def sorted_items(self) -> List[Tuple[str, str]]:
        """Overrides as (title, year) pairs, newest year first."""
        return sorted(self.manual_dates.items(), key=lambda item: item[1], reverse=True)

    def add_extracted(self, results: Iterable[dict]) -> int:
        """
        Record years suggested by the citation scraper.

        Existing entries are never overwritten; disagreements are logged.

        Args:
            results: Dicts with ``title`` and ``extractedYear`` keys

        Returns:
            Number of new entries added
        """
        results = list(results)
        updated_count = 0

        for result in results:
            year = result.get("extractedYear")
            if not year:
                continue

            key = clean_title(result.get("title"))
            existing = self.manual_dates.get(key)
            if existing is None:
                self.manual_dates[key] = year
                updated_count += 1
                logger.info(f"Added: '{key}' -> {year}")
            elif existing != year:
                logger.warning(f"Conflict: '{key}' has {existing} but found {year}")

        self.data["_lastExtraction"] = {
            "date": datetime.now().isoformat(),
            "extractedCount": sum(1 for r in results if r.get("extractedYear")),
            "totalProcessed": len(results),
            "updatedCount": updated_count,
        }
        return updated_count

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.data, indent=2) + "\n", encoding="utf-8")
