"""Data models for scraped publication information."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Publication:
    """Represents a single publication as shown on the site."""

    title: str
    authors: str
    journal: str
    year: str
    volume: Optional[str] = None
    pages: Optional[str] = None
    doi: Optional[str] = None
    link: Optional[str] = None
    citation_count: int = 0
    description: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialize with the site's field names, dropping empty optionals."""
        data = {
            "title": self.title,
            "authors": self.authors,
            "journal": self.journal,
            "year": self.year,
        }
        for key, value in (
            ("volume", self.volume),
            ("pages", self.pages),
            ("doi", self.doi),
            ("link", self.link),
            ("description", self.description),
        ):
            if value is not None:
                data[key] = value
        data["citationCount"] = self.citation_count
        return data
