"""Configuration settings for the publication sync tools.

Handles author identity, source toggles, file paths and scraping limits.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

# Project root directory
ROOT_DIR = Path(__file__).parent.parent


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_years(name: str, default: str) -> Tuple[str, ...]:
    return tuple(y.strip() for y in os.getenv(name, default).split(",") if y.strip())


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Author identity
    author_name: str = os.getenv("AUTHOR_NAME", "Jonah Mack")
    orcid_id: str = os.getenv("ORCID_ID", "")

    # Sources
    enable_scholar: bool = _env_flag("ENABLE_SCHOLAR", "true")
    enable_orcid: bool = _env_flag("ENABLE_ORCID", "false")
    year_low: int = int(os.getenv("YEAR_LOW", "2020"))
    scholar_max_results: int = int(os.getenv("SCHOLAR_MAX_RESULTS", "50"))

    # File paths
    publication_dates_path: Path = ROOT_DIR / os.getenv(
        "PUBLICATION_DATES_PATH", "publication-dates.json"
    )
    verification_report_path: Path = ROOT_DIR / os.getenv(
        "VERIFICATION_REPORT_PATH", "publication-verification-report.txt"
    )
    site_config_path: Path = ROOT_DIR / os.getenv("SITE_CONFIG_PATH", "src/config.ts")

    # Year heuristics
    sentinel_years: Tuple[str, ...] = _env_years("SENTINEL_YEARS", "2025")
    min_metadata_year: int = int(os.getenv("MIN_METADATA_YEAR", "2015"))
    min_citation_year: int = int(os.getenv("MIN_CITATION_YEAR", "1990"))

    # Network behaviour
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "10"))
    request_delay: float = float(os.getenv("REQUEST_DELAY", "2.0"))

    class Config:
        arbitrary_types_allowed = True
        frozen = True

    @property
    def current_year(self) -> int:
        return datetime.now().year


settings = Settings()
