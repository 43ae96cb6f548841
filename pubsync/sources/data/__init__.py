"""Data storage module for publication metadata."""

from .models import Publication
from .overrides import OverrideStore, validate_year
from .report import (
    build_verification_entries,
    render_verification_report,
    write_verification_report,
)
from .site_config import (
    patch_site_config,
    render_publications_array,
    update_site_config,
)

__all__ = [
    "Publication",
    "OverrideStore",
    "validate_year",
    "build_verification_entries",
    "render_verification_report",
    "write_verification_report",
    "patch_site_config",
    "render_publications_array",
    "update_site_config",
]
