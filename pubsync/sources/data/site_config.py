"""Rewrite the publications array in the static site's configuration."""

import json
import logging
import re
from pathlib import Path
from typing import List, Optional

from config.settings import settings
from pubsync.errors import ConfigCorruptError
from pubsync.sources.data.models import Publication

logger = logging.getLogger(__name__)

PUBLICATIONS_PATTERN = re.compile(r"publications:\s*\[[\s\S]*?\],(?=\s*projects:)")


def render_publications_array(publications: List[Publication]) -> str:
    """Render publications as the array literal used in the site config."""
    entries = []
    for pub in publications:
        parts = [
            f"      title: {json.dumps(pub.title)},",
            f"      authors: {json.dumps(pub.authors)},",
            f"      journal: {json.dumps(pub.journal)},",
            f"      year: {json.dumps(pub.year)},",
        ]
        for name in ("volume", "pages", "doi", "link"):
            value = getattr(pub, name)
            if value:
                parts.append(f"      {name}: {json.dumps(value)},")
        entries.append("    {\n" + "\n".join(parts) + "\n    }")

    return "[\n" + ",\n".join(entries) + ",\n  ]"


def patch_site_config(config_text: str, publications: List[Publication]) -> str:
    """
    Replace the publications array in the site config source.

    Raises:
        ConfigCorruptError: If no publications array is found
    """
    if not PUBLICATIONS_PATTERN.search(config_text):
        raise ConfigCorruptError("Could not find publications array in config file")

    replacement = f"publications: {render_publications_array(publications)},"
    return PUBLICATIONS_PATTERN.sub(lambda _: replacement, config_text, count=1)


def update_site_config(
    publications: List[Publication],
    path: Optional[Path] = None,
    dry_run: bool = False,
) -> str:
    """
    Patch the site config file with the given publications.

    Args:
        publications: Publications to write, in display order
        path: Site config file, defaults to ``settings.site_config_path``
        dry_run: Build the new content without writing it

    Returns:
        The patched config text

    Raises:
        ConfigCorruptError: If the file cannot be read or has no publications array
    """
    path = Path(path) if path is not None else settings.site_config_path
    try:
        config_text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigCorruptError(f"Could not read {path}: {e}") from e

    patched = patch_site_config(config_text, publications)
    if not dry_run:
        path.write_text(patched, encoding="utf-8")
        logger.info(f"Wrote {len(publications)} publications to {path}")
    return patched
