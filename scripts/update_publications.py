"""
Fetch publications and write them into the site configuration.

This script:
1. Fetches publications from ORCID and Google Scholar
2. Resolves years against the manual overrides
3. Replaces the publications array in the site config
"""

import argparse
import logging
import sys
from pathlib import Path

#
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pubsync.errors import ConfigCorruptError, OperatorInputError
from pubsync.sources.data import update_site_config, validate_year
from pubsync.sources.publications import fetch_publications


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Update the site config with fetched publications")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without writing to file",
    )
    parser.add_argument(
        "--year",
        default=None,
        help="Only fetch publications from this year onwards",
    )
    parser.add_argument("--config", type=Path, default=None, help="Site config file to patch")
    args = parser.parse_args(argv)

    year_low = None
    if args.year is not None:
        try:
            year_low = int(validate_year(args.year))
        except OperatorInputError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    if args.dry_run:
        print("DRY RUN MODE - No files will be modified")
    if year_low:
        print(f"Filtering publications from {year_low} onwards")

    publications = fetch_publications(year_low=year_low)
    if not publications:
        print("No publications found. Config will not be updated.", file=sys.stderr)
        return 1

    try:
        update_site_config(publications, path=args.config, dry_run=args.dry_run)
    except ConfigCorruptError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    verb = "Would update" if args.dry_run else "Updated"
    print(f"\n{verb} config with {len(publications)} publications:")
    for i, pub in enumerate(publications, 1):
        print(f"{i}. {pub.title} ({pub.year}) - {pub.journal}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(main())
