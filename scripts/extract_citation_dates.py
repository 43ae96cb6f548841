"""
Suggest publication years from Google Scholar citation pages.

Fetches the author's Scholar results, scrapes each citation page (and the
article page when the citation has no year), and with --update records the
years found as overrides. Existing overrides are never replaced.
"""

import argparse
import logging
import sys
from pathlib import Path

#
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import settings
from pubsync.errors import SourceUnavailableError
from pubsync.sources.citation_pages import CitationDateExtractor
from pubsync.sources.data import OverrideStore
from pubsync.sources.scholar import fetch_scholar_records


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Extract publication years from citation pages")
    parser.add_argument("--test", action="store_true", help="Only process the first two papers")
    parser.add_argument("--update", action="store_true", help="Store the years found as overrides")
    args = parser.parse_args(argv)

    try:
        records = fetch_scholar_records(settings.author_name)
    except SourceUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not records:
        print("No publications found", file=sys.stderr)
        return 1

    if args.test:
        records = records[:2]
    print(f"Found {len(records)} publications, extracting citation dates...")

    results = CitationDateExtractor().extract_batch(records)

    print("\nResults Summary:")
    print("====================")
    for result in results:
        status = "ok " if result["extractedYear"] else "-- "
        print(f"{status} {result['extractedYear'] or 'Not found'}: {result['title'][:60]}")

    found = sum(1 for r in results if r["extractedYear"])
    print(f"\nSuccess rate: {found}/{len(results)} ({round(found / len(results) * 100)}%)")

    if not args.update:
        print("\nTo update the publication dates file, run with --update")
        return 0

    store = OverrideStore.load()
    updated = store.add_extracted(results)
    store.save()
    print(f"\nUpdated {updated} publication dates in {store.path}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(main())
