"""
List fetched publications with their URLs so years can be checked by hand.

Writes a checklist report and, with --commands, prints ready-made override
commands for every publication.
"""

import argparse
import logging
import sys
from pathlib import Path

#
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pubsync.sources.data import build_verification_entries, write_verification_report
from pubsync.sources.publications import fetch_scholar_publications


def print_update_commands(entries):
    print("\nQuick Update Commands (copy/paste as needed):")
    print("=" * 60)
    for i, entry in enumerate(entries, 1):
        print(f"# {i}. {entry['title'][:40]}...")
        print(f'python scripts/set_publication_date.py "{entry["title"]}" {entry["currentYear"]}')
        print()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Verify publication years by hand")
    parser.add_argument("--commands", action="store_true", help="Also print copy-paste commands")
    parser.add_argument("--output", type=Path, default=None, help="Report file to write")
    args = parser.parse_args(argv)

    publications = fetch_scholar_publications()
    if not publications:
        print("No publications found", file=sys.stderr)
        return 1

    entries = build_verification_entries(publications)

    print(f"\nFound {len(publications)} publications\n")
    print("Publication URLs to verify manually:")
    print("=" * 80)
    for i, entry in enumerate(entries, 1):
        print(f"\n{i}. {entry['currentYear']} | {entry['title']}")
        print(f"   URL: {entry['url'] or 'No URL available'}")
        if entry["urlHints"]:
            print(f"   URL suggests: {', '.join(entry['urlHints'])}")

    report_path = write_verification_report(entries, args.output)
    print(f"\nDetailed report saved to: {report_path}")

    if args.commands:
        print_update_commands(entries)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(main())
