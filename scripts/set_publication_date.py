"""
Manage manual publication year overrides.

Examples:
    python scripts/set_publication_date.py "Design of a Hall effect sensor" 2022
    python scripts/set_publication_date.py --list
    python scripts/set_publication_date.py --remove "Design of a Hall effect sensor"
"""

import argparse
import logging
import sys
from pathlib import Path

#
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pubsync.errors import OperatorInputError
from pubsync.sources.data import OverrideStore

NEXT_STEPS = """
Next steps:
   1. Run: python scripts/update_publications.py
   2. Rebuild the site
   3. Commit and push your changes"""


def list_overrides(store: OverrideStore) -> int:
    print("\nCurrent Publication Date Overrides:\n")

    if not len(store):
        print("No manual date overrides set.")
    for title, year in store.sorted_items():
        print(f"  {year}: {title}")

    print(f"\nTotal: {len(store)} publication(s) with manual dates\n")
    return 0


def remove_override(store: OverrideStore, title: str) -> int:
    if store.remove(title):
        store.save()
        print(f'Removed publication date override for: "{title}"')
    else:
        print(f'No date override found for: "{title}"')
    return 0


def set_override(store: OverrideStore, title: str, year: str) -> int:
    previous = store.set(title, year)
    store.save()

    if previous is not None:
        print("Updated publication date for:")
        print(f'   "{title}"')
        print(f"   {previous} -> {year}")
    else:
        print("Added publication date override:")
        print(f'   "{title}"')
        print(f"   {year}")
    print(NEXT_STEPS)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Set, list or remove manual publication years")
    parser.add_argument("title", nargs="?", help="Exact publication title")
    parser.add_argument("year", nargs="?", help="Four digit publication year")
    parser.add_argument("--list", action="store_true", help="List all current overrides")
    parser.add_argument("--remove", metavar="TITLE", help="Remove the override for TITLE")
    parser.add_argument("--file", type=Path, default=None, help="Override file to use")
    args = parser.parse_args(argv)

    store = OverrideStore.load(args.file)

    try:
        if args.list:
            return list_overrides(store)
        if args.remove:
            return remove_override(store, args.remove)
        if not args.title or not args.year:
            raise OperatorInputError("Please provide both title and year")
        return set_override(store, args.title, args.year)
    except OperatorInputError as e:
        print(f"Error: {e}", file=sys.stderr)
        print('Usage: python scripts/set_publication_date.py "Title" YYYY', file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error writing publication dates: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(main())
