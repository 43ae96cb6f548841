"""Tests for combining publication lists."""

from pubsync.merge import combine_publications, title_key
from pubsync.normalize import normalize_records
from pubsync.sources.data import Publication
from pubsync.years import YearContext


def make_pub(title, year="2024", **kwargs):
    kwargs.setdefault("authors", "J Mack")
    kwargs.setdefault("journal", "Unknown Venue")
    return Publication(title=title, year=year, **kwargs)


def test_title_key_ignores_case_and_punctuation():
    assert title_key("Robo-Bot!") == title_key("robo bot")
    assert title_key("  Fluidic   FlowBots: Intelligence ") == "fluidic flowbots intelligence"


def test_first_occurrence_wins():
    first = make_pub("Soft Actuator", year="2023", authors="J Mack")
    second = make_pub("soft actuator!", year="2021", authors="Someone Else")

    merged = combine_publications([first], [second])

    assert len(merged) == 1
    assert merged[0].year == "2023"
    assert merged[0].authors == "J Mack"
    assert merged[0].title == "Soft Actuator"


def test_missing_fields_are_backfilled_from_later_duplicates():
    sparse = make_pub("Soft Actuator", journal="Unknown Venue")
    rich = make_pub(
        "Soft Actuator",
        journal="Biomimetics",
        doi="10.3390/biomimetics10070455",
        link="https://www.mdpi.com/2313-7673/10/7/455",
        citation_count=4,
    )

    merged = combine_publications([sparse], [rich])

    assert merged[0].journal == "Biomimetics"
    assert merged[0].doi == "10.3390/biomimetics10070455"
    assert merged[0].link == "https://www.mdpi.com/2313-7673/10/7/455"
    assert merged[0].citation_count == 4


def test_backfill_never_replaces_present_fields():
    kept = make_pub("A", journal="Device", doi="10.1016/j.device.2025.100001")
    later = make_pub("A", journal="CELL", doi="10.9999/other")

    merged = combine_publications([kept, later])

    assert merged[0].journal == "Device"
    assert merged[0].doi == "10.1016/j.device.2025.100001"


def test_merge_is_idempotent():
    pubs = [make_pub("Robo-Bot!"), make_pub("Another paper", year="2022")]

    once = combine_publications(pubs)
    twice = combine_publications(pubs, pubs)

    assert [title_key(p.title) for p in once] == [title_key(p.title) for p in twice]


def test_sorted_newest_first_and_stable():
    pubs = [
        make_pub("A", year="2022"),
        make_pub("B", year="2024"),
        make_pub("C", year="2022"),
        make_pub("D", year="unknown"),
        make_pub("E", year="2023"),
    ]

    merged = combine_publications(pubs)

    assert [p.title for p in merged] == ["B", "E", "A", "C", "D"]


def test_empty_sources():
    assert combine_publications() == []
    assert combine_publications([], None) == []


def test_two_sources_end_to_end():
    context = YearContext(current_year=2026, sentinel_years=("2025",), min_year=2015)
    scholar = normalize_records(
        [{
            "title": "[PDF][PDF] Foo Bar",
            "year": "2025",
            "url": "https://mdpi.com/journal/2023/article",
        }],
        "Jonah Mack",
        context=context,
    )
    orcid = normalize_records([{"title": "Foo Bar", "date": "2023-05-01"}], "Jonah Mack", context=context)

    assert scholar[0].title == orcid[0].title == "Foo Bar"
    assert scholar[0].year == orcid[0].year == "2023"

    merged = combine_publications(scholar, orcid)

    assert len(merged) == 1
    assert merged[0].year == "2023"
    assert merged[0].journal == "MDPI Journal"
