"""Tests for the ORCID and Google Scholar adapters."""

from unittest.mock import MagicMock

import pytest
import requests

from pubsync.errors import SourceUnavailableError
from pubsync.sources.orcid import clean_orcid_id, fetch_orcid_works, transform_orcid_work
from pubsync.sources.scholar import fetch_scholar_records, scholar_record

ORCID_WORK = {
    "title": {"title": {"value": "Fluidic FlowBots"}},
    "journal-title": {"value": "IEEE RoboSoft"},
    "publication-date": {"year": {"value": "2024"}, "month": {"value": "05"}, "day": None},
    "contributors": {
        "contributor": [
            {"credit-name": {"value": "M Gepner"}},
            {"credit-name": None},
            {"credit-name": {"value": "J Mack"}},
        ]
    },
    "external-ids": {
        "external-id": [
            {"external-id-type": "eid", "external-id-value": "2-s2.0-1"},
            {"external-id-type": "doi", "external-id-value": "10.1109/RoboSoft60065.2024.10522011"},
        ]
    },
}


def fake_response(payload=None, status=200):
    response = MagicMock()
    response.json.return_value = payload
    if status >= 400:
        error = requests.exceptions.HTTPError(response=MagicMock(status_code=status))
        response.raise_for_status.side_effect = error
    return response


def test_clean_orcid_id():
    assert clean_orcid_id("https://orcid.org/0000-0001-2345-6789") == "0000-0001-2345-6789"


def test_transform_orcid_work():
    record = transform_orcid_work(ORCID_WORK)

    assert record["title"] == "Fluidic FlowBots"
    assert record["authors"] == ["M Gepner", "J Mack"]
    assert record["journal"] == "IEEE RoboSoft"
    assert record["year"] == "2024"
    assert record["date"] == "2024-05"
    assert record["doi"] == "10.1109/RoboSoft60065.2024.10522011"
    assert record["url"] == "https://doi.org/10.1109/RoboSoft60065.2024.10522011"


def test_transform_orcid_work_sparse():
    record = transform_orcid_work({})

    assert record["title"] is None
    assert record["authors"] is None
    assert record["year"] is None
    assert record["url"] is None
    assert transform_orcid_work(None) is None


def test_fetch_orcid_works_skips_failed_details():
    session = MagicMock()
    session.headers = {}
    session.get.side_effect = [
        fake_response({"group": [
            {"work-summary": [{"put-code": 1}]},
            {"work-summary": [{"put-code": 2}, {"title": "no put code"}]},
        ]}),
        fake_response(ORCID_WORK),
        fake_response(status=500),
    ]

    records = fetch_orcid_works("0000-0001-2345-6789", session=session, delay=0)

    assert len(records) == 1
    assert records[0]["title"] == "Fluidic FlowBots"
    assert session.get.call_args_list[1][0][0].endswith("/0000-0001-2345-6789/work/1")


def test_fetch_orcid_works_listing_failure():
    session = MagicMock()
    session.headers = {}
    session.get.return_value = fake_response(status=404)

    with pytest.raises(SourceUnavailableError):
        fetch_orcid_works("0000-0001-2345-6789", session=session, delay=0)


def test_fetch_orcid_works_network_error():
    session = MagicMock()
    session.headers = {}
    session.get.side_effect = requests.exceptions.ConnectionError("down")

    with pytest.raises(SourceUnavailableError):
        fetch_orcid_works("0000-0001-2345-6789", session=session, delay=0)



def test_fetch_orcid_works_unexpected_listing_shape():
    session = MagicMock()
    session.headers = {}
    session.get.return_value = fake_response([])

    with pytest.raises(SourceUnavailableError, match="unexpected response shape"):
        fetch_orcid_works("0000-0001-2345-6789", session=session, delay=0)


def test_fetch_orcid_works_skips_malformed_entries():
    session = MagicMock()
    session.headers = {}
    session.get.side_effect = [
        fake_response({"group": [
            "not a group",
            {"work-summary": ["not a summary", {"put-code": 1}]},
            {"work-summary": {"put-code": 9}},
            {"work-summary": [{"put-code": 2}]},
        ]}),
        fake_response({
            "title": {"title": {"value": "Odd Work"}},
            "contributors": {"contributor": "J Mack"},
            "external-ids": {"external-id": ["10.1/x", {"external-id-type": "doi", "external-id-value": "10.1234/abc"}]},
        }),
        fake_response(["not", "a", "work"]),
    ]

    records = fetch_orcid_works("0000-0001-2345-6789", session=session, delay=0)

    assert len(records) == 1
    assert records[0]["title"] == "Odd Work"
    assert records[0]["authors"] is None
    assert records[0]["doi"] == "10.1234/abc"
    assert session.get.call_count == 3


SCHOLAR_PUB = {
    "bib": {
        "title": "[HTML][HTML] An Optimised Spider-Inspired Soft Actuator",
        "author": ["J Mack", "M Gepner"],
        "venue": "Biomimetics",
        "pub_year": "2025",
        "abstract": "Soft actuators for extraterrestrial exploration",
    },
    "pub_url": "https://www.mdpi.com/2313-7673/10/7/455",
    "num_citations": 3,
    "citedby_url": "/scholar?cites=123&as_sdt=2005",
    "eprint_url": "https://www.mdpi.com/2313-7673/10/7/455/pdf",
}


def test_scholar_record():
    record = scholar_record(SCHOLAR_PUB)

    assert record["title"].startswith("[HTML][HTML]")
    assert record["authors"] == ["J Mack", "M Gepner"]
    assert record["venue"] == "Biomimetics"
    assert record["year"] == "2025"
    assert record["citationCount"] == 3
    assert record["source"] == {"url": "https://www.mdpi.com/2313-7673/10/7/455/pdf"}
    assert record["citation"] == {"url": "https://scholar.google.com/scholar?cites=123&as_sdt=2005"}


def test_fetch_scholar_records_passes_filters():
    search = MagicMock(return_value=iter([SCHOLAR_PUB, SCHOLAR_PUB, SCHOLAR_PUB]))

    records = fetch_scholar_records(
        "Jonah Mack", year_low=2020, year_high=2026, max_results=2, search=search
    )

    assert len(records) == 2
    search.assert_called_once_with('author:"Jonah Mack"', year_low=2020, year_high=2026)


def test_fetch_scholar_records_failure():
    search = MagicMock(side_effect=RuntimeError("Cannot Fetch from Google Scholar."))

    with pytest.raises(SourceUnavailableError):
        fetch_scholar_records("Jonah Mack", search=search)
