"""
Tests for search-result enrichment and redirect unwrapping.
"""

import time
from types import SimpleNamespace

from bs4 import BeautifulSoup

from conftest import SEARCH_RESULT_PAGE, SessionFactory
from src.GJOBS import enricher as enricher_module
from src.GJOBS.enricher import (
    ResultEnricher,
    build_query,
    build_search_url,
    first_result_link,
    unwrap_redirect,
)
from src.GJOBS.models import JobRecord

RECORDS = [
    JobRecord("Software Engineer", "Acme", "Colombo"),
    JobRecord("QA Engineer", "Globex", "Remote"),
    JobRecord("Data Analyst", "", "Kandy"),
]


def test_unwrap_redirect():
    assert unwrap_redirect("https://example.com/url?q=https://target.example/job/1") == (
        "https://target.example/job/1"
    )


def test_unwrap_decodes_target():
    wrapped = "https://www.google.com/url?q=https%3A%2F%2Ft.example%2Fa%3Fb%3D1&sa=U&ved=2ah"
    assert unwrap_redirect(wrapped) == "https://t.example/a?b=1"


def test_plain_url_unchanged():
    assert unwrap_redirect("https://target.example/job/1") == "https://target.example/job/1"
    assert unwrap_redirect("https://www.google.com/url") == "https://www.google.com/url"
    assert unwrap_redirect("") == ""


def test_build_search_url_encodes_query():
    assert build_search_url("QA Engineer Globex") == "https://www.google.com/search?q=QA+Engineer+Globex&hl=en"


def test_build_query_skips_missing_company():
    assert build_query(RECORDS[0]) == "Software Engineer Acme"
    assert build_query(RECORDS[2]) == "Data Analyst"


def test_first_result_link_unwraps_redirect():
    soup = BeautifulSoup(SEARCH_RESULT_PAGE, "html.parser")
    assert first_result_link(soup, "https://www.google.com/search?q=x") == "https://careers.example.com/job/1"


def test_first_result_link_skips_internal_search_links():
    html = (
        '<div id="search"><div class="g">'
        '<a href="/search?q=related+searches">Related</a>'
        '<a href="https://jobs.example.org/posting/9"><h3>Posting</h3></a>'
        '</div></div>'
    )
    soup = BeautifulSoup(html, "html.parser")
    assert first_result_link(soup, "https://www.google.com/search?q=x") == "https://jobs.example.org/posting/9"


def test_first_result_link_fallback_unwraps_redirect():
    html = '<div id="search"><div><a href="/url?q=https://t.example/job/1&sa=U">Result</a></div></div>'
    soup = BeautifulSoup(html, "html.parser")
    assert first_result_link(soup, "https://www.google.com/search?q=x") == "https://t.example/job/1"


def test_first_result_link_empty_page():
    assert first_result_link(BeautifulSoup("<html></html>", "html.parser")) == ""


def test_enrich_reuses_one_search_page(search_factory):
    enricher = ResultEnricher(search_factory)
    enriched = enricher.enrich(RECORDS, start_position=4)

    assert len(search_factory.sessions) == 1
    assert [item.position for item in enriched] == [4, 5, 6]
    assert [item.record for item in enriched] == RECORDS
    assert all(item.search_link == "https://careers.example.com/job/1" for item in enriched)
    assert search_factory.sessions[0].navigations[1] == build_search_url("QA Engineer Globex")

    enricher.close()
    assert search_factory.sessions[0].closed


def test_failed_lookup_keeps_record():
    factory = SessionFactory(default_html=SEARCH_RESULT_PAGE, fail_navigation=["google.com"])
    enriched = ResultEnricher(factory).enrich(RECORDS)

    assert [item.record for item in enriched] == RECORDS
    assert all(item.search_link == "" for item in enriched)


def test_enrich_stops_at_deadline(search_factory, monkeypatch):
    clock = iter([0.0, 10.0, 100.0])
    monkeypatch.setattr(enricher_module, "time", SimpleNamespace(monotonic=lambda: next(clock)))

    enriched = ResultEnricher(search_factory).enrich(RECORDS, deadline=50.0)

    assert [item.record for item in enriched] == RECORDS[:2]
    assert len(search_factory.sessions[0].navigations) == 2


def test_enrich_after_deadline_opens_no_page(search_factory):
    enriched = ResultEnricher(search_factory).enrich(RECORDS, deadline=time.monotonic() - 1)
    assert enriched == []
    assert search_factory.sessions == []


def test_blank_query_opens_no_page(search_factory):
    enricher = ResultEnricher(search_factory)
    assert enricher.lookup("   ") == ""
    assert search_factory.sessions == []
    enricher.close()
