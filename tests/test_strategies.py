"""
Tests for the two-tier listing strategy chain.
"""

from bs4 import BeautifulSoup

from conftest import job_card, jobs_page
from src.GJOBS.dedupe import Deduplicator
from src.GJOBS.strategies import (
    FallbackStrategy,
    PrimaryStrategy,
    fields_from_lines,
    run_strategy_chain,
)

BASE_URL = "https://www.google.com/search?q=engineer&udm=8"

FALLBACK_PAGE = (
    '<html><body><div id="search">'
    '<div class="g">'
    '<a href="https://careers.example.com/jobs/1"><h3>Backend Developer</h3></a>'
    '<div class="vNEEBe">Initech</div>'
    '<div class="Qk80Jf">Colombo, Sri Lanka</div>'
    '<div class="VwiC3b">Build and maintain payment APIs for a growing team.</div>'
    '</div>'
    '<div class="g"><a href="https://careers.example.com/jobs/2"><h3>Dev</h3></a></div>'
    '</div></body></html>'
)


def soup_of(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_primary_extracts_cards_and_drops_duplicates():
    html = jobs_page([
        job_card("Software Engineer", "Acme", "Colombo", "Build services for our banking clients",
                 href="https://acme.example/apply"),
        job_card("Software Engineer", "Acme", "Colombo", "Same role, reposted by an agency"),
        job_card("QA Engineer", "Globex", "Remote"),
    ])
    result = run_strategy_chain(soup_of(html), BASE_URL)

    assert result.strategy == "primary"
    assert [record.title for record in result.records] == ["Software Engineer", "QA Engineer"]
    first, second = result.records
    assert first.company == "Acme"
    assert first.location == "Colombo"
    assert first.description == "Build services for our banking clients"
    assert first.apply_link == "https://acme.example/apply"
    assert first.link == "https://acme.example/apply"
    assert second.description == ""
    assert second.link == ""


def test_primary_skips_short_titles():
    html = jobs_page([
        job_card("QA", "Acme", "Colombo"),
        job_card("Data Engineer", "Globex", "Remote"),
    ])
    records, _ = PrimaryStrategy().extract(soup_of(html), BASE_URL, Deduplicator())
    assert [record.title for record in records] == ["Data Engineer"]


def test_short_primary_titles_only_fall_through():
    result = run_strategy_chain(soup_of(jobs_page([job_card("QA", "Acme", "Colombo")])), BASE_URL)
    assert "QA" not in [record.title for record in result.records]


def test_primary_finds_nothing_without_markers():
    records, _ = PrimaryStrategy().extract(soup_of(FALLBACK_PAGE), BASE_URL, Deduplicator())
    assert records == []


def test_fallback_output_used_when_primary_empty():
    soup = soup_of(FALLBACK_PAGE)
    expected, _ = FallbackStrategy().extract(soup, BASE_URL, Deduplicator())

    result = run_strategy_chain(soup, BASE_URL)

    assert result.strategy == "fallback"
    assert result.records == expected


def test_fallback_reads_generic_shapes():
    records, _ = FallbackStrategy().extract(soup_of(FALLBACK_PAGE), BASE_URL, Deduplicator())

    assert len(records) == 1
    record = records[0]
    assert record.title == "Backend Developer"
    assert record.company == "Initech"
    assert record.location == "Colombo, Sri Lanka"
    assert record.description == "Build and maintain payment APIs for a growing team."
    assert record.link == "https://careers.example.com/jobs/1"


def test_fallback_skips_short_titles():
    records, _ = FallbackStrategy().extract(soup_of(FALLBACK_PAGE), BASE_URL, Deduplicator())
    assert "Dev" not in [record.title for record in records]


def test_heading_scan_picks_up_unlisted_headings():
    html = (
        '<html><body>'
        '<section><h4>Data Engineer</h4><a href="/jobs/data-engineer">Open</a></section>'
        '<section><h4>Blog post</h4><a href="https://blog.example/post">Read</a></section>'
        '</body></html>'
    )
    records, deduplicator = FallbackStrategy().extract(soup_of(html), "https://www.google.com/", Deduplicator())

    assert [record.title for record in records] == ["Data Engineer"]
    assert records[0].link == "https://www.google.com/jobs/data-engineer"
    assert deduplicator.seen_link("https://www.google.com/jobs/data-engineer")


def test_failing_strategy_falls_through():
    class Broken:
        name = "broken"

        def extract(self, soup, base_url, deduplicator):
            raise RuntimeError("markup changed")

    result = run_strategy_chain(soup_of(FALLBACK_PAGE), BASE_URL, (Broken(), FallbackStrategy()))
    assert result.strategy == "fallback"
    assert len(result.records) == 1


def test_empty_page_gives_no_strategy():
    result = run_strategy_chain(soup_of("<html><body></body></html>"), BASE_URL)
    assert result.records == []
    assert result.strategy == ""


def test_fields_from_lines():
    lines = ["Data Engineer", "Contoso", "Colombo", "Own the reporting warehouse end to end"]
    assert fields_from_lines(lines, "Data Engineer") == (
        "Contoso", "Colombo", "Own the reporting warehouse end to end"
    )
