"""
Search-result enrichment: look up each job on a second page and keep the
first organic result link.

One secondary page is opened on first use and reused for every lookup.
"""

import logging
import time
from typing import Iterable, List, Optional
from urllib.parse import parse_qs, quote_plus, urlparse

from bs4 import BeautifulSoup

from src.GJOBS import config
from src.GJOBS.browser import SessionFactory
from src.GJOBS.models import EnrichedRecord, JobRecord
from src.GJOBS.navigator import dismiss_consent
from src.GJOBS.parser import closest, resolve_href

logger = logging.getLogger(__name__)


def is_redirect_wrapper(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.path == config.REDIRECT_PATH and config.REDIRECT_PARAM in parse_qs(parsed.query)


def unwrap_redirect(url: str) -> str:
    """
    Target of a redirect wrapper such as https://www.google.com/url?q=<target>;
    any other URL is returned unchanged.
    """
    if not url or not is_redirect_wrapper(url):
        return url
    return parse_qs(urlparse(url).query)[config.REDIRECT_PARAM][0]


def build_search_url(query: str) -> str:
    return f"{config.SEARCH_URL}?q={quote_plus(query)}&hl=en"


def build_query(record: JobRecord) -> str:
    return " ".join(part for part in (record.title, record.company) if part).strip()


def first_result_link(soup: BeautifulSoup, base_url: str = "") -> str:
    """First organic result on a search results snapshot, unwrapped."""
    for selector in config.RESULT_LINK_SELECTORS:
        for node in soup.select(selector):
            anchor = node if node.name == "a" else closest(node, "a")
            href = resolve_href(anchor, base_url)
            if not href:
                continue
            if is_redirect_wrapper(href):
                target = unwrap_redirect(href)
                if target:
                    return target
                continue
            if "/search?" not in href:
                return href

    return unwrap_redirect(resolve_href(soup.select_one(config.RESULT_FALLBACK_SELECTOR), base_url))


class ResultEnricher:
    """Resolves a canonical link per record through one reused search page."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory
        self._session = None

    def _search_session(self):
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def lookup(self, query: str) -> str:
        """First result link for `query`; empty string on any failure."""
        query = (query or "").strip()
        if not query:
            return ""

        try:
            session = self._search_session()
            session.navigate(build_search_url(query), wait_until="domcontentloaded", timeout=config.TIMEOUT)
            dismiss_consent(session)
            session.wait(config.ENRICH_SETTLE)
            return first_result_link(session.snapshot(), session.url) or ""
        except Exception as e:
            logger.warning(f"Failed to fetch search result for \"{query}\": {e}")
            return ""

    def enrich(self, records: Iterable[JobRecord], start_position: int = 1,
               deadline: Optional[float] = None) -> List[EnrichedRecord]:
        """
        Pair each record with its lookup result; a failed lookup keeps the
        record with an empty link.

        Args:
            records: Records to look up, in discovery order
            start_position: Discovery position of the first record
            deadline: time.monotonic() value after which no more lookups start

        Returns:
            One EnrichedRecord per record looked up before the deadline
        """
        enriched = []
        for position, record in enumerate(records, start_position):
            if deadline is not None and time.monotonic() >= deadline:
                logger.warning(f"Run budget exhausted, skipping search-result lookups from [{position}]")
                break
            query = build_query(record)
            search_link = self.lookup(query) if query else ""
            logger.info(f"[{position}] {record.title} -> {search_link or 'N/A'}")
            enriched.append(EnrichedRecord(position=position, record=record, search_link=search_link))
        return enriched

    def close(self) -> None:
        if self._session is None:
            return
        try:
            self._session.close()
        except Exception as e:
            logger.debug(f"Error closing search page: {e}")
        self._session = None
