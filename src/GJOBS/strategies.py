"""
Listing extraction strategies for the Google Jobs results view.

Two independent strategies are tried in order and the chain stops at the
first one that yields records:

1. PrimaryStrategy - the stable title/company/location markers of the jobs
   view. Precise, but brittle when the markup is renamed.
2. FallbackStrategy - a broad scan over generic result shapes with text-shape
   heuristics, followed by an h3/h4 sweep for listings the shapes missed.
"""

import logging
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from src.GJOBS import config
from src.GJOBS.dedupe import Deduplicator
from src.GJOBS.models import JobRecord
from src.GJOBS.parser import (
    GENERIC_FIELDS,
    STABLE_FIELDS,
    closest,
    extract_field,
    is_description_text,
    is_relative_time,
    looks_like_location,
    node_lines,
    node_text,
    preferred_link,
    resolve_href,
)

logger = logging.getLogger(__name__)

CARD_CONTAINER = ", ".join(config.CARD_CONTAINER_SELECTORS)


class ChainResult(NamedTuple):
    records: List[JobRecord]
    strategy: str  # Name of the strategy that produced the records


def find_listing_container(marker: Tag) -> Optional[Tag]:
    """Nearest likely card ancestor of a title marker, else its parent."""
    parent = marker.parent
    if parent is None or isinstance(parent, BeautifulSoup):
        return parent
    return closest(parent, CARD_CONTAINER) or parent


def find_title_node(element: Tag) -> Optional[Tag]:
    for strategy in GENERIC_FIELDS["title"]:
        node = element.select_one(strategy.selector)
        if node is not None:
            return node
    return None


def description_from_lines(element: Tag, taken: Iterable[str]) -> str:
    """First line of the element's text that reads like a description."""
    taken = {text for text in taken if text}
    for line in node_lines(element):
        lower = line.lower()
        if (
            line not in taken
            and is_description_text(line)
            and not any(word in lower for word in config.DESCRIPTION_EXCLUDED_WORDS)
        ):
            return line
    return ""


def fields_from_lines(lines: Sequence[str], title: str) -> Tuple[str, str, str]:
    """Best-effort company, location, description from a card's text lines."""
    company = location = description = ""
    for line in lines:
        if line == title:
            continue
        if not company and len(line) < config.MAX_HEADING_COMPANY_LENGTH and not is_relative_time(line):
            company = line
        elif not location and looks_like_location(line):
            location = line
        elif not description and is_description_text(line):
            description = line
    return company, location, description


class PrimaryStrategy:
    """Known stable markers of the jobs view."""

    name = "primary"

    def extract(self, soup: BeautifulSoup, base_url: str,
                deduplicator: Deduplicator) -> Tuple[List[JobRecord], Deduplicator]:
        records = []
        markers = soup.select(config.TITLE_MARKER_SELECTOR)
        logger.info(f"Primary strategy: {len(markers)} title markers")

        for marker in markers:
            title = node_text(marker)
            if len(title) < config.MIN_TITLE_LENGTH:
                continue

            container = find_listing_container(marker)
            company = extract_field(container, "company", table=STABLE_FIELDS)
            location = extract_field(container, "location", table=STABLE_FIELDS)
            description = extract_field(
                container, "description", table=STABLE_FIELDS,
                exclude=(title, company, location),
            )
            apply_link = extract_field(container, "link", base_url)
            link = extract_field(container, "anchor", base_url) or apply_link

            record = JobRecord(
                title=title,
                company=company,
                location=location,
                description=description,
                link=link,
                apply_link=apply_link,
            )
            admitted, deduplicator = deduplicator.admit(record)
            if admitted:
                records.append(record)
            else:
                logger.debug(f"Skipping duplicate listing: {record.identity_key}")

        return records, deduplicator


class FallbackStrategy:
    """Generic result shapes plus a heading sweep."""

    name = "fallback"

    def extract(self, soup: BeautifulSoup, base_url: str,
                deduplicator: Deduplicator) -> Tuple[List[JobRecord], Deduplicator]:
        records = []
        for selector in config.LISTING_SELECTORS:
            for element in soup.select(selector):
                record, deduplicator = self._from_listing(element, base_url, deduplicator)
                if record is not None:
                    records.append(record)

        shape_count = len(records)
        records, deduplicator = self._scan_headings(soup, base_url, deduplicator, records)
        logger.info(
            f"Fallback strategy: {shape_count} from listing shapes, "
            f"{len(records) - shape_count} from heading scan"
        )
        return records, deduplicator

    @staticmethod
    def _resolve_link(element: Tag, heading: Tag, base_url: str) -> str:
        link = preferred_link(element, base_url)
        if link:
            return link
        anchor = closest(heading, "a[href]")
        if anchor is None and heading.parent is not None:
            anchor = heading.parent.select_one("a[href]")
        if anchor is None:
            anchor = closest(element, "a[href]")
        return resolve_href(anchor, base_url)

    def _from_listing(self, element: Tag, base_url: str,
                      deduplicator: Deduplicator) -> Tuple[Optional[JobRecord], Deduplicator]:
        heading = find_title_node(element)
        if heading is None:
            return None, deduplicator

        title = node_text(heading)
        link = self._resolve_link(element, heading, base_url)
        if not title or not link or len(title) < config.MIN_TITLE_LENGTH:
            return None, deduplicator
        if deduplicator.seen_link(link):
            return None, deduplicator
        deduplicator = deduplicator.add(link=link)

        company = extract_field(element, "company")
        location = extract_field(element, "location", exclude=(company,))
        description = (
            extract_field(element, "description", exclude=(title, company, location))
            or description_from_lines(element, (title, company, location))
        )

        record = JobRecord(
            title=title,
            company=company,
            location=location,
            description=description,
            link=link,
            apply_link=preferred_link(element, base_url),
        )
        admitted, deduplicator = deduplicator.admit(record)
        return (record if admitted else None), deduplicator

    def _scan_headings(self, soup: BeautifulSoup, base_url: str, deduplicator: Deduplicator,
                       records: List[JobRecord]) -> Tuple[List[JobRecord], Deduplicator]:
        found = list(records)
        for heading in soup.select(config.HEADING_SELECTOR):
            title = node_text(heading)
            if len(title) < config.MIN_TITLE_LENGTH:
                continue

            button = closest(heading, config.APPLY_BUTTON_CONTAINER)
            anchor = button.select_one("a[href]") if button is not None else None
            if anchor is None:
                anchor = closest(heading, "a[href]")
            if anchor is None and heading.parent is not None:
                anchor = heading.parent.select_one("a[href]")

            link = resolve_href(anchor, base_url)
            if not link or deduplicator.seen_link(link):
                continue
            if not any(hint in link for hint in config.HEADING_LINK_HINTS):
                continue
            deduplicator = deduplicator.add(link=link)

            parent = closest(heading, config.HEADING_PARENT_SELECTOR)
            company, location, description = fields_from_lines(node_lines(parent), title)

            record = JobRecord(
                title=title,
                company=company,
                location=location,
                description=description,
                link=link,
                apply_link=preferred_link(parent if parent is not None else heading, base_url),
            )
            admitted, deduplicator = deduplicator.admit(record)
            if admitted:
                found.append(record)
        return found, deduplicator


STRATEGY_CHAIN = (PrimaryStrategy(), FallbackStrategy())


def run_strategy_chain(soup: BeautifulSoup, base_url: str = "",
                       strategies: Sequence = STRATEGY_CHAIN) -> ChainResult:
    """
    Try each strategy in order on one page snapshot.

    A strategy that raises is logged and treated as having found nothing.
    """
    for strategy in strategies:
        try:
            records, _ = strategy.extract(soup, base_url, Deduplicator())
        except Exception as e:
            logger.error(f"{strategy.name} strategy failed: {e}")
            continue

        if records:
            logger.info(f"✓ {len(records)} jobs extracted via {strategy.name} strategy")
            return ChainResult(records, strategy.name)
        logger.info(f"No jobs found via {strategy.name} strategy")

    return ChainResult([], "")
