"""
Sequential detail capture for every job card on the Jobs view.

Cards are activated strictly one at a time: the detail pane shows whatever
card was clicked last, so each capture must finish before the next click.
"""

import logging
import time
from dataclasses import replace
from typing import List, Optional

from bs4 import BeautifulSoup, Tag
from rapidfuzz import fuzz

from src.GJOBS import config
from src.GJOBS.models import JobDetail
from src.GJOBS.parser import (
    collect_preferred_anchors,
    first_match,
    node_block_text,
    node_text,
    pick_text,
    preferred_link,
)

logger = logging.getLogger(__name__)


def find_detail_pane(soup: BeautifulSoup) -> Optional[Tag]:
    return first_match(soup, config.DETAIL_PANE_SELECTORS)


def find_active_card(soup: BeautifulSoup) -> Optional[Tag]:
    return first_match(soup, config.ACTIVE_CARD_SELECTORS)


def capture_detail(soup: BeautifulSoup, base_url: str, index: int) -> JobDetail:
    """
    Read the currently shown job from a page snapshot.

    The detail pane is preferred for every field; the selected card fills in
    whatever the pane lacks. Missing fields stay empty.
    """
    pane = find_detail_pane(soup)
    card = find_active_card(soup)

    link = preferred_link(pane, base_url) or preferred_link(card, base_url) or base_url

    def field(selectors) -> str:
        return pick_text(pane, selectors) or pick_text(card, selectors)

    return JobDetail(
        index=index,
        title=field(config.DETAIL_TITLE_SELECTORS),
        company=field(config.DETAIL_COMPANY_SELECTORS),
        location=field(config.DETAIL_LOCATION_SELECTORS),
        description=field(config.DETAIL_DESCRIPTION_SELECTORS),
        link=link,
        apply_link=link,
        content=node_block_text(pane) or node_block_text(card),
        anchors=collect_preferred_anchors(pane, base_url) + collect_preferred_anchors(card, base_url),
    )


def _with_sync_check(detail: JobDetail, card_title: str) -> JobDetail:
    """Score how well the captured detail matches the card that was clicked."""
    if not card_title or not detail.title:
        return detail
    score = fuzz.token_sort_ratio(card_title.lower(), detail.title.lower())
    if score < config.SYNC_MATCH_THRESHOLD:
        logger.warning(
            f"  Detail pane may be out of sync: clicked '{card_title}', "
            f"pane shows '{detail.title}' (score: {score:.0f})"
        )
    return replace(detail, sync_score=score)


def drill_down(session, deadline: Optional[float] = None) -> List[JobDetail]:
    """
    Click every job card in turn and capture its detail view.

    Args:
        session: Controlled page showing the Jobs view
        deadline: time.monotonic() value after which no more cards are opened

    Returns:
        One JobDetail per card that could be activated. `index` is the card's
        1-based position; a card that cannot be clicked leaves a gap.
    """
    logger.info("Clicking through each job entry to load details...")
    details = []

    try:
        count = len(session.snapshot().select(config.TITLE_MARKER_SELECTOR))
    except Exception as e:
        logger.error(f"Error while counting job tabs: {e}")
        return details

    if count == 0:
        logger.info("No job tabs found to click.")
        return details

    for idx in range(count):
        number = idx + 1
        if deadline is not None and time.monotonic() >= deadline:
            logger.warning(f"Run budget exhausted, stopping after {idx} of {count} job tabs")
            break

        try:
            markers = session.snapshot().select(config.TITLE_MARKER_SELECTOR)
            card_title = node_text(markers[idx]) if idx < len(markers) else ""
            activated = session.activate(
                config.TITLE_MARKER_SELECTOR, idx, ancestor=config.CLICKABLE_CARD_SELECTOR
            )
        except Exception as e:
            logger.warning(f"Error clicking job tab {number}: {e}")
            activated = False

        if not activated:
            logger.info(f"Unable to click job tab {number}")
            continue

        logger.info(f"Opened job tab {number} of {count}")
        try:
            session.wait(config.DETAIL_SETTLE)
            detail = capture_detail(session.snapshot(), session.url, number)
        except Exception as e:
            logger.warning(f"Failed to capture job tab {number}: {e}")
            detail = JobDetail(index=number)

        detail = _with_sync_check(detail, card_title)
        if detail.anchors:
            logger.info(f"  {len(detail.anchors)} anchors found in description pane/job card")
        else:
            logger.info("  No anchors detected for this job in the detail pane.")
        details.append(detail)

    logger.info(f"Captured {len(details)} of {count} job tabs")
    return details
