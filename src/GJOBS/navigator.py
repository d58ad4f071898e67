"""
Search bootstrap and Jobs-tab navigation.

perform_search() gets the session onto a results page (a failure there is
fatal for the run). TabNavigator then tries to move from the generic results
to the Jobs view; it never raises, the caller only learns whether the Jobs
view was reached.
"""

import logging
import random
from enum import Enum
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from src.GJOBS import config
from src.GJOBS.browser import BootstrapError
from src.GJOBS.models import TabDescriptor
from src.GJOBS.parser import node_text, resolve_href

logger = logging.getLogger(__name__)


def _pause(session, bounds) -> None:
    session.wait(random.uniform(*bounds))


def dismiss_consent(session, wait_ms: int = 0) -> bool:
    """Click a cookie/consent button if one is showing. Best effort."""
    try:
        if wait_ms and not session.wait_for(", ".join(config.CONSENT_SELECTORS), wait_ms):
            return False
        soup = session.snapshot()
        for selector in config.CONSENT_SELECTORS:
            if soup.select_one(selector) is not None and session.activate(selector, 0, scroll=False):
                logger.info("Dismissed consent dialog")
                return True
    except Exception as e:
        logger.debug(f"Consent dismissal skipped: {e}")
    return False


def perform_search(session, query: str) -> None:
    """
    Open the search home page and submit `query` like a person would.

    Raises:
        BootstrapError: if the home page, search box or results never show up
    """
    logger.info("Navigating to Google...")
    try:
        session.navigate(config.HOME_URL, timeout=config.TIMEOUT)
        _pause(session, (1000, 3000))

        if dismiss_consent(session, wait_ms=config.CONSENT_TIMEOUT):
            _pause(session, (1000, 2000))

        logger.info(f"Searching for: \"{query}\"")
        if not session.wait_for(config.SEARCH_BOX_SELECTOR, config.WAIT_TIMEOUT):
            raise BootstrapError("Search box not found")
        _pause(session, config.HUMAN_PAUSE_MS)
        session.type_text(config.SEARCH_BOX_SELECTOR, query)
        _pause(session, config.HUMAN_PAUSE_MS)
        session.press("Enter")

        if not session.wait_for(config.RESULTS_SELECTOR, config.WAIT_TIMEOUT):
            raise BootstrapError("Search results did not load")
        session.wait(config.SEARCH_SETTLE)
    except BootstrapError:
        raise
    except Exception as e:
        raise BootstrapError(f"Search failed: {e}") from e


def _matches_jobs_vocabulary(text: str) -> bool:
    lower = text.strip().lower()
    return any(lower == word or word in lower for word in config.JOBS_TAB_VOCABULARY)


def discover_tabs(soup: BeautifulSoup, base_url: str = "") -> List[TabDescriptor]:
    """All selectable result categories visible on a results page."""
    tabs = []
    seen = set()

    def add(element: Tag, name: str, aria_label: str) -> None:
        seen.add(name.lower())
        tabs.append(TabDescriptor(name=name, href=resolve_href(element, base_url), aria_label=aria_label))

    for selector in config.TAB_SELECTORS:
        for element in soup.select(selector):
            text = node_text(element)
            lower = text.lower()
            if not text or len(text) >= config.TAB_MAX_LENGTH or lower in seen:
                continue
            if any(word in lower for word in config.TAB_EXCLUDED_WORDS):
                continue
            add(element, text, element.get("aria-label") or text)

    candidates = soup.select(config.TAB_NAME_SELECTOR)
    for tab_name in config.COMMON_TAB_NAMES:
        wanted = tab_name.lower()
        for element in candidates:
            text = node_text(element)
            aria_label = element.get("aria-label") or ""
            if not text or text.lower() in seen:
                continue
            if text.lower() == wanted or wanted in aria_label.lower():
                add(element, text, aria_label or text)

    return tabs


def find_jobs_tab(tabs: List[TabDescriptor]) -> Optional[TabDescriptor]:
    for tab in tabs:
        if _matches_jobs_vocabulary(tab.name):
            return tab
    return None


def is_jobs_control(element: Tag, base_url: str = "", known_href: str = "") -> bool:
    """Short-labelled control pointing at, or labelled as, the Jobs view."""
    text = node_text(element)
    if len(text) >= config.JOBS_TAB_MAX_LABEL:
        return False
    href = resolve_href(element, base_url)
    if known_href and href == known_href:
        return True
    if any(pattern in href for pattern in config.JOBS_HREF_PATTERNS):
        return True
    return _matches_jobs_vocabulary(text) or _matches_jobs_vocabulary(element.get("aria-label") or "")


class NavState(Enum):
    IDLE = "idle"
    AWAITING_TAB_LIST = "awaiting_tab_list"
    TAB_LIST_READY = "tab_list_ready"
    NAVIGATING_TO_VIEW = "navigating_to_view"
    VIEW_READY = "view_ready"
    NAVIGATION_FAILED = "navigation_failed"


class TabNavigator:
    """Moves the session from generic results into the Jobs view."""

    def __init__(self, session):
        self.session = session
        self.state = NavState.IDLE
        self.history = [NavState.IDLE]

    def _transition(self, state: NavState) -> None:
        logger.info(f"Navigator: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def discover_tabs(self) -> List[TabDescriptor]:
        self._transition(NavState.AWAITING_TAB_LIST)
        tabs = []
        try:
            self.session.wait_for(config.RESULTS_SELECTOR)
            tabs = discover_tabs(self.session.snapshot(), self.session.url)
        except Exception as e:
            logger.error(f"Error reading search tabs: {e}")

        if tabs:
            logger.info(f"Found {len(tabs)} tabs: {', '.join(tab.name for tab in tabs)}")
        else:
            logger.info("No tabs found. The page structure might be different.")
        self._transition(NavState.TAB_LIST_READY)
        return tabs

    def open_jobs_view(self, tabs: List[TabDescriptor]) -> bool:
        """True if the Jobs view is now showing."""
        self._transition(NavState.NAVIGATING_TO_VIEW)
        try:
            reached = self._navigate(tabs)
        except Exception as e:
            logger.error(f"Error finding Jobs tab: {e}")
            reached = False

        if reached:
            self._transition(NavState.VIEW_READY)
            return True

        self._transition(NavState.NAVIGATION_FAILED)
        logger.info("Continuing with regular search results...")
        self._transition(NavState.IDLE)
        return False

    def _navigate(self, tabs: List[TabDescriptor]) -> bool:
        jobs_tab = find_jobs_tab(tabs)
        if jobs_tab is not None and jobs_tab.href:
            try:
                logger.info(f"Navigating to Jobs page: {jobs_tab.href}")
                self.session.navigate(jobs_tab.href, wait_until="networkidle", timeout=config.TIMEOUT)
                self.session.wait(config.TAB_SETTLE)
                logger.info("Successfully navigated to Jobs page")
                return True
            except Exception as e:
                logger.warning(f"Error navigating to Jobs link: {e}")
                logger.info("Trying to click Jobs tab instead...")
        else:
            logger.info("Jobs tab link not found in available tabs, trying to find and click...")

        return self._activate_jobs_control(jobs_tab.href if jobs_tab is not None else "")

    def _activate_jobs_control(self, known_href: str) -> bool:
        soup = self.session.snapshot()
        base_url = self.session.url
        for selector in config.JOBS_TAB_CLICK_SELECTORS:
            for index, element in enumerate(soup.select(selector)):
                if not is_jobs_control(element, base_url, known_href):
                    continue
                if self.session.activate(selector, index):
                    logger.info("Jobs tab clicked successfully")
                    self.session.wait(config.TAB_CLICK_SETTLE)
                    self.session.wait_for(config.RESULTS_OR_VED_SELECTOR, config.WAIT_TIMEOUT)
                    return True
        logger.info("Could not find or click Jobs tab")
        return False
