"""
"More jobs" expansion for the Jobs view.
"""

import logging

from src.GJOBS import config
from src.GJOBS.parser import node_text

logger = logging.getLogger(__name__)


def _matches_more_jobs(text: str) -> bool:
    lower = text.lower()
    return any(phrase in lower for phrase in config.MORE_JOBS_VOCABULARY)


def expand_more_jobs(session) -> bool:
    """
    Click the first "100+ more jobs" style control, once.

    Waits for the page to settle or finish loading, whichever comes first.
    A missing control is not an error; the current results are kept.

    Returns:
        True if a control was activated
    """
    logger.info('Looking for "100+ more jobs" button...')
    try:
        session.wait(config.PAGINATION_DELAY)
        soup = session.snapshot()
        for selector in config.MORE_JOBS_SELECTORS:
            for index, element in enumerate(soup.select(selector)):
                label = element.get("aria-label") or ""
                if not (_matches_more_jobs(node_text(element)) or _matches_more_jobs(label)):
                    continue
                if session.activate(selector, index):
                    logger.info('Clicked "more jobs" button successfully')
                    # The click navigates asynchronously; let the new document start loading
                    session.wait(config.PAGINATION_CLICK_SETTLE)
                    if not session.wait_for_load("networkidle", config.PAGINATION_SETTLE):
                        logger.info("Navigation completed or timed out")
                    return True
    except Exception as e:
        logger.warning(f'Error clicking "more jobs" button: {e}')
        logger.info("Continuing with current results...")
        return False

    logger.info('"100+ more jobs" button not found, continuing with current results...')
    return False
