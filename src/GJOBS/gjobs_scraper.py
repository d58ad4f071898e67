"""
Google Jobs (GJOBS) Scraper

Searches Google for a job query, switches to the Jobs view and extracts the
listed postings.

Architecture:
1. Open Google and submit the search query
2. List the result tabs and move to the Jobs tab (generic results if that fails)
3. Expand "100+ more jobs" when offered
4. Extract listings (stable markers first, generic shapes as fallback)
5. Summary mode: look up the last few jobs on a second search page
   Full mode: click every job card, capture its detail pane, then look up all jobs
6. Print a plain-text report

Nothing is written to disk; each run is a single in-memory pass.
"""

import logging
import sys
import time
from datetime import datetime
from typing import Optional

from playwright.sync_api import sync_playwright

from src.GJOBS import config
from src.GJOBS.browser import BootstrapError, BrowserSession, open_browser
from src.GJOBS.drilldown import drill_down
from src.GJOBS.enricher import ResultEnricher
from src.GJOBS.models import RunResult
from src.GJOBS.navigator import TabNavigator, perform_search
from src.GJOBS.pagination import expand_more_jobs
from src.GJOBS.report import format_report
from src.GJOBS.strategies import run_strategy_chain

# Set up logging
handlers = [logging.StreamHandler()]
if config.LOG_TO_FILE:
    config.LOG_DIR.mkdir(parents=True, exist_ok=True)
    handlers.append(logging.FileHandler(
        config.LOG_DIR / f"gjobs_scraper_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    ))

logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=handlers
)
logger = logging.getLogger(__name__)


def run_pipeline(
    session: BrowserSession,
    enricher: ResultEnricher,
    query: str = config.SEARCH_QUERY,
    summary_only: bool = config.SUMMARY_ONLY_OUTPUT,
    budget_seconds: float = config.RUN_BUDGET_SECONDS,
) -> RunResult:
    """
    Run one extraction pass on an open session.

    Only the initial search may fail the run (BootstrapError). Every later
    stage degrades: a missing Jobs tab leaves the generic results, an empty
    strategy falls through to the next, a failed lookup leaves an empty link.
    """
    deadline = time.monotonic() + budget_seconds

    perform_search(session, query)

    navigator = TabNavigator(session)
    tabs = navigator.discover_tabs()
    logger.info("Navigating to Jobs tab...")
    jobs_view = navigator.open_jobs_view(tabs)

    expand_more_jobs(session)

    records, strategy = [], ""
    try:
        records, strategy = run_strategy_chain(session.snapshot(), session.url)
    except Exception as e:
        logger.error(f"Error extracting job list: {e}")

    result = RunResult(
        query=query,
        records=records,
        tabs=tabs,
        strategy=strategy,
        jobs_view=jobs_view,
        final_url=session.url,
    )

    if not records:
        logger.info("No jobs found. The page structure might be different.")
        logger.info(f"Current page URL: {session.url}")
        if summary_only:
            return result

    if summary_only:
        selected = records[-config.SUMMARY_LIMIT:]
        start_position = len(records) - len(selected) + 1
    else:
        result.details = drill_down(session, deadline=deadline)
        result.final_url = session.url
        selected = records
        start_position = 1

    result.enriched = enricher.enrich(selected, start_position, deadline=deadline)
    return result


def main(
    query: str = config.SEARCH_QUERY,
    summary_only: bool = config.SUMMARY_ONLY_OUTPUT,
    headless: bool = config.HEADLESS,
    keep_open_seconds: int = config.KEEP_OPEN_SECONDS,
) -> Optional[RunResult]:
    """Main scraper function."""
    logger.info("=" * 80)
    logger.info("Google Jobs Scraper")
    logger.info("=" * 80)
    logger.info(f"Query: {query}")
    logger.info(f"Mode: {'summary only' if summary_only else 'full detail'}")
    logger.info("")

    with sync_playwright() as p:
        try:
            handle = open_browser(p, headless=headless)
        except BootstrapError as e:
            logger.error(f"✗ Run aborted: {e}")
            return None

        session = handle.new_session()
        enricher = ResultEnricher(handle.new_session)

        try:
            result = run_pipeline(session, enricher, query=query, summary_only=summary_only)
            print(format_report(result))

            if keep_open_seconds > 0:
                logger.info(f"Browser will stay open for {keep_open_seconds} seconds.")
                logger.info(f"Current page URL: {session.url}")
                session.wait(keep_open_seconds * 1000)
            return result

        except BootstrapError as e:
            logger.error(f"✗ Run aborted: {e}")
            return None

        except Exception as e:
            logger.error(f"Fatal error: {e}")
            import traceback
            traceback.print_exc()
            return None

        finally:
            enricher.close()
            handle.close()


if __name__ == "__main__":
    if main() is None:
        sys.exit(1)
