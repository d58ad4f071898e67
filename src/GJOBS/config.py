"""
Configuration settings for the Google Jobs (GJOBS) scraper.

Selectors and vocabularies live here so the extraction heuristics stay
data-driven. Runtime flags are read from the environment (and an optional
.env file in the project root).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOG_DIR = PROJECT_ROOT / "logs" / "GJOBS"

load_dotenv(PROJECT_ROOT / ".env")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() not in ("false", "0", "no", "off")


# Base URLs
BASE_URL = "https://www.google.com"
HOME_URL = BASE_URL
SEARCH_URL = f"{BASE_URL}/search"

SEARCH_QUERY = os.getenv("SEARCH_QUERY", "Software Engineer vacancies in Sri Lanka")

# Run mode: summary-only unless explicitly disabled
SUMMARY_ONLY_OUTPUT = _env_flag("SUMMARY_ONLY_OUTPUT", True)
SUMMARY_LIMIT = 5  # Last N records shown/enriched in summary mode

# Browser settings
HEADLESS = _env_flag("HEADLESS", False)
CHROME_PATH = os.getenv("CHROME_PATH")
CHROME_USER_DATA_DIR = os.getenv("CHROME_USER_DATA_DIR")
CHROME_PROFILE = os.getenv("CHROME_PROFILE", "Profile 1")
VIEWPORT = {"width": 1920, "height": 1080}
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

# Timing (milliseconds unless noted)
TIMEOUT = 30000  # Navigation timeout
WAIT_TIMEOUT = 10000  # Wait-for-selector timeout
CONSENT_TIMEOUT = 3000
SEARCH_SETTLE = 2000  # After search results appear
TAB_SETTLE = 2000  # After navigating to the jobs tab
TAB_CLICK_SETTLE = 3000  # After clicking the jobs tab
PAGINATION_DELAY = 2000  # Before looking for "more jobs"
PAGINATION_CLICK_SETTLE = 3000  # Fixed pause after clicking "more jobs"
PAGINATION_SETTLE = 10000  # Load-or-timeout after that pause
DETAIL_SETTLE = 2000  # After activating a job card
ENRICH_SETTLE = 1500  # After loading an enrichment search
TYPING_DELAY_MS = (50, 150)  # Per-character typing delay range
HUMAN_PAUSE_MS = (500, 1500)

RUN_BUDGET_SECONDS = float(os.getenv("RUN_BUDGET_SECONDS", "900"))  # Whole run
KEEP_OPEN_SECONDS = int(os.getenv("KEEP_OPEN_SECONDS", "0"))

# Logging
LOG_TO_FILE = _env_flag("LOG_TO_FILE", False)

# Search page
SEARCH_BOX_SELECTOR = 'textarea[name="q"], input[name="q"]'
RESULTS_SELECTOR = "#search"
RESULTS_OR_VED_SELECTOR = "#search, [data-ved]"

CONSENT_SELECTORS = [
    'button[aria-label="Accept all"]',
    'button[aria-label="Accept everything"]',
    "#L2AGLb",
    'button[jsname="higCR"]',
    'button[aria-label="I agree"]',
]

# Tabs
TAB_SELECTORS = [
    ".hdtb-mitem a",
    'div[role="tab"] a',
    ".hdtbItm a",
    "a[data-hveid]",
    ".hdtb-mitem",
    '[role="tab"]',
]
TAB_EXCLUDED_WORDS = ("settings", "tools", "search", "google")
TAB_MAX_LENGTH = 50
COMMON_TAB_NAMES = ["All", "Images", "Videos", "News", "Shopping", "Books", "Flights", "Finance", "Jobs"]
TAB_NAME_SELECTOR = 'a, [role="tab"], [role="link"]'

JOBS_TAB_VOCABULARY = ("jobs",)
JOBS_HREF_PATTERNS = ("tbm=jobs", "udm=8")
JOBS_TAB_CLICK_SELECTORS = [
    'a[href*="tbm=jobs"]',
    'a[href*="udm=8"]',
    ".hdtb-mitem a",
    'div[role="tab"] a',
]
JOBS_TAB_MAX_LABEL = 20

# Pagination
MORE_JOBS_SELECTORS = ["a", "button", '[role="button"]', ".PwjeAc a", "[data-ved] a"]
MORE_JOBS_VOCABULARY = ("100+ more jobs", "more jobs", "see more jobs", "view more jobs")

# Listing extraction: primary strategy (stable markers)
TITLE_MARKER_SELECTOR = ".tNxQIb.PUpOsf"
CARD_CONTAINER_SELECTORS = ['[role="tab"]', ".iFjolb", ".PwjeAc", ".g", "[data-ved]", ".l9oVJb"]
COMPANY_MARKER_SELECTOR = ".wHYlTd.MKCbgd.a3jPc"
LOCATION_MARKER_SELECTOR = ".wHYlTd.FqK3wc.MKCbgd"
DESCRIPTION_SELECTORS = [
    ".NgUYpe",
    ".Yg3bIe",
    ".s",
    'span[style*="-webkit-line-clamp"]',
    ".VwiC3b",
    ".tNxQIb:not(.PUpOsf)",
]
APPLY_BUTTON_SELECTOR = (
    ".nNzjpf-cS4Vcb-PvZLI-Ueh9jd-LgbsSe-Jyewjb-tlSJBe a, "
    "a.nNzjpf-cS4Vcb-PvZLI-Ueh9jd-LgbsSe-Jyewjb-tlSJBe"
)
APPLY_BUTTON_CONTAINER = ".nNzjpf-cS4Vcb-PvZLI-Ueh9jd-LgbsSe-Jyewjb-tlSJBe"
PREFERRED_ANCHOR_VOCABULARY = ("apply", "view job", "learn more")

# Listing extraction: fallback strategy (generic shapes)
LISTING_SELECTORS = [
    ".PwjeAc",
    "[data-ved]",
    ".g",
    "[data-entityname]",
    ".hlcw0c",
    ".BjJfJf",
    "div[data-ved][data-hveid]",
    ".Qk80Jf",
    ".vNEEBe",
]
TITLE_SELECTORS = ["h3", ".BjJfJf", "h2", '[data-attrid="title"]', ".B8oxKe", ".nDc9Hc", "h4"]
COMPANY_SELECTORS = [".vNEEBe", ".Qk80Jf", ".nDc9Hc", '[data-attrid="subtitle"]', ".s", ".Yg3bIe"]
LOCATION_SELECTORS = [".Qk80Jf", ".s", ".Yg3bIe", "[data-attrid]"]
FALLBACK_DESCRIPTION_SELECTORS = [
    ".NgUYpe",
    ".Yg3bIe",
    ".s",
    'span[style*="-webkit-line-clamp"]',
    ".VwiC3b",
    '[data-attrid="description"]',
    ".PwjeAc span",
]
HEADING_SELECTOR = "h3, h4"
HEADING_PARENT_SELECTOR = "[data-ved], .g, .PwjeAc"
HEADING_LINK_HINTS = ("jobs", "google.com")

MIN_TITLE_LENGTH = 4  # Titles of 3 characters or fewer are noise
MAX_COMPANY_LENGTH = 100
MAX_HEADING_COMPANY_LENGTH = 50
MIN_DESCRIPTION_LENGTH = 20
DESCRIPTION_EXCLUDED_WORDS = ("apply", "view")

# Place vocabulary follows the default query's region; work-mode words always count
PLACE_KEYWORDS = tuple(
    word.strip().lower()
    for word in os.getenv("PLACE_KEYWORDS", "sri lanka,colombo").split(",")
    if word.strip()
)
WORK_MODE_KEYWORDS = ("remote", "hybrid")

# Detail pane
DETAIL_PANE_SELECTORS = [
    ".NgUYpe",
    ".whazf.bREpEc",
    ".KPJpj",
    ".gws-plugins-horizon-jobs__detail-page",
    '[data-ref-id="jobs-detail-pane"]',
]
ACTIVE_CARD_SELECTORS = [
    '[role="tab"][aria-selected="true"]',
    '.iFjolb[aria-selected="true"]',
    '.PwjeAc[aria-selected="true"]',
    TITLE_MARKER_SELECTOR,
]
CLICKABLE_CARD_SELECTOR = '[role="tab"], .iFjolb, .gws-plugins-horizon-jobs__li-ed, .nJibGY, .l9oVJb'
DETAIL_TITLE_SELECTORS = [TITLE_MARKER_SELECTOR, "h1", "h2"]
DETAIL_COMPANY_SELECTORS = [COMPANY_MARKER_SELECTOR, ".nDc9Hc", ".vNEEBe"]
DETAIL_LOCATION_SELECTORS = [LOCATION_MARKER_SELECTOR, ".Qk80Jf", ".s"]
DETAIL_DESCRIPTION_SELECTORS = [".NgUYpe", ".s", ".Yg3bIe"]
SYNC_MATCH_THRESHOLD = 80  # Card title vs detail title similarity

# Enrichment
RESULT_LINK_SELECTORS = [".g a", ".yuRUbf > a", "a h3"]
RESULT_FALLBACK_SELECTOR = "#search a[href]"
REDIRECT_PATH = "/url"
REDIRECT_PARAM = "q"
