"""
Controlled-page layer for the Google Jobs scraper.

BrowserSession is the only place that talks to Playwright. The rest of the
scraper reads the page through snapshot() (a BeautifulSoup tree of the
rendered DOM) and acts on it through navigate/activate/type_text/wait calls,
so it can be driven by a fake session in tests.
"""

import logging
import os
import random
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from bs4 import BeautifulSoup
from playwright.sync_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
)

from src.GJOBS import config

logger = logging.getLogger(__name__)

# Click the index-th match (or its nearest `ancestor`) after scrolling it into view
ACTIVATE_SCRIPT = """
({selector, index, ancestor, scroll}) => {
  const nodes = document.querySelectorAll(selector);
  const target = nodes[index];
  if (!target) {
    return false;
  }
  const clickable = (ancestor && target.closest(ancestor)) || target;
  if (scroll) {
    clickable.scrollIntoView({ behavior: 'smooth', block: 'center' });
  }
  clickable.click();
  return true;
}
"""


class BootstrapError(RuntimeError):
    """The browser or the initial search page is unavailable."""


class BrowserSession:
    """Capability wrapper around one Playwright page."""

    def __init__(self, page: Page, timeout: int = config.TIMEOUT):
        self.page = page
        self.timeout = timeout

    @property
    def url(self) -> str:
        return self.page.url

    def navigate(self, url: str, wait_until: str = "domcontentloaded", timeout: Optional[int] = None) -> None:
        """Load a URL; raises Playwright errors on failure."""
        self.page.goto(url, wait_until=wait_until, timeout=timeout or self.timeout)

    def evaluate(self, script: str, arg: Any = None) -> Any:
        return self.page.evaluate(script, arg)

    def snapshot(self) -> BeautifulSoup:
        """Content tree of the page as currently rendered."""
        return BeautifulSoup(self.page.content(), 'html.parser')

    def wait_for(self, selector: str, timeout: int = config.WAIT_TIMEOUT) -> bool:
        """Wait for a selector; False on timeout."""
        try:
            self.page.wait_for_selector(selector, timeout=timeout)
            return True
        except PlaywrightTimeoutError:
            logger.debug(f"Timed out waiting for {selector}")
            return False

    def wait(self, ms: float) -> None:
        self.page.wait_for_timeout(ms)

    def wait_for_load(self, state: str = "networkidle", timeout: int = config.WAIT_TIMEOUT) -> bool:
        """Wait for a load state; False on timeout."""
        try:
            self.page.wait_for_load_state(state, timeout=timeout)
            return True
        except PlaywrightTimeoutError:
            return False

    def type_text(self, selector: str, text: str, delay_range: Tuple[int, int] = config.TYPING_DELAY_MS) -> None:
        """Type one character at a time with a random per-key delay."""
        for char in text:
            self.page.type(selector, char, delay=random.uniform(*delay_range))

    def press(self, key: str) -> None:
        self.page.keyboard.press(key)

    def activate(self, selector: str, index: int = 0, ancestor: Optional[str] = None, scroll: bool = True) -> bool:
        """Click the index-th element matching `selector`; False if it is gone."""
        return bool(self.page.evaluate(
            ACTIVATE_SCRIPT,
            {"selector": selector, "index": index, "ancestor": ancestor, "scroll": scroll},
        ))

    def close(self) -> None:
        self.page.close()


def find_chrome_executable() -> Optional[str]:
    """Installed Chrome binary, if any (Playwright's bundled Chromium otherwise)."""
    if config.CHROME_PATH:
        return config.CHROME_PATH if Path(config.CHROME_PATH).exists() else None

    local_app_data = os.getenv("LOCALAPPDATA", "")
    candidates = [
        r"C:\Program Files\Google\Chrome\Application\chrome.exe",
        r"C:\Program Files (x86)\Google\Chrome\Application\chrome.exe",
        str(Path(local_app_data) / "Google" / "Chrome" / "Application" / "chrome.exe") if local_app_data else "",
        "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
        "/usr/bin/google-chrome",
        "/usr/bin/google-chrome-stable",
    ]
    for path in candidates:
        if path and Path(path).exists():
            return path
    return None


def list_chrome_profiles(user_data_dir: Path) -> List[str]:
    """Profile directory names, Default first."""
    profiles = []
    try:
        for item in user_data_dir.iterdir():
            if not item.is_dir():
                continue
            if item.name == "Default" or item.name.startswith("Profile ") or (item / "Preferences").exists():
                profiles.append(item.name)
    except OSError as e:
        logger.error(f"Error reading profiles: {e}")

    return sorted(profiles, key=lambda name: (name != "Default", name))


def select_profile(profiles: List[str], preferred: str = config.CHROME_PROFILE) -> Optional[str]:
    if preferred in profiles:
        return preferred
    return profiles[0] if profiles else None


class BrowserHandle:
    """Launched browser plus the factory for additional pages."""

    def __init__(self, context: BrowserContext, browser: Optional[Browser] = None):
        self.context = context
        self.browser = browser

    def new_session(self) -> BrowserSession:
        return BrowserSession(self.context.new_page())

    def close(self) -> None:
        try:
            self.context.close()
        finally:
            if self.browser is not None:
                self.browser.close()
        logger.info("Browser closed")


def open_browser(playwright: Playwright, headless: bool = config.HEADLESS) -> BrowserHandle:
    """
    Launch Chrome (or bundled Chromium).

    With CHROME_USER_DATA_DIR set, the configured profile is used through a
    persistent context; if that launch fails, a temporary profile is used.

    Raises:
        BootstrapError: if no browser can be started
    """
    executable = find_chrome_executable()
    context_options = {"viewport": config.VIEWPORT, "user_agent": config.USER_AGENT}
    logger.info(f"Chrome path: {executable or 'bundled Chromium'}")

    user_data_dir = Path(config.CHROME_USER_DATA_DIR) if config.CHROME_USER_DATA_DIR else None
    if user_data_dir is not None and user_data_dir.exists():
        profiles = list_chrome_profiles(user_data_dir)
        logger.info(f"Available profiles: {profiles}")
        profile = select_profile(profiles)
        if profile:
            try:
                context = playwright.chromium.launch_persistent_context(
                    str(user_data_dir),
                    headless=headless,
                    executable_path=executable,
                    args=config.BROWSER_ARGS + [f"--profile-directory={profile}"],
                    **context_options,
                )
                logger.info(f"Chrome launched with profile: {profile}")
                return BrowserHandle(context)
            except PlaywrightError as e:
                logger.warning(f"Failed to launch with existing profile: {e}")
                logger.info("Trying with temporary profile...")

    try:
        browser = playwright.chromium.launch(
            headless=headless,
            executable_path=executable,
            args=config.BROWSER_ARGS,
        )
        context = browser.new_context(**context_options)
    except PlaywrightError as e:
        raise BootstrapError(f"Failed to launch browser: {e}") from e

    logger.info("Browser launched with temporary profile")
    return BrowserHandle(context, browser)


SessionFactory = Callable[[], BrowserSession]
