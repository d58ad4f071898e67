"""
Shared fixtures: a fake controlled page backed by HTML strings, and builders
for synthetic Google Jobs markup.
"""

from typing import Callable, Dict, Iterable, Optional

import pytest
from bs4 import BeautifulSoup

EMPTY_PAGE = "<html><body></body></html>"

HOME_URL = "https://www.google.com"
RESULTS_URL = "https://www.google.com/search?q=software+engineer"
JOBS_URL = "https://www.google.com/search?q=software+engineer&udm=8"


class FakeSession:
    """Stands in for BrowserSession; page state is a plain HTML string."""

    def __init__(self, pages: Optional[Dict[str, str]] = None, url: str = "about:blank",
                 html: Optional[str] = None, default_html: str = EMPTY_PAGE,
                 fail_navigation: Iterable[str] = ()):
        self.pages = dict(pages or {})
        self.default_html = default_html
        self.url = url
        self.html = html if html is not None else self.pages.get(url, default_html)
        self.fail_navigation = set(fail_navigation)  # URL fragments whose navigation raises
        self.on_activate: Optional[Callable] = None
        self.on_press: Optional[Callable] = None
        self.navigations = []
        self.activations = []
        self.typed = []
        self.pressed = []
        self.waits = []
        self.closed = False

    def load(self, html: str, url: Optional[str] = None) -> None:
        self.html = html
        if url is not None:
            self.url = url

    def navigate(self, url, wait_until="domcontentloaded", timeout=None):
        self.navigations.append(url)
        if any(fragment in url for fragment in self.fail_navigation):
            raise RuntimeError(f"net::ERR_ABORTED at {url}")
        self.load(self.pages.get(url, self.default_html), url)

    def evaluate(self, script, arg=None):
        return None

    def snapshot(self):
        return BeautifulSoup(self.html, "html.parser")

    def wait_for(self, selector, timeout=0):
        return self.snapshot().select_one(selector) is not None

    def wait(self, ms):
        self.waits.append(ms)

    def wait_for_load(self, state="networkidle", timeout=0):
        return True

    def type_text(self, selector, text, delay_range=None):
        self.typed.append((selector, text))

    def press(self, key):
        self.pressed.append(key)
        if self.on_press is not None:
            self.on_press(self, key)

    def activate(self, selector, index=0, ancestor=None, scroll=True):
        self.activations.append((selector, index, ancestor))
        if index >= len(self.snapshot().select(selector)):
            return False
        if self.on_activate is not None and self.on_activate(self, selector, index) is False:
            return False
        return True

    def close(self):
        self.closed = True


class SessionFactory:
    """Counts how many secondary pages were opened."""

    def __init__(self, **session_kwargs):
        self.session_kwargs = session_kwargs
        self.sessions = []

    def __call__(self):
        session = FakeSession(**self.session_kwargs)
        self.sessions.append(session)
        return session


def job_card(title: str, company: str = "", location: str = "", description: str = "",
             href: str = "", selected: bool = False) -> str:
    parts = [f'<div class="tNxQIb PUpOsf">{title}</div>']
    if company:
        parts.append(f'<div class="wHYlTd MKCbgd a3jPc">{company}</div>')
    if location:
        parts.append(f'<div class="wHYlTd FqK3wc MKCbgd">{location}</div>')
    if description:
        parts.append(f'<div class="Yg3bIe">{description}</div>')
    if href:
        parts.append(f'<a href="{href}">Apply on Site</a>')
    selected_attr = ' aria-selected="true"' if selected else ''
    return f'<div role="tab"{selected_attr}>{"".join(parts)}</div>'


def detail_pane(title: str, company: str, location: str, description: str, apply_href: str) -> str:
    return (
        '<div class="KPJpj">'
        f'<h2>{title}</h2>'
        f'<div class="nDc9Hc">{company}</div>'
        f'<div class="Qk80Jf">{location}</div>'
        f'<div class="s">{description}</div>'
        f'<a href="{apply_href}">Apply on company site</a>'
        '</div>'
    )


def jobs_page(cards: Iterable[str], extra: str = "") -> str:
    return f'<html><body><div id="search">{"".join(cards)}</div>{extra}</body></html>'


def results_page(jobs_href: Optional[str] = "/search?q=software+engineer&udm=8") -> str:
    tabs = [
        '<div class="hdtb-mitem"><a href="/search?q=software+engineer">All</a></div>',
        '<div class="hdtb-mitem"><a href="/search?q=software+engineer&tbm=isch">Images</a></div>',
    ]
    if jobs_href:
        tabs.append(f'<div class="hdtb-mitem"><a href="{jobs_href}">Jobs</a></div>')
    tabs.append('<div class="hdtb-mitem"><a href="/advanced">Tools</a></div>')
    return (
        '<html><body>'
        + "".join(tabs) +
        '<div id="search"><div class="g"><a href="https://example.org/article"><h3>An article</h3></a></div></div>'
        '</body></html>'
    )


HOME_PAGE = '<html><body><form><textarea name="q"></textarea></form></body></html>'

SEARCH_RESULT_PAGE = (
    '<html><body><div id="search">'
    '<div class="g"><a href="/url?q=https://careers.example.com/job/1&sa=U"><h3>Careers</h3></a></div>'
    '</div></body></html>'
)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def search_factory():
    return SessionFactory(default_html=SEARCH_RESULT_PAGE)
