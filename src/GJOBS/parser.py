"""
Field extraction for Google Jobs listings.

Works on BeautifulSoup snapshots of the rendered page. Each field kind owns a
ranked list of (selector, acceptance test) candidates; the first candidate
that yields acceptable text wins. Links use the preferred-anchor heuristic:
an explicit apply button, then an anchor labelled like an apply/view action,
then whatever anchor comes first.
"""

import re
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional
from urllib.parse import urljoin

import soupsieve as sv
from bs4 import Tag

from src.GJOBS import config
from src.GJOBS.models import AnchorRef

RELATIVE_TIME_RE = re.compile(r'^\d+.*ago$', re.IGNORECASE)
CITY_REGION_RE = re.compile(r'^[A-Z][a-z]+,\s*[A-Z]')


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace; empty string for missing text."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()


def node_text(node: Optional[Tag]) -> str:
    """Visible text of a node on a single line."""
    if node is None:
        return ""
    return clean_text(node.get_text(" "))


def node_lines(node: Optional[Tag]) -> List[str]:
    """Non-empty text lines of a node, in document order."""
    if node is None:
        return []
    lines = (clean_text(line) for line in node.get_text("\n").split("\n"))
    return [line for line in lines if line]


def node_block_text(node: Optional[Tag]) -> str:
    """Multi-line text of a node (one line per text run)."""
    return "\n".join(node_lines(node))


def closest(node: Optional[Tag], selector: str) -> Optional[Tag]:
    """Nearest node, starting with `node` itself, matching `selector`."""
    if node is None:
        return None
    return sv.closest(selector, node)


def resolve_href(anchor: Optional[Tag], base_url: str = "") -> str:
    """Absolute href of an anchor (browsers expose anchor.href the same way)."""
    if anchor is None:
        return ""
    href = (anchor.get("href") or "").strip()
    if not href:
        return ""
    return urljoin(base_url, href) if base_url else href


def is_relative_time(text: str) -> bool:
    """True for strings like '2 days ago'."""
    return bool(RELATIVE_TIME_RE.match(text.strip()))


def mentions_place(text: str) -> bool:
    lower = text.lower()
    return any(place in lower for place in config.PLACE_KEYWORDS)


def looks_like_location(text: str) -> bool:
    """Place or work-mode vocabulary, or a 'City, Region' shape."""
    lower = text.lower()
    if mentions_place(text) or any(mode in lower for mode in config.WORK_MODE_KEYWORDS):
        return True
    return bool(CITY_REGION_RE.match(text))


def is_company_text(text: str) -> bool:
    return (
        len(text) < config.MAX_COMPANY_LENGTH
        and not mentions_place(text)
        and not is_relative_time(text)
    )


def is_description_text(text: str) -> bool:
    return len(text) >= config.MIN_DESCRIPTION_LENGTH and not is_relative_time(text)


def _accept_any(text: str) -> bool:
    return True


class FieldStrategy(NamedTuple):
    """One ranked candidate for a field."""
    selector: str
    accept: Callable[[str], bool] = _accept_any
    every_match: bool = False  # Try all matches, not only the first


def _ranked(selectors: Iterable[str], accept: Callable[[str], bool] = _accept_any,
            every_match: bool = False) -> List[FieldStrategy]:
    return [FieldStrategy(selector, accept, every_match) for selector in selectors]


# Stable markers of the jobs view
STABLE_FIELDS: Dict[str, List[FieldStrategy]] = {
    "title": _ranked([config.TITLE_MARKER_SELECTOR]),
    "company": _ranked([config.COMPANY_MARKER_SELECTOR]),
    "location": _ranked([config.LOCATION_MARKER_SELECTOR]),
    "description": _ranked(config.DESCRIPTION_SELECTORS),
}


# Generic shapes seen across result layouts
GENERIC_FIELDS: Dict[str, List[FieldStrategy]] = {
    "title": _ranked(config.TITLE_SELECTORS),
    "company": _ranked(config.COMPANY_SELECTORS, is_company_text),
    "location": _ranked(config.LOCATION_SELECTORS, looks_like_location, every_match=True),
    "description": _ranked(config.FALLBACK_DESCRIPTION_SELECTORS, is_description_text),
}


def _matches_vocabulary(anchor: Tag) -> bool:
    text = node_text(anchor).lower()
    aria = (anchor.get("aria-label") or "").lower()
    return any(word in text or word in aria for word in config.PREFERRED_ANCHOR_VOCABULARY)


def _is_apply_button(anchor: Tag) -> bool:
    return sv.match(config.APPLY_BUTTON_SELECTOR, anchor)


def find_preferred_anchor(root: Optional[Tag]) -> Optional[Tag]:
    """Apply button, else the first anchor labelled apply / view job / learn more."""
    if root is None:
        return None
    special = root.select_one(config.APPLY_BUTTON_SELECTOR)
    if special is not None and special.get("href"):
        return special
    for anchor in root.select("a[href]"):
        if _matches_vocabulary(anchor):
            return anchor
    return None


def preferred_link(root: Optional[Tag], base_url: str = "") -> str:
    """Preferred anchor's href, falling back to the first anchor present."""
    if root is None:
        return ""
    anchor = find_preferred_anchor(root) or root.select_one("a[href]")
    return resolve_href(anchor, base_url)


def first_link(root: Optional[Tag], base_url: str = "") -> str:
    """Apply button href, else the first anchor's href."""
    if root is None:
        return ""
    special = root.select_one(config.APPLY_BUTTON_SELECTOR)
    if special is not None and special.get("href"):
        return resolve_href(special, base_url)
    return resolve_href(root.select_one("a[href]"), base_url)


def collect_preferred_anchors(root: Optional[Tag], base_url: str = "") -> List[AnchorRef]:
    """Every apply-like anchor under `root`, in document order."""
    if root is None:
        return []
    anchors = []
    for anchor in root.select("a"):
        if not (_is_apply_button(anchor) or _matches_vocabulary(anchor)):
            continue
        text = node_text(anchor) or clean_text(anchor.get("aria-label"))
        href = resolve_href(anchor, base_url)
        if text or href:
            anchors.append(AnchorRef(text=text, href=href))
    return anchors


def extract_field(container: Optional[Tag], kind: str, base_url: str = "",
                  table: Optional[Dict[str, List[FieldStrategy]]] = None,
                  exclude: Iterable[str] = ()) -> str:
    """
    Extract one field from a listing container.

    Args:
        container: Listing container (a Tag from a page snapshot)
        kind: title, company, location, description, link or anchor
        base_url: Used to resolve relative hrefs for link kinds
        table: Ranked strategies per kind (defaults to the generic shapes)
        exclude: Texts that must not be returned (fields already captured)

    Returns:
        The first acceptable text, or an empty string
    """
    if container is None:
        return ""
    if kind == "link":
        return preferred_link(container, base_url)
    if kind == "anchor":
        return first_link(container, base_url)

    strategies = (table or GENERIC_FIELDS).get(kind)
    if strategies is None:
        raise ValueError(f"Unknown field kind: {kind}")

    excluded = {text for text in exclude if text}
    for strategy in strategies:
        nodes = container.select(strategy.selector) if strategy.every_match else [container.select_one(strategy.selector)]
        for node in nodes:
            text = node_text(node)
            if text and text not in excluded and strategy.accept(text):
                return text
    return ""


def pick_text(root: Optional[Tag], selectors: Iterable[str]) -> str:
    """First non-empty text among `selectors` under `root`."""
    if root is None:
        return ""
    for selector in selectors:
        text = node_text(root.select_one(selector))
        if text:
            return text
    return ""


def first_match(soup: Tag, selectors: Iterable[str]) -> Optional[Tag]:
    """First selector in rank order with a match anywhere in the snapshot."""
    for selector in selectors:
        node = soup.select_one(selector)
        if node is not None:
            return node
    return None
