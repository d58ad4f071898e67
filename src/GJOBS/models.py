"""
Data models for Google Jobs (GJOBS) extraction results.

Records are immutable: every pipeline stage returns new collections instead
of editing what an earlier stage produced.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional

from src.GJOBS.dedupe import signature


@dataclass(frozen=True)
class JobRecord:
    """One job listing as found on the results view."""

    title: str
    company: str = ""
    location: str = ""
    description: str = ""
    link: str = ""
    apply_link: str = ""

    @property
    def identity_key(self) -> str:
        return signature(self.title, self.company, self.location)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class TabDescriptor:
    """A selectable category (All, Images, Jobs, ...) on the search page."""

    name: str
    href: str = ""
    aria_label: str = ""


@dataclass(frozen=True)
class AnchorRef:
    """An outbound link captured from a detail pane or job card."""

    text: str = ""
    href: str = ""


@dataclass(frozen=True)
class JobDetail:
    """Expanded view of one job, captured after activating its card."""

    index: int  # 1-based drill-down iteration
    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
    link: str = ""
    apply_link: str = ""
    content: str = ""
    anchors: List[AnchorRef] = field(default_factory=list)
    sync_score: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class EnrichedRecord:
    """A record paired with the first organic search result for it."""

    position: int  # 1-based discovery index within RunResult.records
    record: JobRecord
    search_link: str = ""


@dataclass
class RunResult:
    """Everything one invocation produced."""

    query: str
    records: List[JobRecord] = field(default_factory=list)
    enriched: List[EnrichedRecord] = field(default_factory=list)
    details: Optional[List[JobDetail]] = None
    tabs: List[TabDescriptor] = field(default_factory=list)
    strategy: str = ""
    jobs_view: bool = False
    final_url: str = ""

    def to_dict(self) -> dict:
        return asdict(self)
