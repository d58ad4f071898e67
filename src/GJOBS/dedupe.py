"""
Signature-based deduplication for job listings.

A listing's identity is its title, company and location. Links are tracked
separately because the generic extraction pass only knows the link at the
point where it must decide whether an element is new.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Tuple

SIGNATURE_SEPARATOR = "__"


def signature(title: str, company: str, location: str) -> str:
    """Identity key for a listing."""
    return SIGNATURE_SEPARATOR.join([title or "", company or "", location or ""])


@dataclass(frozen=True)
class Deduplicator:
    """Immutable record of which identity keys and links were already emitted."""

    keys: FrozenSet[str] = field(default_factory=frozenset)
    links: FrozenSet[str] = field(default_factory=frozenset)

    def seen_key(self, key: str) -> bool:
        return key in self.keys

    def seen_link(self, link: str) -> bool:
        return bool(link) and link in self.links

    def add(self, key: Optional[str] = None, link: Optional[str] = None) -> "Deduplicator":
        keys = self.keys | {key} if key else self.keys
        links = self.links | {link} if link else self.links
        return Deduplicator(keys=keys, links=links)

    def admit(self, record) -> Tuple[bool, "Deduplicator"]:
        """
        Decide whether a record is new.

        Returns:
            (True, updated deduplicator) for a new record,
            (False, unchanged deduplicator) for a repeat
        """
        key = record.identity_key
        if self.seen_key(key):
            return False, self
        return True, self.add(key=key, link=record.link or None)


def dedupe_records(records: Iterable) -> List:
    """Collapse repeats by identity key, keeping the first occurrence in order."""
    deduplicator = Deduplicator()
    unique = []
    for record in records:
        admitted, deduplicator = deduplicator.admit(record)
        if admitted:
            unique.append(record)
    return unique
