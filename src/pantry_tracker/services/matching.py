"""Lexical matching of ingredient names against pantry names."""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pantry_tracker.domain.inventory import round_half_up

EXACT_SCORE = 100
_CONTAINS_BASE = 70
_CONTAINED_BASE = 60
_MAX_LENGTH_PENALTY = 30

_AMPERSAND = re.compile(r"&")
_NON_ALNUM = re.compile(r"[^a-z0-9 ]+")
_WHITESPACE = re.compile(r"\s+")

T = TypeVar("T")


def canonicalize(text: str) -> str:
    """Normalize a free-text name into a comparable key.

    An empty result means the name cannot be matched.
    """
    lowered = _AMPERSAND.sub(" and ", text.lower())
    cleaned = _NON_ALNUM.sub(" ", lowered)
    return _WHITESPACE.sub(" ", cleaned).strip()


def match_score(candidate_key: str, target_key: str) -> int | None:
    """Score a candidate key against a target key.

    Returns ``None`` when the candidate is ineligible: either key is empty or
    neither contains the other.
    """
    if not candidate_key or not target_key:
        return None
    if candidate_key == target_key:
        return EXACT_SCORE
    if target_key in candidate_key:
        penalty = min(_MAX_LENGTH_PENALTY, len(candidate_key) - len(target_key))
        return _CONTAINS_BASE - penalty
    if candidate_key in target_key:
        penalty = min(_MAX_LENGTH_PENALTY, len(target_key) - len(candidate_key))
        return _CONTAINED_BASE - penalty
    return None


@dataclass
class CanonicalIndex(Generic[T]):
    """Ordered entries keyed by canonical name.

    Iteration order is the insertion order of ``add``; every lookup honours it.
    """

    _entries: list[tuple[str, T]] = field(default_factory=list)
    _positions: dict[str, list[int]] = field(default_factory=dict)

    @classmethod
    def build(
        cls, items: Iterable[T], name_of: Callable[[T], str]
    ) -> "CanonicalIndex[T]":
        """Index items by the canonical form of their names."""
        index: CanonicalIndex[T] = cls()
        for item in items:
            index.add(name_of(item), item)
        return index

    def add(self, name: str, item: T) -> None:
        """Append an item; items with an empty key are never matched."""
        key = canonicalize(name)
        self._positions.setdefault(key, []).append(len(self._entries))
        self._entries.append((key, item))

    def __len__(self) -> int:
        return len(self._entries)

    def candidates(self, target_key: str) -> list[tuple[T, int]]:
        """Return every eligible item with its score, in listing order."""
        matches: list[tuple[T, int]] = []
        for key, item in self._entries:
            score = match_score(key, target_key)
            if score is not None:
                matches.append((item, score))
        return matches

    def best(
        self, target_key: str, where: Callable[[T], bool] | None = None
    ) -> T | None:
        """Pick the single best item for a target key.

        Highest score wins, ties keep the first listed item, and the scan
        stops at the first exact match.
        """
        if not target_key:
            return None
        for position in self._positions.get(target_key, []):
            item = self._entries[position][1]
            if where is None or where(item):
                return item
        best_item: T | None = None
        best_score = -1
        for key, item in self._entries:
            if where is not None and not where(item):
                continue
            score = match_score(key, target_key)
            if score is None or score <= best_score:
                continue
            best_item, best_score = item, score
            if score >= EXACT_SCORE:
                break
        return best_item


def unique_by_canonical(names: Iterable[str], limit: int) -> list[str]:
    """Keep the first spelling of each canonical name, up to ``limit``."""
    unique: list[str] = []
    seen: set[str] = set()
    for name in names:
        if len(unique) >= limit:
            break
        key = canonicalize(name)
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(name)
    return unique


def coverage_percent(pantry_names: Iterable[str], used_names: list[str]) -> int:
    """Percentage of used names found verbatim (canonically) in the pantry."""
    if not used_names:
        return 0
    pantry_keys = {key for key in map(canonicalize, pantry_names) if key}
    matched = sum(1 for name in used_names if canonicalize(name) in pantry_keys)
    return int(round_half_up(matched / len(used_names) * 100))
