"""Outcome counting and report formatting."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Tuple

from .models import OutcomeKey, ParseOutcome


class OutcomeAggregator:
    """Tallies outcomes per (outcome, extension) and renders a sorted report."""

    def __init__(self) -> None:
        self._counts: Counter[OutcomeKey] = Counter()

    def record(self, outcome: ParseOutcome, extension: str) -> None:
        self._counts[OutcomeKey(outcome, extension)] += 1

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    @property
    def counts(self) -> Dict[OutcomeKey, int]:
        return dict(self._counts)

    def rows(self) -> List[Tuple[int, str]]:
        """Return ``(count, key)`` pairs ordered by the key's string form."""
        keyed = [(str(key), count) for key, count in self._counts.items()]
        return [(count, key) for key, count in sorted(keyed)]

    def render(self) -> List[str]:
        return [f"{count:>10} {key}" for count, key in self.rows()]


__all__ = ["OutcomeAggregator"]
