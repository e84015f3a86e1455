"""Rating store interface and an in-memory implementation.

The real persistence layer lives outside this package; anything providing
the RatingStore methods can back `aggregate_match`.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Protocol

from matchday.errors import DuplicateAggregationError
from matchday.models import validate_attribute
from matchday.voting import AggregationBatch

logger = logging.getLogger(__name__)


class RatingStore(Protocol):
    def read_stats(self, uid: str) -> Mapping[str, float]: ...

    def read_tally(self, category: str, uid: str) -> int: ...

    def read_counted(self) -> set[str]: ...

    def commit(self, batch: AggregationBatch) -> None: ...


class InMemoryRatingStore:
    """Dictionary-backed store whose commit applies a whole batch or nothing.

    A match can be committed once; a second commit for the same match id
    raises DuplicateAggregationError, mirroring the single-writer guard the
    real persistence layer must provide.
    """

    def __init__(
        self,
        stats: Mapping[str, Mapping[str, float]] | None = None,
        tallies: Mapping[str, Mapping[str, int]] | None = None,
        counted: set[str] | None = None,
    ) -> None:
        self.stats: dict[str, dict[str, float]] = {
            uid: {validate_attribute(a): float(v) for a, v in values.items()}
            for uid, values in (stats or {}).items()
        }
        self.tallies: dict[str, dict[str, int]] = {
            cat: dict(counts) for cat, counts in (tallies or {}).items()
        }
        self.counted: set[str] = set(counted or ())
        self.committed_matches: set[str] = set()

    def read_stats(self, uid: str) -> Mapping[str, float]:
        return dict(self.stats.get(uid, {}))

    def read_tally(self, category: str, uid: str) -> int:
        return self.tallies.get(category, {}).get(uid, 0)

    def read_counted(self) -> set[str]:
        return set(self.counted)

    def commit(self, batch: AggregationBatch) -> None:
        if batch.match_id in self.committed_matches:
            raise DuplicateAggregationError(batch.match_id)

        # Build the next state fully before swapping it in.
        stats = copy.deepcopy(self.stats)
        for uid, values in batch.stat_updates.items():
            entry = stats.setdefault(uid, {})
            for attr, value in values.items():
                entry[validate_attribute(attr)] = float(value)
        tallies = copy.deepcopy(self.tallies)
        for cat, counts in batch.tallies.items():
            tallies.setdefault(cat, {}).update(counts)

        self.stats = stats
        self.tallies = tallies
        self.counted = self.counted | batch.counted
        self.committed_matches.add(batch.match_id)
        logger.info(
            "Committed match %s: %d players, %d tally categories",
            batch.match_id, len(batch.stat_updates), len(batch.tallies),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "stats": self.stats,
            "tallies": self.tallies,
            "counted": sorted(self.counted),
            "committed_matches": sorted(self.committed_matches),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InMemoryRatingStore:
        store = cls(data.get("stats"), data.get("tallies"), set(data.get("counted", ())))
        store.committed_matches = set(data.get("committed_matches", ()))
        return store

    @classmethod
    def load(cls, path: Path) -> InMemoryRatingStore:
        return cls.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))

    def save(self, path: Path) -> None:
        Path(path).write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
