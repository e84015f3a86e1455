"""Vote tally and rating engine for the matchday engine.

Post-match ballots name one candidate per vote category. Two aggregation
modes turn the tally into attribute changes:

- threshold: any candidate with at least `threshold` votes in a category
  gets `current + step` on each mapped attribute, computed from the freshly
  read stored value rather than a blind increment.
- cumulative: per-category vote counters persist across matches; a run
  credits `floor(new/k) - floor(old/k)` steps, so re-running over ballots
  already counted credits nothing.

Aggregation stages every read and computed value in memory and hands the
caller a single AggregationBatch to commit atomically.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Iterable, Mapping, Sequence

from matchday.config import VotingConfig
from matchday.errors import AggregationError
from matchday.models import BASELINE_RATING, Attribute, Ballot, validate_attribute

if TYPE_CHECKING:
    from matchday.store import RatingStore

logger = logging.getLogger(__name__)

Tally = dict[str, dict[str, int]]
StatTable = dict[str, dict[str, float]]


@dataclass(frozen=True)
class VoteCategory:
    """A ballot question whose winner earns the mapped attributes."""

    id: str
    attributes: tuple[Attribute, ...]
    label: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Vote category id must be non-empty")
        if not self.attributes:
            raise ValueError(f"Vote category {self.id!r} maps to no attributes")
        for code in self.attributes:
            validate_attribute(code)


DEFAULT_CATEGORIES: tuple[VoteCategory, ...] = (
    VoteCategory("bomber", ("SHO",), "Best Attacker"),
    VoteCategory("midfielder", ("PAS",), "MVP"),
    VoteCategory("defender", ("DEF",), "Best Defender"),
    VoteCategory("goalkeeper", ("PHY",), "Best Goalkeeper"),
)


def tally_votes(
    ballots: Iterable[Ballot],
    categories: Sequence[VoteCategory] = DEFAULT_CATEGORIES,
    team: str | None = None,
) -> Tally:
    """Count votes per category and candidate.

    Args:
        ballots: Submitted ballots
        categories: Categories to count; votes for other keys are ignored
        team: If given, only ballots cast by that team count

    Returns:
        Mapping category id -> candidate uid -> votes (every category present)
    """
    tally: Tally = {cat.id: {} for cat in categories}
    for ballot in ballots:
        if team is not None and ballot.team != team:
            continue
        for cat in categories:
            candidate = ballot.votes.get(cat.id)
            if candidate:
                tally[cat.id][candidate] = tally[cat.id].get(candidate, 0) + 1
    return tally


def bucket_steps(old_total: int, new_total: int, threshold: int) -> int:
    """Threshold crossings earned when a counter moves from old to new."""
    return new_total // threshold - old_total // threshold


def _current(stats: Mapping[str, Mapping[str, float]], uid: str, attr: str, baseline: float) -> float:
    value = stats.get(uid, {}).get(attr)
    # A stored zero means "never set", as with the profile defaults.
    return float(value) if value else float(baseline)


def threshold_updates(
    ballots: Iterable[Ballot],
    categories: Sequence[VoteCategory],
    current_stats: Mapping[str, Mapping[str, float]],
    threshold: int,
    step: int = 1,
    baseline: float = BASELINE_RATING,
) -> StatTable:
    """New absolute attribute values for candidates meeting the threshold.

    A candidate winning two categories mapped to the same attribute still
    gains `step` once, since both updates derive from the same stored value.
    """
    tally = tally_votes(ballots, categories)
    updates: StatTable = {}
    for cat in categories:
        for uid, votes in tally[cat.id].items():
            if votes < threshold:
                continue
            for attr in cat.attributes:
                updates.setdefault(uid, {})[attr] = _current(current_stats, uid, attr, baseline) + step
    return updates


@dataclass
class BucketResult:
    deltas: StatTable
    tally: Tally
    counted: set[str] = field(default_factory=set)


def cumulative_bucket(
    ballots: Iterable[Ballot],
    categories: Sequence[VoteCategory],
    prior_tally: Mapping[str, Mapping[str, int]],
    threshold: int,
    step: int = 1,
    counted: Iterable[str] = (),
) -> BucketResult:
    """Add this batch to the running counters and credit new crossings only.

    Ballots whose key is in `counted` were added to the counters by an
    earlier run and are skipped, so running again over the same ballots (or
    a superset) never credits a crossing twice.

    Args:
        ballots: Ballots of this batch
        categories: Vote categories
        prior_tally: Persisted running counters, category -> uid -> votes
        threshold: Votes per step
        step: Attribute increase per step
        counted: Keys of ballots already in the counters

    Returns:
        BucketResult with per-candidate deltas (only non-zero ones), the
        updated running counters for every candidate touched and the keys
        of the ballots counted by this run
    """
    already = set(counted)
    fresh = [b for b in ballots if b.key not in already]
    batch = tally_votes(fresh, categories)
    deltas: StatTable = {}
    new_tally: Tally = {}
    for cat in categories:
        prior = prior_tally.get(cat.id, {})
        for uid, votes in batch[cat.id].items():
            old_total = int(prior.get(uid, 0))
            new_total = old_total + votes
            new_tally.setdefault(cat.id, {})[uid] = new_total
            steps = bucket_steps(old_total, new_total, threshold)
            if steps <= 0:
                continue
            for attr in cat.attributes:
                entry = deltas.setdefault(uid, {})
                entry[attr] = entry.get(attr, 0.0) + steps * step
    return BucketResult(deltas=deltas, tally=new_tally, counted={b.key for b in fresh})


def apply_deltas(
    current_stats: Mapping[str, Mapping[str, float]],
    deltas: Mapping[str, Mapping[str, float]],
    baseline: float = BASELINE_RATING,
) -> StatTable:
    """Absolute values to write back: stored value (or baseline) plus delta."""
    return {
        uid: {attr: _current(current_stats, uid, attr, baseline) + d for attr, d in changes.items()}
        for uid, changes in deltas.items()
    }


def is_last_submission(prior_submitted: int, total_eligible: int) -> bool:
    return prior_submitted + 1 >= total_eligible


@dataclass(frozen=True)
class SurveyProgress:
    """Ballot-collection state of one match.

    Aggregation fires on exactly one transition: the submission that brings
    `received` up to `total_eligible`, and only while stats are not yet
    calculated. The caller must apply the transition inside a single-writer
    transaction.
    """

    total_eligible: int
    received: int = 0
    stats_calculated: bool = False

    @property
    def complete(self) -> bool:
        return self.received >= self.total_eligible

    def record_submission(self) -> tuple[SurveyProgress, bool]:
        """Count one ballot; return the new state and whether to aggregate now."""
        fire = not self.complete and not self.stats_calculated and is_last_submission(
            self.received, self.total_eligible
        )
        return replace(self, received=self.received + 1), fire

    def mark_calculated(self) -> SurveyProgress:
        return replace(self, stats_calculated=True)


def missing_voters(eligible: Sequence[str], submitted: Iterable[str]) -> list[str]:
    """Eligible voters who have not submitted, in eligible order."""
    done = set(submitted)
    return [uid for uid in eligible if uid not in done]


@dataclass
class AggregationBatch:
    """Everything one aggregation run wants written, staged for a single commit."""

    match_id: str
    mode: str
    deltas: StatTable = field(default_factory=dict)
    stat_updates: StatTable = field(default_factory=dict)
    tallies: Tally = field(default_factory=dict)
    counted: set[str] = field(default_factory=set)

    @property
    def empty(self) -> bool:
        return not self.stat_updates and not self.tallies

    def to_dict(self) -> dict[str, object]:
        return {
            "match_id": self.match_id,
            "mode": self.mode,
            "deltas": self.deltas,
            "stat_updates": self.stat_updates,
            "tallies": self.tallies,
            "counted": sorted(self.counted),
        }


def _read_stats(store: RatingStore, uids: Iterable[str]) -> StatTable:
    return {uid: dict(store.read_stats(uid)) for uid in sorted(set(uids))}


def _keyed_ballots(match_id: str, ballots: Sequence[Ballot]) -> list[Ballot]:
    """Stamp `match_id` on ballots that carry none; refuse ballots of another match."""
    keyed = []
    for ballot in ballots:
        if not ballot.match_id:
            ballot = replace(ballot, match_id=match_id)
        elif ballot.match_id != match_id:
            raise AggregationError(
                f"Ballot of {ballot.voter!r} belongs to match {ballot.match_id!r}, not {match_id!r}"
            )
        keyed.append(ballot)
    return keyed


def aggregate_match(
    match_id: str,
    ballots: Sequence[Ballot],
    store: RatingStore,
    categories: Sequence[VoteCategory] = DEFAULT_CATEGORIES,
    config: VotingConfig | None = None,
) -> AggregationBatch:
    """Stage the rating changes of one completed ballot set.

    Reads every needed stat (and, in cumulative mode, every running counter
    and the keys of ballots already counted) before computing anything. Any
    read failure raises AggregationError and nothing is staged; the store is
    never written here.

    Args:
        match_id: Identity of the match; stamped on ballots that carry none
            and used by the store to refuse repeats
        ballots: All ballots of the match
        store: Source of current stats and running counters
        categories: Vote categories
        config: Aggregation mode and constants

    Returns:
        AggregationBatch ready for `store.commit`
    """
    config = config or VotingConfig()
    ballots = _keyed_ballots(match_id, ballots)
    candidates = {
        uid for per_cat in tally_votes(ballots, categories).values() for uid in per_cat
    }

    prior: Tally = defaultdict(dict)
    counted: set[str] = set()
    try:
        current = _read_stats(store, candidates)
        if config.mode == "cumulative":
            for cat in categories:
                for uid in candidates:
                    prior[cat.id][uid] = int(store.read_tally(cat.id, uid))
            counted = set(store.read_counted())
    except Exception as exc:
        logger.warning("Aggregation for match %s aborted on read: %s", match_id, exc)
        raise AggregationError(f"Aggregation for match {match_id!r} aborted: {exc}") from exc

    if config.mode == "threshold":
        updates = threshold_updates(
            ballots, categories, current, config.threshold, config.step, config.baseline
        )
        deltas = {
            uid: {a: v - _current(current, uid, a, config.baseline) for a, v in changes.items()}
            for uid, changes in updates.items()
        }
        batch = AggregationBatch(match_id, config.mode, deltas=deltas, stat_updates=updates)
    else:
        result = cumulative_bucket(
            ballots, categories, prior, config.threshold, config.step, counted
        )
        batch = AggregationBatch(
            match_id,
            config.mode,
            deltas=result.deltas,
            stat_updates=apply_deltas(current, result.deltas, config.baseline),
            tallies=result.tally,
            counted=result.counted,
        )

    logger.info(
        "Staged %s aggregation for match %s: %d ballots, %d players updated",
        config.mode, match_id, len(ballots), len(batch.stat_updates),
    )
    return batch
