"""Metrics and reporting utilities for the matchday engine.

Functions for summarizing vote results and squad balance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

import numpy as np

from matchday.models import TEAM_LABELS, Attendee, Ballot, Squad, attendees_by_uid
from matchday.voting import DEFAULT_CATEGORIES, VoteCategory, tally_votes

UNKNOWN_NAME = "(left)"


@dataclass(frozen=True)
class VoteCount:
    uid: str
    name: str
    count: int


def vote_results(
    ballots: Sequence[Ballot],
    names: Mapping[str, str],
    categories: Sequence[VoteCategory] = DEFAULT_CATEGORIES,
) -> dict[str, list[VoteCount]]:
    """Vote counts per category, most votes first.

    Args:
        ballots: Submitted ballots
        names: uid -> display name; candidates missing here show as "(left)"
        categories: Categories to report

    Returns:
        Mapping category id -> list of VoteCount (empty list when no votes)
    """
    tally = tally_votes(ballots, categories)
    return {
        cat_id: sorted(
            (VoteCount(uid, names.get(uid, UNKNOWN_NAME), n) for uid, n in counts.items()),
            key=lambda v: v.count,
            reverse=True,
        )
        for cat_id, counts in tally.items()
    }


def balance_report(squad: Squad, attendees: Sequence[Attendee]) -> dict[str, float | dict[str, float]]:
    """Summarize how evenly a squad is balanced.

    Args:
        squad: Squad from the builder
        attendees: Attendees the squad was built from

    Returns:
        Dictionary with per-team size, rating sum and mean, and the gap
        between the two rating sums
    """
    lookup = attendees_by_uid(attendees)
    report: dict[str, float | dict[str, float]] = {}
    sums = {}
    for label in TEAM_LABELS:
        ratings = np.array([lookup[uid].rating for uid in squad.teams[label] if uid in lookup], dtype=float)
        sums[label] = float(ratings.sum())
        report[label] = {
            "size": float(ratings.size),
            "rating_sum": sums[label],
            "rating_mean": float(ratings.mean()) if ratings.size else 0.0,
            "starters": float(len(squad.sides[label].starters)),
            "bench": float(len(squad.bench[label])),
        }
    report["rating_gap"] = abs(sums["A"] - sums["B"])
    return report
