"""Roster partitioner: splits attendees into two rating-balanced teams."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

import numpy as np

from matchday.models import TEAM_LABELS, Attendee
from matchday.sampling import fisher_yates_shuffle

logger = logging.getLogger(__name__)


def partition(
    attendees: Sequence[Attendee],
    pins: Mapping[str, str] | None = None,
    rng: np.random.Generator | None = None,
) -> tuple[list[str], list[str]]:
    """Split attendees into team A and team B.

    Pinned attendees go straight to their team. The rest are shuffled and
    then walked once, each joining whichever team currently has the lower
    rating sum (ties favor A). The result is close to balanced but not
    optimal, and differs between calls unless `rng` is seeded.

    Args:
        attendees: Attendees of the match
        pins: Sparse uid -> "A"/"B" overrides; other labels are ignored
        rng: Random number generator. If None, uses system entropy.

    Returns:
        Tuple (team_a_uids, team_b_uids)
    """
    if rng is None:
        rng = np.random.default_rng()
    pins = pins or {}

    team_a = [a.uid for a in attendees if pins.get(a.uid) == "A"]
    team_b = [a.uid for a in attendees if pins.get(a.uid) == "B"]
    unpinned = [a for a in attendees if pins.get(a.uid) not in TEAM_LABELS]

    by_uid = {a.uid: a for a in attendees}
    total_a = sum(by_uid[uid].rating for uid in team_a)
    total_b = sum(by_uid[uid].rating for uid in team_b)

    for attendee in fisher_yates_shuffle(rng, unpinned):
        if total_a <= total_b:
            team_a.append(attendee.uid)
            total_a += attendee.rating
        else:
            team_b.append(attendee.uid)
            total_b += attendee.rating

    logger.debug(
        "Partitioned %d attendees (%d pinned): A=%d (sum %d), B=%d (sum %d)",
        len(attendees), len(attendees) - len(unpinned),
        len(team_a), total_a, len(team_b), total_b,
    )
    return team_a, team_b
