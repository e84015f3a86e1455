"""Squad builder for the matchday engine.

Composes partition, starter selection and slot assignment into a full
two-team squad, plus small display helpers.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping, Sequence

import numpy as np

from matchday.assignment import assign_slots
from matchday.formations import DEFAULT_FORMATION, resolve_formation
from matchday.models import Attendee, Squad, TeamSquad, attendees_by_uid
from matchday.partition import partition
from matchday.selection import select_starters

logger = logging.getLogger(__name__)

_PARENTHESISED = re.compile(r"\s*\([^)]*\)\s*")


def _build_side(
    roster: list[str], slots: Sequence[str], lookup: Mapping[str, Attendee]
) -> TeamSquad:
    starters, _ = select_starters(roster, lookup, len(slots))
    layout = assign_slots(starters, slots, lookup)
    # Starters no slot could take (e.g. a second keeper) sit on the bench.
    placed = {s.uid for s in layout if s.uid is not None}
    bench = [uid for uid in roster if uid not in placed]
    return TeamSquad(roster=list(roster), slots=layout, bench=bench)


def build_squad(
    attendees: Sequence[Attendee],
    pins: Mapping[str, str] | None = None,
    formation_a: str = DEFAULT_FORMATION,
    formation_b: str = DEFAULT_FORMATION,
    rng: np.random.Generator | None = None,
) -> Squad:
    """Build a full two-team squad.

    Safe to call repeatedly (e.g. on every shuffle); each call gives a new
    random split unless `rng` is seeded or every attendee is pinned.

    Args:
        attendees: Attendees of the match
        pins: Sparse uid -> team label overrides
        formation_a: Formation name for team A
        formation_b: Formation name for team B
        rng: Random number generator for the shuffle

    Returns:
        Squad with rosters, slot layouts and benches for both teams
    """
    lookup = attendees_by_uid(attendees)
    name_a, slots_a = resolve_formation(formation_a)
    name_b, slots_b = resolve_formation(formation_b)

    team_a, team_b = partition(attendees, pins, rng)
    squad = Squad(
        formations={"A": name_a, "B": name_b},
        sides={
            "A": _build_side(team_a, slots_a, lookup),
            "B": _build_side(team_b, slots_b, lookup),
        },
    )
    logger.debug(
        "Built squad %s vs %s: average OVR %d vs %d",
        name_a, name_b, average_ovr(team_a, lookup), average_ovr(team_b, lookup),
    )
    return squad


def average_ovr(uids: Sequence[str], lookup: Mapping[str, Attendee]) -> int:
    """Rounded mean rating of a team; 0 for an empty team, unknown uids count as 0."""
    if not uids:
        return 0
    total = sum(lookup[uid].rating if uid in lookup else 0 for uid in uids)
    return int(total / len(uids) + 0.5)


def clean_name(name: object) -> str:
    """Strip parenthesised suffixes such as "Kim (CB)" -> "Kim"."""
    return _PARENTHESISED.sub("", str(name or "")).strip()
