"""Slot assigner: lays starters out on a formation's slots."""

from __future__ import annotations

import math
from typing import Mapping, Sequence

from matchday.models import Attendee, SlotAssignment
from matchday.positions import cost
from matchday.selection import position_of, rating_of

# Cost dominates rating in the best-fit score.
COST_SCALE = 100


def assign_slots(
    starters: Sequence[str],
    slots: Sequence[str],
    attendees_by_uid: Mapping[str, Attendee],
) -> list[SlotAssignment]:
    """Assign starters to slots, one entry per slot in slot order.

    Pass 1 fills each slot with the highest-rated unassigned starter whose
    canonical position matches exactly. Pass 2 fills the remaining slots in
    order with the starter minimizing `cost * 100 - rating`, never crossing
    the GK/outfield boundary. Slots nobody can fill stay None.

    Args:
        starters: Starter uids of one team
        slots: Canonical slot positions of the formation
        attendees_by_uid: Lookup for ratings and positions

    Returns:
        List of SlotAssignment, same length and order as `slots`
    """
    available = list(starters)
    picked: list[str | None] = [None] * len(slots)

    for i, slot in enumerate(slots):
        candidates = [uid for uid in available if position_of(uid, attendees_by_uid) == slot]
        if candidates:
            best = max(candidates, key=lambda uid: rating_of(uid, attendees_by_uid))
            picked[i] = best
            available.remove(best)

    for i, slot in enumerate(slots):
        if picked[i] is not None or not available:
            continue
        best_pick: str | None = None
        min_score = math.inf
        for uid in available:
            c = cost(slot, position_of(uid, attendees_by_uid))
            if math.isinf(c):
                continue
            score = c * COST_SCALE - rating_of(uid, attendees_by_uid)
            if score < min_score:
                min_score = score
                best_pick = uid
        if best_pick is not None:
            picked[i] = best_pick
            available.remove(best_pick)

    return [SlotAssignment(slot=slot, uid=uid) for slot, uid in zip(slots, picked)]
