from __future__ import annotations

from typing import Mapping, Sequence

from matchday.models import BASELINE_RATING, Attendee
from matchday.positions import CanonicalPosition, canonicalize


def rating_of(uid: str, attendees_by_uid: Mapping[str, Attendee]) -> int:
    attendee = attendees_by_uid.get(uid)
    return attendee.rating if attendee is not None else BASELINE_RATING


def position_of(uid: str, attendees_by_uid: Mapping[str, Attendee]) -> CanonicalPosition:
    attendee = attendees_by_uid.get(uid)
    return attendee.canonical_position if attendee is not None else canonicalize(None)


def select_starters(
    roster: Sequence[str],
    attendees_by_uid: Mapping[str, Attendee],
    needed: int,
) -> tuple[list[str], list[str]]:
    """Pick `needed` starters from a team roster; everyone else is bench.

    The best goalkeeper always starts when the team has one. Remaining
    places go by rating, highest first, across spare goalkeepers and field
    players alike. A short roster simply starts everyone.
    """
    if needed <= 0:
        return [], list(roster)

    def by_rating(uids: list[str]) -> list[str]:
        return sorted(uids, key=lambda uid: rating_of(uid, attendees_by_uid), reverse=True)

    keepers = by_rating([uid for uid in roster if position_of(uid, attendees_by_uid) == "GK"])
    field_players = by_rating([uid for uid in roster if position_of(uid, attendees_by_uid) != "GK"])

    starters: list[str] = keepers[:1]
    pool = by_rating(keepers[1:] + field_players)
    starters.extend(pool[: needed - len(starters)])

    chosen = set(starters)
    bench = [uid for uid in roster if uid not in chosen]
    return starters, bench
