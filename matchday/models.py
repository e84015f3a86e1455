"""Data models for the matchday engine.

Contains Attendee, SlotAssignment, TeamSquad, Squad and Ballot data
structures with basic validation, plus the closed set of attribute codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Literal, Mapping

from matchday.errors import UnknownAttributeError
from matchday.positions import CanonicalPosition, canonicalize

TeamLabel = Literal["A", "B"]
TEAM_LABELS: tuple[TeamLabel, TeamLabel] = ("A", "B")

Attribute = Literal["SHO", "DRI", "DEF", "PAS", "PHY", "PAC"]
ATTRIBUTES: tuple[Attribute, ...] = ("SHO", "DRI", "DEF", "PAS", "PHY", "PAC")

BASELINE_RATING = 60

# Survey answer field names as stored by the web client.
ANSWER_ALIASES: dict[str, str] = {
    "q3_formationEffectiveness": "formation_effectiveness",
    "cohesion_lineSpacing": "cohesion_line_spacing",
    "tactical_execution": "tactical_execution",
    "q9_keypassSuccess": "keypass_success",
    "q10_forwardPass": "forward_pass",
    "q5_touchMiss": "touch_miss",
    "offTheBall_findSpace": "find_space",
    "psych_stamina": "stamina",
    "q6_shootingAccuracy": "shooting_accuracy",
    "q7_shootingAttempt": "shooting_attempts",
}


def validate_attribute(code: object) -> Attribute:
    """Return `code` if it is one of ATTRIBUTES, else raise UnknownAttributeError."""
    if code not in ATTRIBUTES:
        raise UnknownAttributeError(code)
    return code  # type: ignore[return-value]


def ovr_from_stats(stats: Mapping[str, Any] | None, default: int = BASELINE_RATING) -> int:
    """Overall rating as the rounded mean of the numeric stat values.

    Non-numeric values are ignored; with no numeric values the baseline is
    returned.
    """
    if not stats:
        return default
    values = [
        float(v) for v in stats.values()
        if isinstance(v, (int, float)) and not isinstance(v, bool)
    ]
    if not values:
        return default
    # round-half-up, like the stored display OVR
    return int(sum(values) / len(values) + 0.5)


@dataclass(frozen=True)
class Attendee:
    """A player attending a match."""

    uid: str
    name: str
    position: str
    rating: int = BASELINE_RATING

    def __post_init__(self) -> None:
        """Validate identity."""
        if not self.uid:
            raise ValueError("Attendee uid must be non-empty")

    @property
    def canonical_position(self) -> CanonicalPosition:
        return canonicalize(self.position)

    @property
    def is_goalkeeper(self) -> bool:
        return self.canonical_position == "GK"

    @classmethod
    def from_profile(
        cls,
        uid: str,
        name: str,
        position: str | None = None,
        stats: Mapping[str, Any] | None = None,
        ovr: int | None = None,
    ) -> Attendee:
        """Build an attendee from a stored player profile.

        An explicit OVR wins, then the mean of the stats, then the baseline.
        """
        rating = int(ovr) if isinstance(ovr, (int, float)) else ovr_from_stats(stats)
        return cls(uid=uid, name=name, position=position or "CM", rating=rating)


def attendees_by_uid(attendees: Iterable[Attendee]) -> dict[str, Attendee]:
    """Create a lookup dictionary for attendees by uid."""
    return {a.uid: a for a in attendees}


@dataclass(frozen=True)
class SlotAssignment:
    """One formation slot and the starter placed in it (None when unfilled)."""

    slot: CanonicalPosition
    uid: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {"slot": self.slot, "uid": self.uid}


@dataclass
class TeamSquad:
    """Roster, slot layout and bench of one side."""

    roster: list[str]
    slots: list[SlotAssignment]
    bench: list[str]

    @property
    def starters(self) -> list[str]:
        return [s.uid for s in self.slots if s.uid is not None]


@dataclass
class Squad:
    """Two-team squad produced by the builder."""

    formations: dict[TeamLabel, str]
    sides: dict[TeamLabel, TeamSquad]

    def __post_init__(self) -> None:
        """Validate that no uid is on both teams or in two slots."""
        seen: set[str] = set()
        for label in TEAM_LABELS:
            roster = self.sides[label].roster
            overlap = seen.intersection(roster)
            if overlap:
                raise ValueError(f"Attendees on both teams: {sorted(overlap)}")
            seen.update(roster)
            starters = self.sides[label].starters
            if len(set(starters)) != len(starters):
                raise ValueError(f"Team {label} has a starter in more than one slot")

    @property
    def teams(self) -> dict[TeamLabel, list[str]]:
        return {label: self.sides[label].roster for label in TEAM_LABELS}

    @property
    def slots(self) -> dict[TeamLabel, list[SlotAssignment]]:
        return {label: self.sides[label].slots for label in TEAM_LABELS}

    @property
    def bench(self) -> dict[TeamLabel, list[str]]:
        return {label: self.sides[label].bench for label in TEAM_LABELS}

    def team_of(self, uid: str) -> TeamLabel | None:
        for label in TEAM_LABELS:
            if uid in self.sides[label].roster:
                return label
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the {teams, slots, bench} shape stored by the persistence layer."""
        return {
            "teams": {k: list(v) for k, v in self.teams.items()},
            "slots": {k: [s.to_dict() for s in v] for k, v in self.slots.items()},
            "bench": {k: list(v) for k, v in self.bench.items()},
            "formations": dict(self.formations),
        }


def _parse_answers(data: Mapping[str, Any]) -> dict[str, float]:
    """Survey answers from a nested `answers` mapping or flat stored fields."""
    raw = data.get("answers")
    if raw is None:
        raw = {k: v for k, v in data.items() if k in ANSWER_ALIASES}
    return {
        ANSWER_ALIASES.get(str(k), str(k)): float(v)
        for k, v in raw.items()
        if v is not None
    }


@dataclass(frozen=True)
class Ballot:
    """One voter's post-match ballot.

    `votes` maps a vote category to the chosen candidate uid; `answers` maps
    a survey question to a 1-5 score. A ballot may carry either or both.
    """

    voter: str
    team: TeamLabel
    votes: Mapping[str, str] = field(default_factory=dict)
    answers: Mapping[str, float] = field(default_factory=dict)
    submitted_at: datetime | None = None
    match_id: str = ""

    def __post_init__(self) -> None:
        """Validate voter and team label."""
        if not self.voter:
            raise ValueError("Ballot voter must be non-empty")
        if self.team not in TEAM_LABELS:
            raise ValueError(f"Ballot team must be 'A' or 'B', got {self.team!r}")

    @property
    def key(self) -> str:
        """Identity of the ballot: one per voter per match."""
        return f"{self.match_id}:{self.voter}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], match_id: str = "") -> Ballot:
        submitted = data.get("submittedAt") or data.get("submitted_at")
        if isinstance(submitted, str):
            submitted = datetime.fromisoformat(submitted)
        return cls(
            voter=str(data.get("voter", "")),
            team=data.get("team", ""),
            votes={str(k): str(v) for k, v in (data.get("votes") or {}).items() if v},
            answers=_parse_answers(data),
            submitted_at=submitted,
            match_id=str(data.get("match_id") or match_id),
        )
