"""Descriptive survey rating model.

An alternate pipeline to vote tallying: each voter answers 1-5 questions
about their own team's play. Team averages become signed deltas around a
neutral 3.0, scaled by the match result and filtered through per-role
weights. Goalkeepers are left out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Mapping, Sequence

from matchday.config import SurveyModelConfig
from matchday.models import ATTRIBUTES, TEAM_LABELS, Attendee, Ballot, TeamLabel
from matchday.positions import position_group

logger = logging.getLogger(__name__)

Outcome = Literal["win", "loss", "draw"]

QUESTIONS: tuple[str, ...] = (
    "formation_effectiveness",
    "cohesion_line_spacing",
    "tactical_execution",
    "keypass_success",
    "forward_pass",
    "touch_miss",
    "find_space",
    "stamina",
    "shooting_accuracy",
    "shooting_attempts",
)


@dataclass(frozen=True)
class TeamScores:
    attack: float = 3.0
    defense: float = 3.0
    passing: float = 3.0
    physical: float = 3.0
    finishing: float = 3.0


def team_average_scores(ballots: Sequence[Ballot]) -> TeamScores:
    """Average one team's answers into five play dimensions.

    Two-question dimensions are averaged over both questions; passing nets
    touch misses against key and forward passes. No ballots gives neutral
    scores.
    """
    if not ballots:
        return TeamScores()

    for ballot in ballots:
        if not set(ballot.answers) & set(QUESTIONS):
            logger.warning(
                "Ballot of %s answers none of the survey questions; scoring it as all zero",
                ballot.voter,
            )

    def total(*questions: str) -> float:
        return sum(b.answers.get(q, 0.0) for b in ballots for q in questions)

    n = len(ballots)
    return TeamScores(
        attack=total("formation_effectiveness") / n,
        defense=total("cohesion_line_spacing", "tactical_execution") / (n * 2),
        passing=(total("keypass_success", "forward_pass") - total("touch_miss")) / n,
        physical=total("find_space", "stamina") / (n * 2),
        finishing=total("shooting_accuracy", "shooting_attempts") / (n * 2),
    )


def scores_to_deltas(scores: TeamScores, config: SurveyModelConfig) -> dict[str, float]:
    base, f = config.baseline, config.factor
    return {
        "SHO": (scores.finishing - base) * f,
        "DRI": (scores.attack - base) * (f / 2),
        "DEF": (scores.defense - base) * f,
        "PAS": ((scores.passing - base) + (scores.attack - base)) * (f / 2),
        "PHY": ((scores.physical - base) + (scores.defense - base)) * (f / 2),
        "PAC": (scores.physical - base) * f,
    }


def result_multiplier(outcome: str | None, config: SurveyModelConfig) -> float:
    if outcome == "win":
        return config.win_multiplier
    if outcome == "loss":
        return config.loss_multiplier
    return 1.0


def calculate_stat_changes(
    ballots: Sequence[Ballot],
    players: Sequence[Attendee],
    teams: Mapping[TeamLabel, Sequence[str]],
    result: Mapping[TeamLabel, Outcome],
    config: SurveyModelConfig | None = None,
) -> dict[str, dict[str, float]]:
    """Per-player attribute deltas from the descriptive survey.

    Args:
        ballots: Survey ballots of both teams
        players: Match participants
        teams: Team rosters; anyone not on team A is scored with team B
        result: Outcome per team label ("win", "loss" or "draw")
        config: Model constants

    Returns:
        uid -> attribute -> delta for every non-goalkeeper participant
    """
    config = config or SurveyModelConfig()
    team_a = set(teams.get("A", ()))
    base_deltas = {
        label: scores_to_deltas(
            team_average_scores([b for b in ballots if b.team == label]), config
        )
        for label in TEAM_LABELS
    }

    changes: dict[str, dict[str, float]] = {}
    for player in players:
        group = position_group(player.position)
        if group == "GK":
            continue
        label = "A" if player.uid in team_a else "B"
        multiplier = result_multiplier(result.get(label), config)
        weights = config.group_weights.get(group, {})
        changes[player.uid] = {
            attr: base_deltas[label][attr] * weights.get(attr, 0.0) * multiplier
            for attr in ATTRIBUTES
        }
    return changes
