"""Tests for survey module."""

import pytest

from matchday.config import SurveyModelConfig
from matchday.models import Attendee, Ballot
from matchday.survey import (
    QUESTIONS,
    TeamScores,
    calculate_stat_changes,
    result_multiplier,
    scores_to_deltas,
    team_average_scores,
)


def _answers(value=5.0, touch_miss=0.0):
    answers = {q: value for q in QUESTIONS}
    answers["touch_miss"] = touch_miss
    return answers


def test_team_average_scores_neutral_without_ballots():
    """Test no ballots gives the neutral 3.0 on every dimension."""
    assert team_average_scores([]) == TeamScores()


def test_team_average_scores():
    """Test dimension averages across two ballots."""
    ballots = [
        Ballot("v1", "A", answers=_answers(5.0)),
        Ballot("v2", "A", answers=_answers(3.0, touch_miss=2.0)),
    ]
    scores = team_average_scores(ballots)

    assert scores.attack == pytest.approx(4.0)
    assert scores.defense == pytest.approx(4.0)
    assert scores.passing == pytest.approx((10 + 6 - 2) / 2)
    assert scores.physical == pytest.approx(4.0)
    assert scores.finishing == pytest.approx(4.0)


def test_scores_to_deltas_all_fives():
    """Test deltas when every answer is 5 and no touches were missed."""
    ballots = [Ballot("v1", "A", answers=_answers(5.0))]
    deltas = scores_to_deltas(team_average_scores(ballots), SurveyModelConfig())

    assert deltas["SHO"] == pytest.approx(0.4)
    assert deltas["DRI"] == pytest.approx(0.2)
    assert deltas["DEF"] == pytest.approx(0.4)
    assert deltas["PAS"] == pytest.approx(0.9)
    assert deltas["PHY"] == pytest.approx(0.4)
    assert deltas["PAC"] == pytest.approx(0.4)


def test_neutral_scores_give_zero_deltas():
    """Test the neutral baseline produces no change."""
    deltas = scores_to_deltas(TeamScores(), SurveyModelConfig())
    assert all(v == pytest.approx(0.0) for v in deltas.values())


def test_result_multiplier():
    """Test win, loss and draw multipliers."""
    config = SurveyModelConfig()
    assert result_multiplier("win", config) == 1.1
    assert result_multiplier("loss", config) == 0.9
    assert result_multiplier("draw", config) == 1.0
    assert result_multiplier(None, config) == 1.0


def test_calculate_stat_changes_forward_on_winning_team():
    """Test role weights and the win multiplier for a forward."""
    players = [
        Attendee("fw", "Forward", "ST"),
        Attendee("gk", "Keeper", "GK"),
        Attendee("cb", "Back", "CB"),
    ]
    ballots = [Ballot("v1", "A", answers=_answers(5.0))]
    changes = calculate_stat_changes(
        ballots, players, {"A": ["fw", "gk"], "B": ["cb"]}, {"A": "win", "B": "loss"}
    )

    assert "gk" not in changes
    assert changes["fw"]["SHO"] == pytest.approx(0.44)
    assert changes["fw"]["DEF"] == pytest.approx(0.044)
    # team B cast no ballots, so its players stay neutral
    assert all(v == pytest.approx(0.0) for v in changes["cb"].values())


def test_calculate_stat_changes_loss_multiplier():
    """Test a defender on a losing team gets scaled-down gains."""
    players = [Attendee("cb", "Back", "CB")]
    ballots = [Ballot("v1", "B", answers=_answers(5.0))]
    changes = calculate_stat_changes(ballots, players, {"A": [], "B": ["cb"]}, {"B": "loss"})

    assert changes["cb"]["DEF"] == pytest.approx(0.4 * 0.9)
    assert changes["cb"]["SHO"] == pytest.approx(0.4 * 0.1 * 0.9)


def test_stored_field_names_score_like_question_keys():
    """Test ballots loaded with stored field names give the same deltas."""
    stored = {
        "q3_formationEffectiveness": 5, "cohesion_lineSpacing": 5, "tactical_execution": 5,
        "q9_keypassSuccess": 5, "q10_forwardPass": 5, "q5_touchMiss": 0,
        "offTheBall_findSpace": 5, "psych_stamina": 5,
        "q6_shootingAccuracy": 5, "q7_shootingAttempt": 5,
    }
    ballot = Ballot.from_dict({"voter": "v1", "team": "A", **stored})

    assert team_average_scores([ballot]) == team_average_scores(
        [Ballot("v1", "A", answers=_answers(5.0))]
    )


def test_unrecognised_answers_are_logged(caplog):
    """Test a ballot answering none of the questions triggers a warning."""
    ballot = Ballot("v1", "A", answers={"formationEffectiveness": 5.0})

    with caplog.at_level("WARNING", logger="matchday.survey"):
        team_average_scores([ballot])

    assert "answers none of the survey questions" in caplog.text
