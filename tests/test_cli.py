"""Tests for cli module."""

import json

import pytest

from matchday.cli import build_parser, load_attendees, load_ballots, main
from matchday.errors import InputError
from matchday.store import InMemoryRatingStore


def _write(path, data):
    path.write_text(json.dumps(data))
    return path


def _attendees(tmp_path):
    rows = [{"uid": "gk", "name": "Keeper", "position": "GK", "rating": 70}]
    rows += [{"uid": f"p{i}", "name": f"P{i}", "pos": "CM", "ovr": 60 + i} for i in range(9)]
    rows.append({"uid": "s", "name": "Stats (guest)", "stats": {"SHO": 80, "PAS": 70}})
    return _write(tmp_path / "attendees.json", rows)


def test_load_attendees_field_aliases(tmp_path):
    """Test pos/ovr aliases and OVR from stats."""
    attendees = {a.uid: a for a in load_attendees(_attendees(tmp_path))}

    assert attendees["gk"].is_goalkeeper
    assert attendees["p3"].rating == 63
    assert attendees["s"].rating == 75
    assert attendees["s"].position == "CM"


def test_squad_command(tmp_path, capsys):
    """Test the squad command prints a report and squad JSON."""
    path = _attendees(tmp_path)
    pins = _write(tmp_path / "pins.json", {"gk": "B"})

    assert main(["squad", str(path), "--pins", str(pins), "--seed", "7"]) == 0

    out = capsys.readouterr().out
    assert "Rating gap:" in out
    squad = json.loads(out.split("JSON Output:\n", 1)[1])
    assert "gk" in squad["teams"]["B"]
    assert len(squad["teams"]["A"]) + len(squad["teams"]["B"]) == 11


def test_tally_command_commit(tmp_path, capsys):
    """Test tallying with commit updates the store file once."""
    ballots = _write(
        tmp_path / "ballots.json",
        [
            {"voter": "v1", "team": "A", "votes": {"bomber": "p1"}},
            {"voter": "v2", "team": "B", "votes": {"bomber": "p1", "defender": ""}},
        ],
    )
    store_path = tmp_path / "store.json"
    args = [
        "tally", str(ballots), "--match-id", "m1", "--store", str(store_path),
        "--threshold", "2", "--commit",
    ]

    assert main(args) == 0
    assert "Committed to" in capsys.readouterr().out

    store = InMemoryRatingStore.load(store_path)
    assert store.stats["p1"]["SHO"] == 61.0
    assert store.read_tally("bomber", "p1") == 2

    # Second commit of the same match is refused.
    assert main(args) == 1
    assert InMemoryRatingStore.load(store_path).stats["p1"]["SHO"] == 61.0


def test_tally_command_bad_config(tmp_path):
    """Test an invalid config file exits with status 1."""
    ballots = _write(tmp_path / "ballots.json", [])
    config = _write(tmp_path / "config.json", {"voting": {"mode": "majority"}})

    code = main([
        "tally", str(ballots), "--match-id", "m1",
        "--store", str(tmp_path / "store.json"), "--config", str(config),
    ])
    assert code == 1


def test_parser_rejects_unknown_formation():
    """Test formation choices are enforced by the parser."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(["squad", "a.json", "--formation-a", "3-5-2"])


def test_tally_command_ballot_without_team(tmp_path):
    """Test an invalid ballot exits with status 1 and leaves no store behind."""
    ballots = _write(tmp_path / "ballots.json", [{"voter": "v1", "votes": {"bomber": "p1"}}])
    store_path = tmp_path / "store.json"

    code = main([
        "tally", str(ballots), "--match-id", "m1", "--store", str(store_path), "--commit",
    ])
    assert code == 1
    assert not store_path.exists()


def test_squad_command_bad_attendees(tmp_path):
    """Test malformed JSON and rows without a uid exit with status 1."""
    broken = tmp_path / "broken.json"
    broken.write_text("[{")
    assert main(["squad", str(broken)]) == 1

    no_uid = _write(tmp_path / "no_uid.json", [{"name": "Nobody", "position": "ST"}])
    assert main(["squad", str(no_uid)]) == 1
    assert main(["squad", str(tmp_path / "missing.json")]) == 1


def test_load_ballots_wraps_validation_errors(tmp_path):
    """Test ballot validation errors surface as InputError."""
    path = _write(tmp_path / "ballots.json", [{"voter": "", "team": "A"}])

    with pytest.raises(InputError, match="ballot #0"):
        load_ballots(path, "m1")
