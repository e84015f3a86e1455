"""Tests for selection module."""

from matchday.models import Attendee, attendees_by_uid
from matchday.selection import select_starters


def _lookup(*specs):
    return attendees_by_uid(Attendee(uid=u, name=u, position=p, rating=r) for u, p, r in specs)


def test_best_goalkeeper_always_starts():
    """Test a weak keeper still starts ahead of strong field players."""
    lookup = _lookup(("gk", "GK", 40), ("a", "ST", 90), ("b", "CM", 85), ("c", "CB", 80))
    starters, bench = select_starters(["a", "b", "c", "gk"], lookup, 3)

    assert starters[0] == "gk"
    assert starters == ["gk", "a", "b"]
    assert bench == ["c"]


def test_spare_goalkeeper_competes_on_rating():
    """Test a second keeper is picked only if highly rated."""
    lookup = _lookup(
        ("gk1", "GK", 70), ("gk2", "GK", 88), ("a", "ST", 80), ("b", "CM", 60)
    )
    starters, bench = select_starters(["gk1", "gk2", "a", "b"], lookup, 3)

    assert starters == ["gk2", "a", "gk1"]
    assert bench == ["b"]


def test_no_goalkeeper_fills_by_rating():
    """Test teams without keepers pick top ratings."""
    lookup = _lookup(("a", "ST", 70), ("b", "CM", 90), ("c", "CB", 80))
    starters, bench = select_starters(["a", "b", "c"], lookup, 2)

    assert starters == ["b", "c"]
    assert bench == ["a"]


def test_short_roster_all_start():
    """Test fewer players than needed: everyone starts, empty bench."""
    lookup = _lookup(("a", "ST", 70), ("gk", "GK", 60))
    starters, bench = select_starters(["a", "gk"], lookup, 11)

    assert sorted(starters) == ["a", "gk"]
    assert bench == []


def test_empty_roster():
    """Test empty team does not fail."""
    assert select_starters([], {}, 11) == ([], [])


def test_zero_needed():
    """Test nobody starts when no slots are needed."""
    lookup = _lookup(("a", "ST", 70))
    assert select_starters(["a"], lookup, 0) == ([], ["a"])


def test_unknown_uid_uses_baseline():
    """Test a uid missing from the lookup rates as 60 and plays CM."""
    lookup = _lookup(("a", "ST", 59), ("b", "CB", 61))
    starters, bench = select_starters(["a", "ghost", "b"], lookup, 2)

    assert starters == ["b", "ghost"]
    assert bench == ["a"]


def test_bench_keeps_roster_order():
    """Test bench order follows the roster, not ratings."""
    lookup = _lookup(("a", "ST", 10), ("b", "CM", 20), ("c", "CB", 90))
    _, bench = select_starters(["a", "b", "c"], lookup, 1)
    assert bench == ["a", "b"]
