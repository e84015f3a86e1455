"""Tests for store module."""

import pytest

from matchday.errors import DuplicateAggregationError, UnknownAttributeError
from matchday.store import InMemoryRatingStore
from matchday.voting import AggregationBatch


def test_store_reads_with_defaults():
    """Test unknown uids and counters read as empty and zero."""
    store = InMemoryRatingStore(stats={"p1": {"SHO": 70}}, tallies={"bomber": {"p1": 4}})

    assert store.read_stats("p1") == {"SHO": 70.0}
    assert store.read_stats("nobody") == {}
    assert store.read_tally("bomber", "p1") == 4
    assert store.read_tally("bomber", "p2") == 0
    assert store.read_tally("defender", "p1") == 0
    assert store.read_counted() == set()


def test_store_rejects_unknown_attribute_on_load():
    """Test stats with unknown attribute codes are refused."""
    with pytest.raises(UnknownAttributeError):
        InMemoryRatingStore(stats={"p1": {"SPD": 70}})


def test_commit_applies_whole_batch():
    """Test commit writes stats, counters and counted keys together."""
    store = InMemoryRatingStore(stats={"p1": {"SHO": 70, "PAS": 65}})
    batch = AggregationBatch(
        "m1",
        "cumulative",
        deltas={"p1": {"SHO": 1.0}},
        stat_updates={"p1": {"SHO": 71.0}, "p2": {"DEF": 61.0}},
        tallies={"bomber": {"p1": 3}},
        counted={"m1:v1", "m1:v2"},
    )
    store.commit(batch)

    assert store.stats == {"p1": {"SHO": 71.0, "PAS": 65.0}, "p2": {"DEF": 61.0}}
    assert store.read_tally("bomber", "p1") == 3
    assert store.read_counted() == {"m1:v1", "m1:v2"}
    assert store.committed_matches == {"m1"}


def test_commit_is_all_or_nothing():
    """Test a batch with a bad attribute leaves the store unchanged."""
    store = InMemoryRatingStore(stats={"p1": {"SHO": 70}}, tallies={"bomber": {"p1": 2}})
    batch = AggregationBatch(
        "m1",
        "cumulative",
        stat_updates={"p1": {"SHO": 71.0}, "p2": {"XYZ": 61.0}},
        tallies={"bomber": {"p1": 3}},
        counted={"m1:v1"},
    )

    with pytest.raises(UnknownAttributeError):
        store.commit(batch)

    assert store.stats == {"p1": {"SHO": 70.0}}
    assert store.read_tally("bomber", "p1") == 2
    assert store.read_counted() == set()
    assert store.committed_matches == set()


def test_commit_refuses_repeat_match():
    """Test the same match cannot be committed twice."""
    store = InMemoryRatingStore()
    store.commit(AggregationBatch("m1", "threshold", stat_updates={"p1": {"SHO": 61.0}}))

    with pytest.raises(DuplicateAggregationError) as excinfo:
        store.commit(AggregationBatch("m1", "threshold", stat_updates={"p1": {"SHO": 62.0}}))

    assert excinfo.value.match_id == "m1"
    assert store.stats["p1"]["SHO"] == 61.0


def test_save_and_load(tmp_path):
    """Test the store survives a JSON round trip."""
    store = InMemoryRatingStore(stats={"p1": {"SHO": 70}}, tallies={"bomber": {"p1": 2}})
    store.commit(
        AggregationBatch("m1", "cumulative", tallies={"bomber": {"p1": 3}}, counted={"m1:v1"})
    )
    path = tmp_path / "store.json"
    store.save(path)

    loaded = InMemoryRatingStore.load(path)
    assert loaded.stats == store.stats
    assert loaded.tallies == {"bomber": {"p1": 3}}
    assert loaded.counted == {"m1:v1"}
    assert loaded.committed_matches == {"m1"}
