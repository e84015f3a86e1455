"""Command-line interface for the matchday engine.

Runs the squad builder and the ballot aggregation over JSON snapshots.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from matchday.builder import build_squad
from matchday.config import load_config
from matchday.errors import InputError, MatchdayError
from matchday.formations import DEFAULT_FORMATION, FORMATION_NAMES
from matchday.metrics import balance_report
from matchday.models import Attendee, Ballot
from matchday.sampling import make_rng
from matchday.store import InMemoryRatingStore
from matchday.voting import aggregate_match

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise InputError(f"Cannot read {path}: {exc}") from exc


def load_attendees(path: Path) -> list[Attendee]:
    """Read attendees from a JSON list of player profiles.

    Each entry needs `uid` and `name`; `position`/`pos`, `rating`/`ovr` and
    `stats` are optional.
    """
    attendees = []
    for i, row in enumerate(_read_json(path)):
        try:
            attendees.append(
                Attendee.from_profile(
                    uid=str(row["uid"]),
                    name=str(row.get("name", "")),
                    position=row.get("position") or row.get("pos"),
                    stats=row.get("stats"),
                    ovr=row.get("rating", row.get("ovr")),
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise InputError(f"Invalid attendee #{i} in {path}: {exc!r}") from exc
    return attendees


def load_ballots(path: Path, match_id: str) -> list[Ballot]:
    ballots = []
    for i, row in enumerate(_read_json(path)):
        try:
            ballots.append(Ballot.from_dict(row, match_id=match_id))
        except (TypeError, ValueError, AttributeError) as exc:
            raise InputError(f"Invalid ballot #{i} in {path}: {exc}") from exc
    return ballots


def run_squad(args: argparse.Namespace) -> int:
    attendees = load_attendees(args.attendees)
    pins = _read_json(args.pins) if args.pins else {}
    squad = build_squad(
        attendees, pins, args.formation_a, args.formation_b, rng=make_rng(args.seed)
    )
    report = balance_report(squad, attendees)

    print("Matchday Squad")
    print("=" * 40)
    print(f"Attendees: {len(attendees)}")
    print(f"Pinned: {len(pins)}")
    for label in ("A", "B"):
        side = report[label]
        print(
            f"Team {label} ({squad.formations[label]}): {int(side['size'])} players, "
            f"rating sum {side['rating_sum']:.0f}, mean {side['rating_mean']:.1f}"
        )
    print(f"Rating gap: {report['rating_gap']:.0f}")

    print("\n" + "=" * 40)
    print("JSON Output:")
    print(json.dumps(squad.to_dict(), indent=2))
    return 0


def run_tally(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    voting = config.voting
    overrides = {k: v for k, v in (("mode", args.mode), ("threshold", args.threshold)) if v is not None}
    if overrides:
        voting = replace(voting, **overrides)

    store = InMemoryRatingStore.load(args.store) if args.store.exists() else InMemoryRatingStore()
    ballots = load_ballots(args.ballots, args.match_id)
    batch = aggregate_match(args.match_id, ballots, store, config=voting)

    print(f"Ballots: {len(ballots)}")
    print(f"Mode: {voting.mode} (threshold {voting.threshold})")
    print(f"Players updated: {len(batch.stat_updates)}")
    print(json.dumps(batch.to_dict(), indent=2))

    if args.commit:
        store.commit(batch)
        store.save(args.store)
        print(f"Committed to {args.store}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Matchday squad and rating engine")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    squad = sub.add_parser("squad", help="Split attendees into two squads")
    squad.add_argument("attendees", type=Path, help="JSON list of attendees")
    squad.add_argument("--pins", type=Path, default=None, help="JSON object uid -> 'A'|'B'")
    squad.add_argument(
        "--formation-a", choices=FORMATION_NAMES, default=DEFAULT_FORMATION, help="Team A formation"
    )
    squad.add_argument(
        "--formation-b", choices=FORMATION_NAMES, default=DEFAULT_FORMATION, help="Team B formation"
    )
    squad.add_argument("--seed", type=int, default=None, help="Random seed")
    squad.set_defaults(func=run_squad)

    tally = sub.add_parser("tally", help="Aggregate post-match ballots into rating updates")
    tally.add_argument("ballots", type=Path, help="JSON list of ballots")
    tally.add_argument("--match-id", required=True, help="Match the ballots belong to")
    tally.add_argument(
        "--store", type=Path, required=True, help="JSON rating store (created on commit)"
    )
    tally.add_argument("--mode", choices=["cumulative", "threshold"], default=None)
    tally.add_argument("--threshold", type=int, default=None, help="Votes per step")
    tally.add_argument("--config", type=Path, default=None, help="JSON config file")
    tally.add_argument("--commit", action="store_true", help="Write the batch back to the store")
    tally.set_defaults(func=run_tally)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except MatchdayError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
