"""Player profile helpers: questionnaire scoring and reference-player matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

import numpy as np

from matchday.config import SimilarityConfig
from matchday.models import ATTRIBUTES, BASELINE_RATING, validate_attribute

# Vector order used for similarity scoring.
STAT_ORDER: tuple[str, ...] = ("PAC", "SHO", "PAS", "DRI", "DEF", "PHY")

_SHARED_WEIGHTS = {"RW": "LW", "RB": "LB"}


def initial_stats(
    effects: Iterable[Mapping[str, float]], base: int = BASELINE_RATING
) -> dict[str, int]:
    """Starting stats from the effects of each chosen questionnaire answer.

    Args:
        effects: One attribute -> adjustment mapping per answered question
        base: Starting value of every attribute

    Returns:
        attribute -> base + rounded total adjustment, for all six attributes
    """
    totals = {attr: 0.0 for attr in ATTRIBUTES}
    for answer in effects:
        for attr, value in answer.items():
            totals[validate_attribute(attr)] += float(value)
    return {attr: base + int(np.floor(total + 0.5)) for attr, total in totals.items()}


@dataclass(frozen=True)
class ReferencePlayer:
    name: str
    team: str = ""
    ovr: int = 0
    stats: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class PlayerMatch:
    name: str
    team: str
    ovr: int
    score: float


def weighted_vector(
    stats: Mapping[str, float], position: str, config: SimilarityConfig
) -> np.ndarray:
    key = _SHARED_WEIGHTS.get(position, position)
    weights = config.position_weights.get(key) if config.use_position_weights else None
    weights = weights or {}
    return np.array(
        [
            float(stats.get(stat) if stats.get(stat) is not None else config.safe_base)
            * float(weights.get(stat) or 1.0)
            for stat in STAT_ORDER
        ],
        dtype=float,
    )


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    denominator = float(np.linalg.norm(a) * np.linalg.norm(b))
    return 0.0 if denominator == 0 else float(np.dot(a, b) / denominator)


def find_top_matching_players(
    user_stats: Mapping[str, float] | None,
    reference_players: Sequence[ReferencePlayer],
    position: str | None,
    config: SimilarityConfig | None = None,
) -> list[PlayerMatch]:
    """Find the reference players whose weighted stat profile is closest.

    The score blends cosine similarity with a normalized inverse Euclidean
    distance, both over position-weighted stat vectors.

    Args:
        user_stats: The player's attribute values
        reference_players: Candidates to compare against
        position: Position whose weights apply to both vectors
        config: Blend weights, distance cap and result count

    Returns:
        Up to `top_n` matches, best first
    """
    if not user_stats or not reference_players or not position:
        return []
    config = config or SimilarityConfig()

    user_vec = weighted_vector(user_stats, position, config)
    matches = []
    for ref in reference_players:
        ref_vec = weighted_vector(ref.stats, position, config)
        cos = cosine_similarity(user_vec, ref_vec)
        dist = float(np.linalg.norm(user_vec - ref_vec))
        inv_dist = 1.0 - min(dist / config.max_distance, 1.0)
        score = config.cosine_weight * cos + config.inverse_distance_weight * inv_dist
        matches.append(PlayerMatch(name=ref.name, team=ref.team, ovr=ref.ovr, score=score))

    matches.sort(key=lambda m: m.score, reverse=True)
    return matches[: config.top_n]
