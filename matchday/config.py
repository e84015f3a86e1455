"""Configuration for the rating pipelines.

All tunable constants of the vote and survey models live here as frozen
dataclasses; `load_config` reads overrides from a JSON file.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Literal, Mapping

from matchday.errors import ConfigError
from matchday.models import ATTRIBUTES, BASELINE_RATING

AggregationMode = Literal["cumulative", "threshold"]

DEFAULT_GROUP_WEIGHTS: Dict[str, Dict[str, float]] = {
    "FW": {"SHO": 1.0, "DRI": 1.0, "PAC": 1.0, "PAS": 0.5, "PHY": 0.5, "DEF": 0.1},
    "MF": {"PAS": 1.0, "DRI": 1.0, "PHY": 1.0, "SHO": 0.5, "PAC": 0.5, "DEF": 0.5},
    "DF": {"DEF": 1.0, "PHY": 1.0, "PAC": 1.0, "PAS": 0.5, "DRI": 0.1, "SHO": 0.1},
}

# RW and RB reuse the LW and LB rows.
DEFAULT_SIMILARITY_WEIGHTS: Dict[str, Dict[str, float]] = {
    "ST": {"PAC": 1.1, "SHO": 1.4, "PAS": 1.0, "DRI": 1.2, "DEF": 0.7, "PHY": 1.1},
    "CAM": {"PAC": 1.0, "SHO": 1.0, "PAS": 1.4, "DRI": 1.2, "DEF": 0.8, "PHY": 0.9},
    "CM": {"PAC": 0.9, "SHO": 1.0, "PAS": 1.4, "DRI": 1.1, "DEF": 1.0, "PHY": 1.0},
    "CDM": {"PAC": 0.9, "SHO": 0.8, "PAS": 1.1, "DRI": 0.9, "DEF": 1.5, "PHY": 1.2},
    "CB": {"PAC": 0.8, "SHO": 0.7, "PAS": 0.9, "DRI": 0.8, "DEF": 1.6, "PHY": 1.3},
    "LB": {"PAC": 1.1, "SHO": 0.7, "PAS": 1.0, "DRI": 1.0, "DEF": 1.4, "PHY": 1.1},
    "LW": {"PAC": 1.3, "SHO": 1.2, "PAS": 1.1, "DRI": 1.4, "DEF": 0.8, "PHY": 0.9},
}


@dataclass(frozen=True)
class VotingConfig:
    mode: AggregationMode = "cumulative"
    threshold: int = 3
    step: int = 1
    baseline: int = BASELINE_RATING

    def __post_init__(self) -> None:
        if self.mode not in ("cumulative", "threshold"):
            raise ConfigError(f"Unknown aggregation mode: {self.mode!r}")
        if self.threshold < 1:
            raise ConfigError("threshold must be at least 1")


@dataclass(frozen=True)
class SurveyModelConfig:
    """Constants of the descriptive (Likert) survey model."""

    baseline: float = 3.0
    factor: float = 0.2
    win_multiplier: float = 1.1
    loss_multiplier: float = 0.9
    group_weights: Mapping[str, Mapping[str, float]] = field(
        default_factory=lambda: DEFAULT_GROUP_WEIGHTS
    )

    def __post_init__(self) -> None:
        for group, weights in self.group_weights.items():
            unknown = set(weights) - set(ATTRIBUTES)
            if unknown:
                raise ConfigError(f"Unknown attributes in {group} weights: {sorted(unknown)}")


@dataclass(frozen=True)
class SimilarityConfig:
    cosine_weight: float = 0.8
    inverse_distance_weight: float = 0.2
    max_distance: float = 25.0
    top_n: int = 5
    safe_base: float = float(BASELINE_RATING)
    use_position_weights: bool = True
    position_weights: Mapping[str, Mapping[str, float]] = field(
        default_factory=lambda: DEFAULT_SIMILARITY_WEIGHTS
    )


@dataclass(frozen=True)
class MatchdayConfig:
    voting: VotingConfig = field(default_factory=VotingConfig)
    survey: SurveyModelConfig = field(default_factory=SurveyModelConfig)
    similarity: SimilarityConfig = field(default_factory=SimilarityConfig)


def _section(cls: type, data: Any, name: str) -> Any:
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"Section {name!r} must be an object")
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown keys in {name!r}: {sorted(unknown)}")
    try:
        return replace(cls(), **data)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name!r} section: {exc}") from exc


def config_from_dict(data: Mapping[str, Any]) -> MatchdayConfig:
    unknown = set(data) - {"voting", "survey", "similarity"}
    if unknown:
        raise ConfigError(f"Unknown config sections: {sorted(unknown)}")
    return MatchdayConfig(
        voting=_section(VotingConfig, data.get("voting"), "voting"),
        survey=_section(SurveyModelConfig, data.get("survey"), "survey"),
        similarity=_section(SimilarityConfig, data.get("similarity"), "similarity"),
    )


def load_config(path: Path | None) -> MatchdayConfig:
    """Load configuration from a JSON file; None gives the defaults."""
    if path is None:
        return MatchdayConfig()
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Config root must be an object")
    return config_from_dict(data)
