"""Position taxonomy for the matchday engine.

Normalizes free-form position labels into canonical codes and defines the
substitution cost between a formation slot and a player's position.
"""

from __future__ import annotations

import math
from typing import Literal

CanonicalPosition = Literal["GK", "CB", "RB", "LB", "CDM", "CM", "CAM", "RW", "LW", "ST"]
PositionGroup = Literal["GK", "DF", "MF", "FW"]

CANONICAL_POSITIONS: tuple[CanonicalPosition, ...] = (
    "GK", "CB", "RB", "LB", "CDM", "CM", "CAM", "RW", "LW", "ST",
)

DEFAULT_POSITION: CanonicalPosition = "CM"
UNLISTED_COST = 99.0

# Rows are slots, columns are the player's canonical position.
SIMILARITY_COST: dict[str, dict[str, int]] = {
    "RB": {"RB": 0, "CB": 1, "CDM": 2, "LB": 3, "CM": 4, "RW": 5, "LW": 6, "CAM": 7, "ST": 8},
    "LB": {"LB": 0, "CB": 1, "CDM": 2, "RB": 3, "CM": 4, "LW": 5, "RW": 6, "CAM": 7, "ST": 8},
    "CB": {"CB": 0, "RB": 1, "LB": 1, "CDM": 2, "CM": 3, "RW": 5, "LW": 5, "ST": 7, "CAM": 8},
    "CDM": {"CDM": 0, "CM": 1, "CB": 2, "RB": 3, "LB": 3, "CAM": 4, "RW": 5, "LW": 5, "ST": 6},
    "CM": {"CM": 0, "CDM": 1, "CAM": 1, "RW": 3, "LW": 3, "RB": 4, "LB": 4, "ST": 4, "CB": 5},
    "CAM": {"CAM": 0, "CM": 1, "ST": 2, "RW": 3, "LW": 3, "CDM": 4, "RB": 6, "LB": 6, "CB": 7},
    "ST": {"ST": 0, "CAM": 2, "RW": 3, "LW": 3, "CM": 4, "CDM": 5, "RB": 7, "LB": 7, "CB": 8},
    "RW": {"RW": 0, "ST": 3, "CAM": 3, "CM": 4, "LW": 5, "CDM": 6, "RB": 6, "LB": 7, "CB": 8},
    "LW": {"LW": 0, "ST": 3, "CAM": 3, "CM": 4, "RW": 5, "CDM": 6, "LB": 6, "RB": 7, "CB": 8},
}


def canonicalize(raw: object) -> CanonicalPosition:
    """Map a raw position label to a canonical position.

    Substrings are checked from most to least specific so that e.g. "CDM"
    is never swallowed by the generic "CM" rule. Never fails: anything
    unrecognized (including None) maps to CM.

    Args:
        raw: Free-form label such as "RCM", "lwb" or "Striker (CF)"

    Returns:
        One of CANONICAL_POSITIONS
    """
    p = str(raw or "").strip().upper()
    if not p:
        return DEFAULT_POSITION
    if "GK" in p:
        return "GK"
    if "CDM" in p or p == "DM":
        return "CDM"
    if "CAM" in p:
        return "CAM"
    if "RWB" in p:
        return "RB"
    if "LWB" in p:
        return "LB"
    if "CB" in p:
        return "CB"
    if "RB" in p:
        return "RB"
    if "LB" in p:
        return "LB"
    if "CM" in p or p in ("MID", "MF"):
        return "CM"
    if "RW" in p or "RM" in p:
        return "RW"
    if "LW" in p or "LM" in p:
        return "LW"
    if "ST" in p or "CF" in p or "FW" in p:
        return "ST"
    return DEFAULT_POSITION


def cost(slot: str, player_pos: str) -> float:
    """Substitution cost of playing `player_pos` in `slot`.

    GK and outfield positions never substitute for each other (infinite
    cost). Pairs missing from the table get UNLISTED_COST so that
    assignment always terminates.
    """
    if (slot == "GK") != (player_pos == "GK"):
        return math.inf
    if slot == player_pos:
        return 0.0
    return float(SIMILARITY_COST.get(slot, {}).get(player_pos, UNLISTED_COST))


def position_group(raw: object) -> PositionGroup:
    """Coarse role group of a raw label, used by the survey rating model."""
    p = str(raw or "").upper()
    if "GK" in p:
        return "GK"
    if any(code in p for code in ("CB", "RB", "LB", "WB")):
        return "DF"
    if any(code in p for code in ("CDM", "CM", "CAM", "RM", "LM", "MF")):
        return "MF"
    if any(code in p for code in ("ST", "CF", "RW", "LW", "FW")):
        return "FW"
    return "MF"
