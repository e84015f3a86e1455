from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from matchday.positions import CanonicalPosition

logger = logging.getLogger(__name__)

Formation = Tuple[CanonicalPosition, ...]

FORMATIONS: Dict[str, Formation] = {
    "4-4-2": ("GK", "RB", "CB", "CB", "LB", "RW", "CM", "CM", "LW", "ST", "ST"),
    "4-2-4": ("GK", "RB", "CB", "CB", "LB", "CDM", "CM", "RW", "ST", "ST", "LW"),
    "4-3-3": ("GK", "RB", "CB", "CB", "LB", "CM", "CDM", "CAM", "RW", "ST", "LW"),
}
DEFAULT_FORMATION: str = "4-3-3"
FORMATION_NAMES: List[str] = list(FORMATIONS)


def resolve_formation(name: str | None) -> Tuple[str, Formation]:
    """Return (name, slots), falling back to the default for unknown names."""
    if name in FORMATIONS:
        return name, FORMATIONS[name]
    logger.warning("Unknown formation %r; using %s", name, DEFAULT_FORMATION)
    return DEFAULT_FORMATION, FORMATIONS[DEFAULT_FORMATION]
