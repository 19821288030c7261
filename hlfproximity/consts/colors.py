"""
Mana color constants.
"""

from __future__ import annotations

from typing import Final

# Output order of collected color symbols
COLOR_ORDER: Final[tuple[str, ...]] = ("W", "U", "B", "R", "G")

# Proximity only recognizes these three color pairs in its own order
COLOR_PAIR_CORRECTIONS: Final[dict[str, str]] = {
    "UG": "GU",
    "WG": "GW",
    "WR": "RW",
}
