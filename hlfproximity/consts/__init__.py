"""
HLF Proximity Constants Module.

Centralized constants for card faces, layouts, templates and colors.

Usage:
    from hlfproximity.consts import CardFace, CardTemplate
    from hlfproximity.consts.colors import COLOR_ORDER
"""

from __future__ import annotations

# Color constants
from hlfproximity.consts.colors import COLOR_ORDER, COLOR_PAIR_CORRECTIONS

# Layout constants
from hlfproximity.consts.layouts import (
    DOUBLE_FEATURE_KEYWORD,
    LEGAL_LAYOUTS,
    CardFace,
    CardLayout,
    CardTemplate,
)

__all__ = [
    "COLOR_ORDER",
    "COLOR_PAIR_CORRECTIONS",
    "DOUBLE_FEATURE_KEYWORD",
    "LEGAL_LAYOUTS",
    "CardFace",
    "CardLayout",
    "CardTemplate",
]
