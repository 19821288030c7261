"""
Card face, layout and template constants.

Single source of truth for which catalog layouts are in scope and
which rendering treatment each face receives.
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class CardFace(Enum):
    """Physical side of a dual card."""

    FRONT = "front"
    BACK = "back"

    @classmethod
    def from_index(cls, index: int) -> CardFace:
        """Catalog face 0 is the front, anything after it is the back."""
        return cls.FRONT if index == 0 else cls.BACK


class CardLayout(Enum):
    """Scryfall layouts handled by HLF."""

    SPLIT = "split"
    ADVENTURE = "adventure"
    NONE = ""

    @classmethod
    def from_scryfall(cls, layout: str) -> CardLayout:
        """
        Convert a Scryfall layout string to a CardLayout
        :param layout: Scryfall layout value
        :return: Matching layout, or NONE if out of scope
        """
        try:
            return cls(layout.lower())
        except ValueError:
            return cls.NONE


class CardTemplate(Enum):
    """Rendering treatment, one rendering pass per template."""

    STANDARD = "standard"
    SKETCH = "sketch"
    DOUBLE_FEATURE = "double_feature"


LEGAL_LAYOUTS: Final[frozenset[str]] = frozenset(
    {
        CardLayout.SPLIT.value,
        CardLayout.ADVENTURE.value,
    }
)

# Back faces carrying this keyword get the Double Feature treatment
DOUBLE_FEATURE_KEYWORD: Final[str] = "aftermath"
