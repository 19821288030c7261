"""
HLF Singular Card Face Object
"""

import logging
from typing import Iterable, Optional

from .. import constants
from ..consts import (
    COLOR_ORDER,
    COLOR_PAIR_CORRECTIONS,
    CardFace,
    CardLayout,
    CardTemplate,
)
from ..utils import TRACE
from .json_object import JsonObject

LOGGER = logging.getLogger(__name__)


def canonicalize_color(mana_cost: str) -> str:
    """
    Collect the colors present in a mana cost (or color string) in
    WUBRG order, then swap the pairs Proximity expects in its own order
    :param mana_cost: Mana cost, e.g. "{1}{G}{U}"
    :return: Canonical color string, e.g. "GU"
    """
    mana_cost = (mana_cost or "").upper()
    color = "".join(symbol for symbol in COLOR_ORDER if symbol in mana_cost)
    return COLOR_PAIR_CORRECTIONS.get(color, color)


class HlfCardObject(JsonObject):
    """
    One face of a two-faced card pulled from the Scryfall catalog
    """

    name: str
    display_name: str
    face: CardFace
    layout: CardLayout
    template: CardTemplate
    color: str
    color_count: int
    art_file_name: str
    artist: str
    watermark: Optional[str]
    manual_artist: bool
    __other_face: Optional["HlfCardObject"]

    def __init__(
        self,
        name: str,
        mana_cost: str,
        art_file_name: str,
        artist: str,
        face: CardFace,
        layout: CardLayout,
        template: CardTemplate = CardTemplate.STANDARD,
        watermark: Optional[str] = None,
    ) -> None:
        """
        Initializer for a single card face. Missing fields are only
        warned about here; validate() decides if the face can be rendered.
        """
        self.name = name or ""
        self.face = face

        names = self.name.split(constants.CARD_NAME_SEPARATOR)
        self.display_name = (names[0] if face == CardFace.FRONT else names[-1]).strip()

        if not self.name:
            LOGGER.warning("Card object created with no name!")

        if not mana_cost:
            LOGGER.warning(f"{self.display_name}: Card object created with no mana cost!")
        self.color = canonicalize_color(mana_cost)
        self.color_count = len(self.color)

        if not art_file_name:
            LOGGER.warning(f"{self.display_name}: Card object created with no art file name!")
        self.art_file_name = art_file_name or ""

        if not artist:
            LOGGER.warning(f"{self.display_name}: Card object created with no artist name!")
        self.artist = artist or ""

        if layout == CardLayout.NONE:
            LOGGER.warning(f"{self.display_name}: Card object created with no layout!")
        self.layout = layout
        self.template = template

        # Empty indicates no watermark
        self.watermark = watermark or None
        self.manual_artist = False
        self.__other_face = None

    def __repr__(self) -> str:
        return f"HlfCardObject({self.display_name!r}, {self.face.value}, {self.template.value})"

    @property
    def other_face(self) -> "HlfCardObject":
        """
        The sibling face of this card
        :return: Sibling face
        """
        if self.__other_face is None:
            raise ValueError(f"{self.display_name} has no sibling face linked")
        return self.__other_face

    def has_other_face(self) -> bool:
        """
        :return: Whether a sibling face has been linked
        """
        return self.__other_face is not None

    def set_other_face(self, other_face: "HlfCardObject") -> None:
        """
        Link the sibling face. A face gets exactly one sibling.
        :param other_face: Sibling face
        """
        if other_face is self:
            raise ValueError(f"{self.display_name} cannot be its own sibling")
        if self.__other_face is not None and self.__other_face is not other_face:
            raise ValueError(f"{self.display_name} already has a sibling face linked")
        self.__other_face = other_face

    @property
    def needs_color_override(self) -> bool:
        return self.color != self.other_face.color

    @property
    def needs_art_override(self) -> bool:
        # Back faces and split cards never get automatic art lookup
        return self.face == CardFace.BACK or self.layout == CardLayout.SPLIT

    @property
    def needs_artist_override(self) -> bool:
        return self.artist != self.other_face.artist or self.manual_artist

    @property
    def needs_watermark_override(self) -> bool:
        return bool(self.watermark) or bool(self.other_face.watermark)

    def correct_artist(self, new_artist: str) -> None:
        """
        Replace the artist from a manual override
        :param new_artist: Artist to use instead
        """
        LOGGER.log(
            TRACE,
            f"{self.display_name}: Manually correcting artist from '{self.artist}' to '{new_artist}'.",
        )
        self.manual_artist = True
        self.artist = new_artist

    def correct_watermark(self) -> None:
        """
        Some back faces of hybrid split cards are missing their
        watermark in the catalog; borrow it from the sibling face
        """
        if not self.watermark and self.other_face.watermark:
            LOGGER.log(
                TRACE,
                f"{self.display_name}: Correcting missing watermark to match "
                f"{self.other_face.display_name}'s {self.other_face.watermark} watermark.",
            )
            self.watermark = self.other_face.watermark

    def merge_watermark(self, duplicate: "HlfCardObject") -> None:
        """
        Another printing of this card may carry a watermark this one is missing
        :param duplicate: Later printing of the same face
        """
        if not self.watermark and duplicate.watermark:
            self.watermark = duplicate.watermark
            LOGGER.log(
                TRACE,
                f"Found an additional {self.watermark} watermark for {self.display_name}.",
            )

    def validate(self) -> bool:
        """
        Check that every override this face needs has data behind it
        :return: Whether the face can be sent to Proximity
        """
        if not self.name:
            LOGGER.warning("Card is missing name!")
            return False

        if self.needs_color_override and len(self.color) != self.color_count:
            LOGGER.warning(
                f"{self.display_name}: Colors and color count are mismatched: {self.color}, {self.color_count}."
            )
            return False

        if self.needs_watermark_override and not self.watermark:
            LOGGER.warning(f"{self.display_name}: Watermark is missing.")
            return False

        if self.needs_artist_override and not self.artist:
            LOGGER.warning(f"{self.display_name}: Artist is missing.")
            return False

        if self.needs_art_override and not self.art_file_name:
            LOGGER.warning(f"{self.display_name}: Art file is missing.")
            return False

        LOGGER.log(TRACE, f"{self.display_name} validated successfully. No issues detected.")
        return True

    def build_keys_to_skip(self) -> Iterable[str]:
        """
        Build this object's instance of what keys to skip
        :return What keys to skip over
        """
        return {"manual_artist"}

    def to_json(self) -> dict:
        """
        Support json.dump(), including the derived override flags
        :return: JSON serialized object
        """
        serialized = super().to_json()
        if self.has_other_face():
            serialized.update(
                {
                    "otherFace": self.other_face.display_name,
                    "needsColorOverride": self.needs_color_override,
                    "needsArtOverride": self.needs_art_override,
                    "needsArtistOverride": self.needs_artist_override,
                    "needsWatermarkOverride": self.needs_watermark_override,
                }
            )
        return serialized
