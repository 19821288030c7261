"""
HLF Manual Artist Override Object
"""
from ..consts import CardFace
from .json_object import JsonObject


class HlfArtistOverrideObject(JsonObject):
    """
    Config-declared artist correction for one face of a card.
    Typically an artist duo with an ampersand, or the back side of an adventure.
    """

    card_name: str
    card_face: CardFace
    artist: str

    def __init__(self, card_name: str, card_face: CardFace, artist: str) -> None:
        """
        Initializer for a manual artist override
        :param card_name: Full dual name of the card, stored lowercase
        :param card_face: Face the new artist applies to
        :param artist: Replacement artist
        """
        self.card_name = card_name.lower()
        self.card_face = card_face
        self.artist = artist

    def matches(self, name: str, face: CardFace) -> bool:
        """
        Does this override apply to a given card face
        :param name: Full dual name of the card
        :param face: Face being derived
        :return: Whether the override applies
        """
        return self.card_name == name.lower() and self.card_face == face
