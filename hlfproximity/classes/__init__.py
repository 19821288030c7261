"""
HLF Proximity object classes
"""

from .hlf_artist_override import HlfArtistOverrideObject
from .hlf_card import HlfCardObject, canonicalize_color
from .json_object import JsonObject

__all__ = [
    "HlfArtistOverrideObject",
    "HlfCardObject",
    "JsonObject",
    "canonicalize_color",
]
