"""
HLF Card Builder

Turns filtered Scryfall catalog entries into paired card faces
ready to be batched through Proximity.
"""

import logging
import pathlib
from typing import Dict, Iterable, List, Optional, Tuple

import ijson

from . import constants
from .catalog_filter import CatalogEntry, filter_catalog, load_catalog
from .classes import HlfArtistOverrideObject, HlfCardObject
from .consts import DOUBLE_FEATURE_KEYWORD, CardFace, CardLayout, CardTemplate
from .errors import HlfRunError
from .hlf_config import HlfConfig
from .utils import TRACE

LOGGER = logging.getLogger(__name__)


def generate_art_source_file_name(name: str, face: CardFace, extension: str) -> str:
    """
    Build the art file name Proximity should look for
    :param name: Full dual name, e.g. "Fire // Ice"
    :param face: Face the art is for
    :param extension: Art file extension from config
    :return: Art file name, e.g. "ice.jpg"
    """
    name_substrings = name.split("/")
    index = 0 if face == CardFace.FRONT else len(name_substrings) - 1
    return (
        name_substrings[index].replace(" ", "").replace("'", "").lower() + extension
    )


def get_card_template(
    entry: CatalogEntry, face: CardFace, layout: CardLayout
) -> CardTemplate:
    """
    Determine which rendering pass a face belongs to
    :param entry: Raw catalog entry
    :param face: Face being built
    :param layout: Card layout
    :return: Template for the face
    """
    if face == CardFace.FRONT:
        return CardTemplate.STANDARD

    keywords = " ".join(entry.get("keywords") or []).lower()
    if DOUBLE_FEATURE_KEYWORD in keywords:
        return CardTemplate.DOUBLE_FEATURE
    if layout == CardLayout.ADVENTURE:
        return CardTemplate.SKETCH
    return CardTemplate.STANDARD


def find_manual_artist_override(
    name: str, face: CardFace, overrides: Iterable[HlfArtistOverrideObject]
) -> Optional[HlfArtistOverrideObject]:
    """
    Find the configured artist override for a card face, if any
    :param name: Full dual name
    :param face: Face being built
    :param overrides: Configured overrides
    :return: Matching override
    """
    for artist_override in overrides:
        if artist_override.matches(name, face):
            return artist_override
    return None


def build_hlf_card_faces(
    entry: CatalogEntry, config: HlfConfig
) -> Optional[Tuple[HlfCardObject, HlfCardObject]]:
    """
    Build both faces of a catalog entry and link them as siblings
    :param entry: Filtered catalog entry
    :param config: Run configuration
    :return: (front, back), or None if the entry isn't two-faced
    """
    name = entry.get("name", "")
    if not name:
        LOGGER.warning(f"Catalog entry in {entry.get('set')} has no name!")

    layout = CardLayout.from_scryfall(str(entry.get("layout", "")))
    if layout == CardLayout.NONE:
        LOGGER.error(f"{name} is missing its layout! Defaulting to 'Split'.")
        layout = CardLayout.SPLIT

    json_faces = entry.get("card_faces") or []
    if len(json_faces) < 2:
        LOGGER.warning(f"{name} does not have two card faces. Skipping.")
        return None

    faces: List[HlfCardObject] = []
    for index, json_face in enumerate(json_faces[:2]):
        face = CardFace.from_index(index)
        card = HlfCardObject(
            name=name,
            mana_cost=json_face.get("mana_cost", ""),
            art_file_name=generate_art_source_file_name(
                name, face, config.art_file_extension
            ),
            artist=json_face.get("artist", ""),
            face=face,
            layout=layout,
            template=get_card_template(entry, face, layout),
            watermark=json_face.get("watermark"),
        )

        artist_override = find_manual_artist_override(
            name, face, config.manual_artist_overrides
        )
        if artist_override:
            card.correct_artist(artist_override.artist)

        faces.append(card)

    front, back = faces
    front.set_other_face(back)
    back.set_other_face(front)
    return front, back


def has_existing_render(card: HlfCardObject, output_directory: pathlib.Path) -> bool:
    """
    :return: Whether stable renders already exist for both faces of the card
    """
    return all(
        output_directory.joinpath(face.display_name + constants.PROXY_EXTENSION).is_file()
        for face in (card, card.other_face)
    )


def log_card_details(card: HlfCardObject) -> None:
    """
    Trace out everything derived for a card face
    :param card: Card face just added
    """
    LOGGER.debug(f"{card.display_name} is legal.")
    LOGGER.log(
        TRACE,
        f" - {card.name} ({card.layout.value} {card.face.value}, {card.template.value})",
    )
    LOGGER.log(TRACE, f" - {card.color} ({card.color_count} colors)")
    LOGGER.log(TRACE, f" - Artist: {card.artist} | Art: {card.art_file_name}")
    if card.watermark:
        LOGGER.log(TRACE, f" - Watermark: {card.watermark}")

    front = card if card.face == CardFace.FRONT else card.other_face
    back = front.other_face

    if card.needs_color_override:
        LOGGER.log(
            TRACE,
            f"'{card.name}' needs a color override: Front is {front.color}, Back is {back.color}.",
        )

    if card.needs_artist_override:
        if front.artist == back.artist:
            LOGGER.log(
                TRACE, f"'{card.name}' needs an artist override since it was manually corrected."
            )
        else:
            LOGGER.log(
                TRACE,
                f"'{card.name}' needs an artist override: Front is '{front.artist}', Back is '{back.artist}'.",
            )


def add_card_faces(
    cards: List[HlfCardObject],
    cards_by_display_name: Dict[str, HlfCardObject],
    faces: Tuple[HlfCardObject, HlfCardObject],
    config: HlfConfig,
) -> None:
    """
    Add a freshly built pair of faces to the card pool. A face already
    built from an earlier printing only donates its watermark.
    :param cards: Card pool, in catalog order
    :param cards_by_display_name: Index of the card pool by display name
    :param faces: (front, back) of one catalog entry
    :param config: Run configuration
    """
    front, back = faces

    for card in faces:
        repeat = cards_by_display_name.get(card.display_name)
        if repeat is not None:
            repeat.merge_watermark(card)
            repeat.other_face.correct_watermark()
            LOGGER.log(TRACE, f"Found a duplicate entry for {repeat.display_name}. Skipping.")
            continue

        if config.updates_only and has_existing_render(card, config.output_directory):
            LOGGER.log(TRACE, f"A render already exists for {card.display_name}. Skipping.")
            continue

        cards.append(card)
        cards_by_display_name[card.display_name] = card
        log_card_details(card)

        # Some back gold faces of hybrid split cards don't have their watermark in the catalog
        if card.needs_watermark_override or card.other_face.needs_watermark_override:
            front.correct_watermark()
            back.correct_watermark()
            LOGGER.log(
                TRACE,
                f"'{card.name}' needs a watermark override: Front is '{front.watermark}'. "
                f"Back is '{back.watermark}'.",
            )


def build_hlf_cards(
    entries: Iterable[CatalogEntry], config: HlfConfig
) -> List[HlfCardObject]:
    """
    Derive the card pool from already filtered catalog entries
    :param entries: Legal catalog entries
    :param config: Run configuration
    :return: Card faces, fronts directly followed by their backs where both survive
    """
    cards: List[HlfCardObject] = []
    cards_by_display_name: Dict[str, HlfCardObject] = {}

    for entry in entries:
        name = str(entry.get("name", ""))

        # Only add cards in the specified card list if we're using that subset of cards
        if config.use_card_subset and name.lower() not in config.card_subset:
            continue

        faces = build_hlf_card_faces(entry, config)
        if faces:
            add_card_faces(cards, cards_by_display_name, faces, config)

    return cards


def report_unused_card_subset(
    cards: List[HlfCardObject], config: HlfConfig
) -> List[str]:
    """
    Warn about subset cards that never made it into the pool
    :param cards: Derived card pool
    :param config: Run configuration
    :return: Unmatched subset names
    """
    if not config.use_card_subset:
        return []

    derived_names = {card.name.lower() for card in cards}
    unmatched = [name for name in config.card_subset if name not in derived_names]
    for card_name in unmatched:
        LOGGER.warning(
            f"'{card_name}' from the list of subset cards is not used. "
            "Please verify that it is entered correctly."
        )
    return unmatched


def report_unused_artist_overrides(
    cards: List[HlfCardObject], config: HlfConfig
) -> List[HlfArtistOverrideObject]:
    """
    Warn about manual artist overrides that matched no card face
    :param cards: Derived card pool
    :param config: Run configuration
    :return: Unmatched overrides
    """
    if not config.manual_artist_overrides or config.updates_only:
        return []

    unmatched = [
        artist_override
        for artist_override in config.manual_artist_overrides
        if not any(artist_override.matches(card.name, card.face) for card in cards)
    ]
    for artist_override in unmatched:
        LOGGER.warning(
            f"'{artist_override.card_name} ({artist_override.card_face.value})' from the "
            "list of manual artist overrides is not used. Please verify that it is entered correctly."
        )
    return unmatched


def parse_catalog(config: HlfConfig) -> List[HlfCardObject]:
    """
    Read the Scryfall catalog and build every legal HLF card face
    :param config: Run configuration
    :return: Card pool
    """
    if config.scryfall_path is None:
        raise HlfRunError("catalog", "No Scryfall JSON available to read")

    LOGGER.info(
        f"Filtering cards from {config.scryfall_path}. This may take several minutes!"
    )

    try:
        cards = build_hlf_cards(
            filter_catalog(load_catalog(config.scryfall_path), config), config
        )
    except FileNotFoundError as error:
        LOGGER.error(f"JSON file not found: {error}")
        cards = []
    except ijson.JSONError as error:
        LOGGER.error(f"Error parsing JSON: {error}")
        cards = []

    if not cards:
        LOGGER.error("No legal cards found!")
        raise HlfRunError("catalog", f"No legal cards found in {config.scryfall_path}")

    LOGGER.info(f"Found {len(cards)} legal card faces.")
    report_unused_card_subset(cards, config)
    report_unused_artist_overrides(cards, config)

    return cards
