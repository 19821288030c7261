"""
HLF Catalog Filter

Decides which raw Scryfall catalog entries are legal HLF cards.
"""

import logging
import pathlib
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import ijson

from .consts import LEGAL_LAYOUTS
from .hlf_config import HlfConfig
from .utils import TRACE

LOGGER = logging.getLogger(__name__)

CatalogEntry = Dict[str, Any]


def is_reprint(entry: CatalogEntry, _config: HlfConfig) -> bool:
    """Watermarks are only reliable on the original printing"""
    return bool(entry.get("reprint", False))


def is_illegal_layout(entry: CatalogEntry, _config: HlfConfig) -> bool:
    return str(entry.get("layout", "")).lower() not in LEGAL_LAYOUTS


def is_promo_or_variation(entry: CatalogEntry, _config: HlfConfig) -> bool:
    return bool(entry.get("promo", False)) or bool(entry.get("variation", False))


def has_frame_effects(entry: CatalogEntry, _config: HlfConfig) -> bool:
    """Showcase, borderless and the like are near-identical duplicates"""
    return bool(entry.get("frame_effects"))


def is_not_black_bordered(entry: CatalogEntry, _config: HlfConfig) -> bool:
    return entry.get("border_color") != "black"


def is_illegal_set_type(entry: CatalogEntry, config: HlfConfig) -> bool:
    return str(entry.get("set_type", "")).lower() in config.illegal_set_types


def is_illegal_set_code(entry: CatalogEntry, config: HlfConfig) -> bool:
    set_code = str(entry.get("set", "")).lower()
    return any(banned_code in set_code for banned_code in config.illegal_set_codes)


# Cheapest checks first; an entry is dropped at its first match
CATALOG_EXCLUSIONS: List[Tuple[str, Callable[[CatalogEntry, HlfConfig], bool]]] = [
    ("reprint", is_reprint),
    ("layout", is_illegal_layout),
    ("promo or variation", is_promo_or_variation),
    ("frame effects", has_frame_effects),
    ("border color", is_not_black_bordered),
    ("set type", is_illegal_set_type),
    ("illegal set", is_illegal_set_code),
]


def get_exclusion_reason(entry: CatalogEntry, config: HlfConfig) -> Optional[str]:
    """
    Run an entry through the exclusions in order
    :param entry: Raw catalog entry
    :param config: Run configuration
    :return: Name of the first exclusion hit, or None if the entry is legal
    """
    for reason, exclusion in CATALOG_EXCLUSIONS:
        if exclusion(entry, config):
            return reason
    return None


def filter_catalog(
    entries: Iterable[CatalogEntry], config: HlfConfig
) -> Iterator[CatalogEntry]:
    """
    Yield only the catalog entries that are legal HLF cards
    :param entries: Raw catalog entries
    :param config: Run configuration
    :return: Legal entries, in catalog order
    """
    for entry in entries:
        reason = get_exclusion_reason(entry, config)
        if reason:
            continue
        LOGGER.log(TRACE, f"{entry.get('name')} ({entry.get('set')}) passed filtering.")
        yield entry


def load_catalog(catalog_path: pathlib.Path) -> Iterator[CatalogEntry]:
    """
    Stream entries out of a Scryfall JSON array without
    loading the whole catalog into memory
    :param catalog_path: Scryfall bulk JSON file
    :return: Catalog entries
    """
    with catalog_path.open("rb") as file:
        # Scryfall numbers like cmc are floats; keep them as floats not Decimals
        yield from ijson.items(file, "item", use_float=True)
