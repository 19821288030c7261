"""
HLF Proximity Consts for Building
"""
import os
import pathlib
from typing import Tuple

# Useful HLF Paths
TOP_LEVEL_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
PACKAGE_DIR: pathlib.Path = TOP_LEVEL_DIR.joinpath("hlfproximity")
RESOURCE_PATH: pathlib.Path = PACKAGE_DIR.joinpath("resources")
CONFIG_PATH: pathlib.Path = RESOURCE_PATH.joinpath("hlf.properties")
SCRYFALL_DIR: pathlib.Path = PACKAGE_DIR.joinpath("scryfall")
PROXIMITY_DIR: pathlib.Path = PACKAGE_DIR.joinpath("proximity")
ENV_OUT_PATH: pathlib.Path = (
    pathlib.Path(os.environ.get("HLF_OUTPUT_PATH", TOP_LEVEL_DIR))
    .expanduser()
    .resolve()
)
LOG_PATH: pathlib.Path = ENV_OUT_PATH.joinpath("logs")
CACHE_PATH: pathlib.Path = TOP_LEVEL_DIR.joinpath(".hlfproximity_cache")

# Proximity defaults
DEFAULT_PROXIMITY_JAR: str = "proximity-0.6.2.jar"
DEFAULT_TEMPLATE_ASSET: str = "hlf.zip"
DEFAULT_JAVA_PATH: str = "java"
DEFAULT_SET_SYMBOL: str = "jmp"
DEFAULT_ART_FILE_EXTENSION: str = ".jpg"
DEFAULT_BATCH_SIZE: int = 20
DEFAULT_MAX_RERENDER_ATTEMPTS: int = 3
DEFAULT_BULK_TYPE: str = "default_cards"

VALID_ART_FILE_EXTENSIONS: Tuple[str, ...] = (".jpg", ".jpeg", ".png")
VALID_RARITIES: Tuple[str, ...] = ("common", "uncommon", "rare", "mythic")
DEFAULT_ILLEGAL_SET_TYPES: Tuple[str, ...] = ("alchemy",)

# Proximity working file names
BATCH_NAME_BASE: str = "hlf_"
DECK_FILE_SUFFIX: str = "_decklist.txt"
COMMAND_FILE_SUFFIX: str = "_proximityCommand"

# Proximity output
FAILED_RENDER_MARKER: str = "failed"
PROXY_EXTENSION: str = ".png"
PROXY_IMAGE_DIRS: Tuple[str, ...] = ("fronts", "backs")

CARD_NAME_SEPARATOR: str = " // "
