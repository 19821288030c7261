"""
HLF Proximity Configuration Service
"""

import configparser
import logging
import pathlib
from typing import Dict, List, Optional, Tuple

import ijson

from . import constants
from .classes import HlfArtistOverrideObject
from .consts import CardFace, CardTemplate
from .utils import TRACE


class HlfConfig:
    """
    Configuration Class that loads in the appropriate configuration file
    and provides the validated contents for the running program.
    Built once at startup and handed to every component that needs it.
    """

    logger: logging.Logger
    config_parser: configparser.ConfigParser
    trace: bool
    scryfall_path: Optional[pathlib.Path]
    proximity_directory: Optional[pathlib.Path]
    output_directory: pathlib.Path
    art_file_extension: str
    proxy_rarity_override: str
    illegal_set_codes: List[str]
    illegal_set_types: List[str]
    use_card_subset: bool
    card_subset: List[str]
    manual_artist_overrides: List[HlfArtistOverrideObject]
    delete_bad_faces: bool
    updates_only: bool
    max_rerender_attempts: int
    batch_size: int
    proximity_jar: str
    java_path: str
    set_symbol: str
    template_assets: Dict[CardTemplate, str]
    bulk_type: str

    def __init__(
        self,
        config_path: Optional[pathlib.Path] = None,
        config_contents: Optional[str] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.config_parser = configparser.ConfigParser()
        if config_contents is not None:
            self.logger.info("Loading configuration from provided contents")
            self.config_parser.read_string(config_contents)
        else:
            config_path = config_path or constants.CONFIG_PATH
            self.logger.info(f"Loading configuration from {config_path}")
            self.__load_config_from_local_file(config_path)

        self.trace = self.get_boolean("HLF", "trace", False)
        self.proximity_jar = self.get(
            "Proximity", "jar_file", constants.DEFAULT_PROXIMITY_JAR
        )
        self.java_path = self.get("Proximity", "java_path", constants.DEFAULT_JAVA_PATH)
        self.set_symbol = self.get(
            "Proximity", "set_symbol", constants.DEFAULT_SET_SYMBOL
        )
        self.template_assets = self.__parse_template_assets()
        self.bulk_type = self.get("Scryfall", "bulk_type", constants.DEFAULT_BULK_TYPE)

        self.scryfall_path = self.__parse_scryfall_path()
        self.proximity_directory = self.__parse_proximity_directory()
        self.output_directory = self.__parse_output_directory()
        self.art_file_extension = self.__parse_art_extension()
        self.proxy_rarity_override = self.__parse_rarity_override()
        self.delete_bad_faces = self.__parse_delete_bad_faces()
        self.illegal_set_codes = self.__parse_illegal_set_codes()
        self.illegal_set_types = [
            set_type.lower()
            for set_type in self.get_lines(
                "HLF", "illegal_set_types", comma_separated=True
            )
        ] or list(constants.DEFAULT_ILLEGAL_SET_TYPES)
        self.use_card_subset, self.card_subset = self.__parse_card_subset()
        self.manual_artist_overrides = self.__parse_manual_artist_overrides()
        self.updates_only = self.get_boolean("HLF", "updates_only", False)
        self.max_rerender_attempts = self.__parse_max_rerender_attempts()
        self.batch_size = self.__parse_batch_size()

    @property
    def valid(self) -> bool:
        """
        :return: Whether both the catalog and Proximity were found
        """
        return self.scryfall_path is not None and self.proximity_directory is not None

    @property
    def is_proxy_rarity_overridden(self) -> bool:
        return bool(self.proxy_rarity_override)

    def __load_config_from_local_file(self, file_path: pathlib.Path) -> None:
        """
        Load local file from resources as HLF configuration file
        :param file_path: Path to Configuration file
        """
        if not file_path.is_file():
            self.logger.warning(f"Config file not found: {file_path}. Using defaults.")
            return
        self.config_parser.read(str(file_path), encoding="utf-8")

    def get(self, section: str, option: str, fallback: str = "") -> str:
        """
        Get a specific value from configuration
        :param section: Section header
        :param option: Key in section
        :param fallback: Default value to use if key not found in section
        :returns Configuration value to use
        """
        if self.has_option(section, option):
            return self.config_parser.get(section, option, fallback=fallback).strip()
        return fallback

    def get_boolean(self, section: str, option: str, fallback: bool = False) -> bool:
        """
        Get a specific value from configuration
        :param section: Section header
        :param option: Key in section
        :param fallback: Default value to use if key not found in section
        :returns Configuration value to use (as a Boolean)
        """
        if self.has_option(section, option):
            try:
                return self.config_parser.getboolean(section, option, fallback=fallback)
            except ValueError:
                self.logger.warning(
                    f"Invalid boolean for {section}.{option}. Defaulting to {fallback}."
                )
        return fallback

    def get_int(self, section: str, option: str, fallback: int) -> int:
        """
        Get a specific value from configuration
        :param section: Section header
        :param option: Key in section
        :param fallback: Default value to use if key not found or not a number
        :returns Configuration value to use (as an int)
        """
        if self.has_option(section, option):
            try:
                return self.config_parser.getint(section, option)
            except ValueError:
                self.logger.warning(
                    f"Invalid number for {section}.{option}. Defaulting to {fallback}."
                )
        return fallback

    def get_lines(
        self, section: str, option: str, comma_separated: bool = False
    ) -> List[str]:
        """
        Get a multi-line value as a list
        :param section: Section header
        :param option: Key in section
        :param comma_separated: Also split a single line on commas
        :return: Non-empty stripped entries
        """
        raw_value = self.get(section, option)
        if comma_separated:
            raw_value = raw_value.replace(",", "\n")
        return [line.strip() for line in raw_value.splitlines() if line.strip()]

    def get_template_path(self, template: CardTemplate) -> pathlib.Path:
        """
        Where the Proximity template asset for a rendering pass lives
        :param template: Rendering pass
        :return: Asset path under the Proximity directory
        """
        proximity_directory = self.proximity_directory or constants.PROXIMITY_DIR
        return proximity_directory.joinpath("templates", self.template_assets[template])

    def get_proximity_jar_path(self) -> pathlib.Path:
        """
        :return: Path to the Proximity jar under the Proximity directory
        """
        proximity_directory = self.proximity_directory or constants.PROXIMITY_DIR
        return proximity_directory.joinpath(self.proximity_jar)

    def __parse_template_assets(self) -> Dict[CardTemplate, str]:
        """
        Each rendering pass can use its own Proximity template.
        Specialized passes fall back to the standard template.
        """
        standard = self.get(
            "Proximity", "standard_template", constants.DEFAULT_TEMPLATE_ASSET
        )
        return {
            CardTemplate.STANDARD: standard,
            CardTemplate.SKETCH: self.get("Proximity", "sketch_template", standard),
            CardTemplate.DOUBLE_FEATURE: self.get(
                "Proximity", "double_feature_template", standard
            ),
        }

    def __parse_scryfall_path(self) -> Optional[pathlib.Path]:
        """
        Try to find path for Scryfall JSON. If the configured one is unusable,
        look in the package's scryfall directory for one.
        """
        scryfall_string = self.get("HLF", "scryfall_path")

        if not scryfall_string:
            self.logger.debug("Path to Scryfall JSON not supplied.")
        else:
            scryfall_path = pathlib.Path(scryfall_string).expanduser()
            if not scryfall_path.is_file():
                self.logger.warning(f"Scryfall JSON not found at '{scryfall_path}'.")
            elif not is_scryfall_json(scryfall_path):
                self.logger.warning("Provided JSON is not a valid Scryfall JSON file.")
            else:
                self.logger.debug(f"Scryfall JSON pulled from config: '{scryfall_path}'.")
                return scryfall_path

        self.logger.log(TRACE, "Attempting to pull Scryfall file from package directory.")
        if not constants.SCRYFALL_DIR.is_dir():
            self.logger.error(
                f"Unable to find Scryfall directory '{constants.SCRYFALL_DIR}'!"
            )
            return None

        scryfall_files = sorted(constants.SCRYFALL_DIR.glob("*.json"))
        if not scryfall_files:
            self.logger.error(
                f"No JSON files found in Scryfall directory '{constants.SCRYFALL_DIR}'!"
            )
            return None

        for scryfall_file in scryfall_files:
            if is_scryfall_json(scryfall_file):
                self.logger.debug(f"Scryfall JSON found in package directory: {scryfall_file}")
                return scryfall_file

        self.logger.error("Unable to find Scryfall JSON in package directory!")
        return None

    def __parse_proximity_directory(self) -> Optional[pathlib.Path]:
        """
        Try to find the Proximity directory, falling back to the package's
        proximity directory if the configured one is unusable
        """
        proximity_string = self.get("HLF", "proximity_directory")

        if not proximity_string:
            self.logger.debug("Path to Proximity directory not supplied.")
        else:
            proximity_directory = pathlib.Path(proximity_string).expanduser()
            if not proximity_directory.is_dir():
                self.logger.warning(
                    f"Proximity directory not found at '{proximity_directory}'."
                )
            elif not self.is_proximity_directory(proximity_directory):
                self.logger.warning("Provided directory is not a valid Proximity directory.")
            else:
                self.logger.debug(
                    f"Proximity files found from config: '{proximity_directory}'."
                )
                return proximity_directory

        self.logger.log(TRACE, "Attempting to find Proximity files in package directory.")
        if not self.is_proximity_directory(constants.PROXIMITY_DIR):
            self.logger.error("Unable to find Proximity files in package directory!")
            return None

        self.logger.debug("Proximity files found in package directory.")
        return constants.PROXIMITY_DIR

    def is_proximity_directory(self, directory: pathlib.Path) -> bool:
        """
        Determine whether a directory holds the Proximity jar and standard template
        :param directory: Directory to check
        :return: Whether Proximity can run from it
        """
        if not directory.is_dir():
            self.logger.log(TRACE, f"Proximity directory '{directory}' does not exist.")
            return False

        if not directory.joinpath(self.proximity_jar).is_file():
            self.logger.log(
                TRACE, f"Proximity directory '{directory}' does not contain a Proximity file."
            )
            return False

        template_asset = self.template_assets[CardTemplate.STANDARD]
        if not directory.joinpath("templates", template_asset).is_file():
            self.logger.log(
                TRACE,
                f"Proximity directory '{directory}' does not contain a Proximity template file.",
            )
            return False

        return True

    def __parse_output_directory(self) -> pathlib.Path:
        output_string = self.get("HLF", "output_directory")
        if output_string:
            return pathlib.Path(output_string).expanduser()
        if self.proximity_directory is not None:
            return self.proximity_directory.joinpath("Proxies")
        return constants.ENV_OUT_PATH.joinpath("Proxies")

    def __parse_art_extension(self) -> str:
        """
        Determine what art extension to use. Defaults to '.jpg'
        """
        art_file_extension = self.get(
            "HLF", "art_file_extension", constants.DEFAULT_ART_FILE_EXTENSION
        ).lower()
        if art_file_extension not in constants.VALID_ART_FILE_EXTENSIONS:
            self.logger.warning(
                f"Invalid art file extension '{art_file_extension}'. "
                f"Defaulting to '{constants.DEFAULT_ART_FILE_EXTENSION}'."
            )
            return constants.DEFAULT_ART_FILE_EXTENSION

        self.logger.debug(f"Art file extension pulled from config: '{art_file_extension}'.")
        return art_file_extension

    def __parse_rarity_override(self) -> str:
        """
        Determine if we're overriding card rarity so the whole set matches
        """
        rarity = self.get("HLF", "proxy_rarity_override").lower()
        if not rarity:
            self.logger.debug(
                "No proxy rarity override supplied. Using card defaults from Scryfall."
            )
            return ""

        if rarity not in constants.VALID_RARITIES:
            self.logger.warning(
                f"Invalid proxy rarity override supplied: {rarity}. Using card defaults from Scryfall."
            )
            return ""

        self.logger.debug(f"Proxy rarity override pulled from config: '{rarity}'.")
        return rarity

    def __parse_delete_bad_faces(self) -> bool:
        delete_bad_faces = self.get_boolean("HLF", "delete_bad_faces", False)
        if delete_bad_faces:
            self.logger.debug(
                "Bad proxy faces will be deleted once all proxies have been rendered."
            )
        else:
            self.logger.warning("Bad proxy faces will not be automatically deleted.")
        return delete_bad_faces

    def __parse_illegal_set_codes(self) -> List[str]:
        illegal_set_codes = [
            code.lower()
            for code in self.get_lines("HLF", "illegal_set_codes", comma_separated=True)
        ]
        for code in illegal_set_codes:
            self.logger.log(TRACE, f"Added {code} to list of illegal sets.")
        self.logger.debug(f"Loaded {len(illegal_set_codes)} illegal sets.")
        return illegal_set_codes

    def __parse_card_subset(self) -> Tuple[bool, List[str]]:
        """
        Determine whether we're using the full card list, or only the subset in the config file
        """
        use_card_subset = self.get_boolean("HLF", "use_card_subset", False)
        if not use_card_subset:
            self.logger.debug("Using all legal cards.")
            return False, []

        self.logger.warning(
            "Not using the full format, only the subset specified in the config file!"
        )

        card_subset = []
        for specified_card in self.get_lines("HLF", "card_subset"):
            specified_card = specified_card.lower()
            if "//" not in specified_card:
                self.logger.warning(
                    f"Specified card '{specified_card}' does not have '//'. "
                    "Please double check that you have the full card name."
                )
                continue
            card_subset.append(specified_card)
            self.logger.log(TRACE, f"Added '{specified_card}' to list of specified cards.")

        self.logger.debug(f"Loaded {len(card_subset)} specified cards.")
        return True, card_subset

    def __parse_manual_artist_overrides(self) -> List[HlfArtistOverrideObject]:
        """
        Find any cards for which we need to manually override the artist.
        Each line reads "card name // other name | face | artist".
        """
        overrides = []
        for line in self.get_lines("HLF", "manual_artist_overrides"):
            parts = [part.strip() for part in line.split("|")]
            card = parts[0].lower()
            face_string = parts[1].lower() if len(parts) > 1 else ""
            artist = parts[2] if len(parts) > 2 else ""

            if not card:
                self.logger.error("Skipping artist override with no card name!")
                continue
            if "//" not in card:
                self.logger.warning(
                    f"Artist override '{card}' does not have '//'. "
                    "Please double check that you have the full card name."
                )
                continue
            if not artist:
                self.logger.error(
                    f"Skipping artist override for '{card}' with no artist name!"
                )
                continue

            face = CardFace.BACK
            if face_string == "front":
                face = CardFace.FRONT
            elif face_string != "back":
                self.logger.warning(
                    f"Manual artist override for '{card}' has its face improperly "
                    "specified. Defaulting to 'Back'."
                )

            overrides.append(HlfArtistOverrideObject(card, face, artist))
            self.logger.log(TRACE, f"Added '{card}' to list of artist overrides.")

        self.logger.debug(f"Loaded {len(overrides)} manual artist overrides.")
        return overrides

    def __parse_max_rerender_attempts(self) -> int:
        attempts = self.get_int(
            "HLF", "max_rerender_attempts", constants.DEFAULT_MAX_RERENDER_ATTEMPTS
        )
        if attempts < 0:
            self.logger.warning(
                f"Negative rerender attempts ({attempts}) make no sense. Disabling rerenders."
            )
            return 0
        return attempts

    def __parse_batch_size(self) -> int:
        """
        Batch size should be even so both halves of a card end up in the same batch
        """
        batch_size = self.get_int("HLF", "batch_size", constants.DEFAULT_BATCH_SIZE)
        if batch_size < 2:
            self.logger.warning(
                f"Batch size {batch_size} is too small. Defaulting to {constants.DEFAULT_BATCH_SIZE}."
            )
            return constants.DEFAULT_BATCH_SIZE
        if batch_size % 2:
            self.logger.warning(
                f"Batch size {batch_size} is odd. Rounding up to {batch_size + 1}."
            )
            batch_size += 1
        return batch_size


def is_scryfall_json(file_path: pathlib.Path) -> bool:
    """
    Determine whether a given file is a potentially valid Scryfall JSON file.
    Only the first entry is read, the catalog itself can be huge.
    :param file_path: File to check
    :return: Whether it looks like a Scryfall card array
    """
    if not file_path.is_file() or file_path.suffix.lower() != ".json":
        return False

    try:
        with file_path.open("rb") as file:
            first_entry = next(ijson.items(file, "item"), None)
    except (OSError, ijson.JSONError):
        return False

    return isinstance(first_entry, dict) and first_entry.get("object") == "card"
