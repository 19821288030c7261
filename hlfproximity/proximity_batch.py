"""
HLF Proximity Batch

A batch of cards rendered by a single Proximity invocation.
Cards are split into batches to keep each render small and recoverable.
"""

import enum
import logging
import os
import pathlib
import subprocess
from typing import Callable, List, Optional, Tuple

from . import constants
from .classes import HlfCardObject
from .consts import CardTemplate
from .hlf_config import HlfConfig
from .utils import TRACE, plural

LOGGER = logging.getLogger(__name__)
PROXIMITY_LOGGER = logging.getLogger("hlfproximity.proximity")

OVERRIDE_TEMPLATE = " --override="


class ProximityOutput(enum.Enum):
    """Classification of a single line of Proximity output."""

    LOG = "log"
    FAILED_RENDER = "failed_render"
    UNATTRIBUTED_FAILURE = "unattributed_failure"


def classify_proximity_output(line: str) -> Tuple[ProximityOutput, Optional[str]]:
    """
    Determine whether a Proximity output line reports a failed render,
    and for which card. Failure lines are formatted as
    'Severity [Proximity] X/YY ZZZZms Name Of The Card FAILED'
    :param line: One line of Proximity output
    :return: (classification, failed card name if known)
    """
    if constants.FAILED_RENDER_MARKER not in line.lower():
        return ProximityOutput.LOG, None

    split_line = line.split()
    if len(split_line) >= 5:
        # Name comprises the fifth through second to last token
        failed_card_name = " ".join(split_line[4:-1]).strip()
        if failed_card_name:
            return ProximityOutput.FAILED_RENDER, failed_card_name

    return ProximityOutput.UNATTRIBUTED_FAILURE, None


def generate_card_string(card: HlfCardObject, config: HlfConfig) -> str:
    """
    Generates the decklist line for a given card
    :param card: Validated card face
    :param config: Run configuration
    :return: Decklist line with every override the face needs
    """
    card_string = f"1 {card.name}"

    # Add rarity override if one was specified in the config settings
    if config.is_proxy_rarity_overridden:
        card_string += f"{OVERRIDE_TEMPLATE}rarity:{config.proxy_rarity_override}"

    # Add color overrides if faces have different colors
    if card.needs_color_override:
        card_string += f'{OVERRIDE_TEMPLATE}colors:["{card.color}"]'
        card_string += f"{OVERRIDE_TEMPLATE}proximity.mtg.color_count:{card.color_count}"

    if card.needs_watermark_override:
        card_string += f"{OVERRIDE_TEMPLATE}watermark:{card.watermark}"

    # Add artist override if faces have different artists
    if card.needs_artist_override:
        card_string += f'{OVERRIDE_TEMPLATE}artist:"{card.artist}"'

    # Back faces and split cards need manually overridden art
    if card.needs_art_override:
        art_directory = config.proximity_directory or constants.PROXIMITY_DIR
        art_path = (
            art_directory.joinpath("art", card.art_file_name)
            .as_posix()
            .replace(" ", "%20")
            .lstrip("/")
        )
        card_string += f'{OVERRIDE_TEMPLATE}image_uris.art_crop:""file:///{art_path}""'

    return card_string


class ProximityBatch:
    """
    A batch of cards to be run through Proximity
    """

    name: str
    config: HlfConfig
    template: CardTemplate
    max_card_count: int
    cards: List[HlfCardObject]
    failed_render_count: int
    unattributed_failure_count: int
    has_run: bool
    __deck_lines: List[str]
    __on_failed_render: Callable[[str], None]

    def __init__(
        self,
        name: str,
        config: HlfConfig,
        on_failed_render: Callable[[str], None],
        template: CardTemplate = CardTemplate.STANDARD,
        max_card_count: Optional[int] = None,
    ) -> None:
        """
        Initializer for a Proximity batch
        :param name: Batch name, used to scope its working files
        :param config: Run configuration
        :param on_failed_render: Called with the card name of every failed render
        :param template: Rendering pass this batch belongs to
        :param max_card_count: Capacity, defaults to the configured batch size
        """
        if not name:
            raise ValueError("Unable to run Proximity without a batch name")

        self.name = name
        self.config = config
        self.template = template
        self.max_card_count = max_card_count or config.batch_size
        self.cards = []
        self.failed_render_count = 0
        self.unattributed_failure_count = 0
        self.has_run = False
        self.__deck_lines = []
        self.__on_failed_render = on_failed_render

        LOGGER.log(TRACE, f"Batch {self.name} successfully created.")

    @property
    def proximity_directory(self) -> pathlib.Path:
        return self.config.proximity_directory or constants.PROXIMITY_DIR

    @property
    def deck_path(self) -> pathlib.Path:
        return self.proximity_directory.joinpath(self.name + constants.DECK_FILE_SUFFIX)

    @property
    def command_path(self) -> pathlib.Path:
        extension = ".bat" if os.name == "nt" else ".sh"
        return self.proximity_directory.joinpath(
            self.name + constants.COMMAND_FILE_SUFFIX + extension
        )

    @property
    def card_count(self) -> int:
        return len(self.cards)

    @property
    def is_full(self) -> bool:
        return self.card_count >= self.max_card_count

    @property
    def is_functional(self) -> bool:
        return bool(self.name) and bool(self.config.proximity_jar) and self.card_count > 0

    def add_card(self, card: HlfCardObject) -> bool:
        """
        Add a card to the batch if it has room and passes validation
        :param card: Card face to render
        :return: Whether the card was accepted
        """
        if self.is_full:
            LOGGER.warning(f"{self.name}: Batch is full, cannot add {card.display_name}.")
            return False

        if not card.validate():
            LOGGER.warning(f"{self.name}: {card.display_name} failed validation. Skipping.")
            return False

        card_string = generate_card_string(card, self.config)
        LOGGER.log(TRACE, card_string)

        self.__deck_lines.append(card_string)
        self.cards.append(card)
        LOGGER.log(
            TRACE,
            f"{card.display_name} added to batch ({self.card_count}/{self.max_card_count}).",
        )
        return True

    def get_deck_contents(self) -> str:
        """
        :return: Decklist contents for this batch
        """
        return "".join(f"{line}\n" for line in self.__deck_lines)

    def generate_deck_file(self) -> None:
        """
        Generates the decklist for this batch
        """
        LOGGER.log(TRACE, f"{self.name}: Generating decklist file '{self.deck_path.name}'.")

        if not self.__deck_lines:
            LOGGER.error(f"{self.name}: Deck contents are empty, unable to generate deck file!")
            return

        try:
            with self.deck_path.open("w", encoding="utf-8") as file:
                file.write(self.get_deck_contents())
        except OSError as error:
            LOGGER.error(f"{self.name}: Error generating Proximity deck file: {error}")
            return

        LOGGER.log(
            TRACE,
            f"{self.name}: Deck file containing {plural(self.card_count, 'card')} generated at {self.deck_path}",
        )

    def get_command_contents(self) -> str:
        """
        :return: Command that runs Proximity over this batch's decklist
        """
        jar_path = self.config.get_proximity_jar_path()
        template_path = self.config.get_template_path(self.template)
        return (
            f'{self.config.java_path} -jar "{jar_path.as_posix()}" '
            f'--template="{template_path.as_posix()}" '
            f'--cards="{self.deck_path.as_posix()}" '
            f"--art_source=BEST --set_symbol={self.config.set_symbol} --use_card_back=true\n"
        )

    def generate_command_file(self) -> None:
        """
        Creates the script that runs this group of Proximity cards
        """
        LOGGER.log(TRACE, f"{self.name}: Generating command file '{self.command_path.name}'.")

        try:
            with self.command_path.open("w", encoding="utf-8") as file:
                file.write(self.get_command_contents())
        except OSError as error:
            LOGGER.error(f"{self.name}: Error generating Proximity command file: {error}")
            return

        LOGGER.log(TRACE, f"{self.name}: Command file generated: {self.command_path}")

    def verify_proximity_files(self) -> bool:
        """
        Verify that everything the batch needs to run is present
        :return: Whether Proximity can be launched
        """
        required_files = [
            ("Deck file", self.deck_path),
            ("Proximity jar file", self.config.get_proximity_jar_path()),
            ("Proximity template file", self.config.get_template_path(self.template)),
            ("Command file", self.command_path),
        ]

        for description, path in required_files:
            if not path.is_file():
                LOGGER.error(f"{self.name}: {description} not found: {path}")
                return False
            LOGGER.log(TRACE, f"{self.name}: {description} '{path.name}' is present.")

        return True

    def init(self) -> bool:
        """
        Generate the batch's working files and make sure it's ready to run
        :return: Whether the batch can run
        """
        self.generate_deck_file()
        self.generate_command_file()

        ready = self.is_functional and self.verify_proximity_files()
        if ready:
            LOGGER.debug(
                f"{self.name}: Fully initialized with {plural(self.card_count, 'card')} to render."
            )
        else:
            LOGGER.error(f"{self.name}: Failed to fully initialize!")

        return ready

    def build_command(self) -> List[str]:
        """
        :return: Arguments to launch the command file with
        """
        if os.name == "nt":
            return [str(self.command_path)]
        return ["sh", str(self.command_path)]

    def run(self) -> bool:
        """
        Initialize the batch, then run Proximity over it, classifying
        output as it streams in. Proximity's exit code is not trusted,
        only its output is.
        :return: Whether Proximity was launched
        """
        if not self.init():
            return False

        LOGGER.log(TRACE, f"Beginning render for {self.name}.")

        try:
            with subprocess.Popen(
                self.build_command(),
                cwd=str(self.proximity_directory),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            ) as proc:
                if proc.stdout is not None:
                    for line in proc.stdout:
                        self.handle_proximity_output(line)
                return_code = proc.wait()
        except OSError as error:
            LOGGER.error(f"{self.name}: Unable to launch Proximity: {error}")
            return False

        self.has_run = True
        LOGGER.log(TRACE, f"Completed render for {self.name} (exit code {return_code}).")

        if self.failed_render_count:
            LOGGER.warning(
                f"{self.name}: Failed to render {plural(self.failed_render_count, 'card')}."
            )

        return True

    def handle_proximity_output(self, line: str) -> ProximityOutput:
        """
        Forward a line of Proximity output to the log and
        report it to the manager if it is a failed render
        :param line: Raw output line
        :return: How the line was classified
        """
        line = line.rstrip("\r\n")
        if not line:
            return ProximityOutput.LOG

        PROXIMITY_LOGGER.info(line)

        classification, failed_card_name = classify_proximity_output(line)
        if classification == ProximityOutput.FAILED_RENDER and failed_card_name:
            self.failed_render_count += 1
            self.__on_failed_render(failed_card_name)
        elif classification == ProximityOutput.UNATTRIBUTED_FAILURE:
            self.unattributed_failure_count += 1
            LOGGER.error(
                f"{self.name}: Unable to determine name for failed card render. Cannot try again!"
            )

        return classification
