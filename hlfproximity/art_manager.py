"""
HLF Art Manager

Picks the good proxy image for each card face out of everything
Proximity rendered and collects it in the output directory.
"""

import dataclasses
import logging
import pathlib
import shutil
from typing import Dict, List, Optional, Tuple

from . import constants
from .classes import HlfCardObject
from .consts import CardFace, CardTemplate
from .hlf_config import HlfConfig
from .utils import TRACE, plural

LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass
class ProxyReport:
    """What happened to the rendered proxies of one pass"""

    good_proxy_count: int = 0
    bad_proxy_count: int = 0
    unmatched_proxies: List[str] = dataclasses.field(default_factory=list)
    missing_proxies: List[str] = dataclasses.field(default_factory=list)


def parse_proxy_file_name(file_name: str) -> Optional[Tuple[int, str]]:
    """
    Split a rendered proxy's file name into its number and card name.
    Proximity names its renders "<number>[a|b] <Card Name>.png".
    :param file_name: Proxy file name
    :return: (number, display name), or None if the number is unusable
    """
    split_file_name = pathlib.Path(file_name).stem.split(" ")
    number = split_file_name[0].replace("a", "").replace("b", "").strip()
    card_name = " ".join(split_file_name[1:]).strip()

    try:
        number_int = int(number)
    except ValueError:
        return None

    if number_int <= 0:
        return None
    return number_int, card_name


def should_keep_proxy(template: CardTemplate, card: HlfCardObject, number: int) -> bool:
    """
    Determine whether a rendered proxy is the correct face of a card
    :param template: Rendering pass being cleaned up
    :param card: Card face the proxy is named after
    :param number: Proxy number from the file name
    :return: Whether to keep it
    """
    if template != CardTemplate.STANDARD:
        # Specialized templates only ever produce a usable back face
        return card.face == CardFace.BACK

    if card.template != CardTemplate.STANDARD:
        return False

    is_even = number % 2 == 0
    if card.face == CardFace.FRONT:
        return is_even
    return not is_even


class ArtManager:
    """
    Handles all tasks related to image files generated by Proximity
    """

    config: HlfConfig
    cards: List[HlfCardObject]
    __cards_by_display_name: Dict[str, HlfCardObject]

    def __init__(self, cards: List[HlfCardObject], config: HlfConfig) -> None:
        if cards is None:
            raise ValueError("Unable to clean proxies without a card pool")

        self.config = config
        self.cards = cards
        self.__cards_by_display_name = {}
        for card in cards:
            self.__cards_by_display_name.setdefault(card.display_name.lower(), card)

    @property
    def image_directories(self) -> List[pathlib.Path]:
        proximity_directory = self.config.proximity_directory or constants.PROXIMITY_DIR
        return [
            proximity_directory.joinpath("images", image_dir)
            for image_dir in constants.PROXY_IMAGE_DIRS
        ]

    def get_proxy_path(self, card: HlfCardObject) -> pathlib.Path:
        """
        :return: Stable output location for a card face's proxy
        """
        return self.config.output_directory.joinpath(
            card.display_name + constants.PROXY_EXTENSION
        )

    def find_card(self, display_name: str) -> Optional[HlfCardObject]:
        return self.__cards_by_display_name.get(display_name.lower())

    def find_proxy_files(self) -> List[pathlib.Path]:
        """
        :return: Every file Proximity left in its image directories
        """
        proxy_files: List[pathlib.Path] = []
        for image_directory in self.image_directories:
            if not image_directory.is_dir():
                LOGGER.warning(f"Unable to find image directory '{image_directory}'.")
                continue
            proxy_files.extend(
                sorted(path for path in image_directory.iterdir() if path.is_file())
            )
        return proxy_files

    def clean_proxies(self, template: CardTemplate = CardTemplate.STANDARD) -> ProxyReport:
        """
        Copy the good proxy of every card face in a pass to the output
        directory, optionally deleting the bad ones
        :param template: Rendering pass to clean up after
        :return: What was kept, discarded and missed
        """
        report = ProxyReport()
        self.config.output_directory.mkdir(parents=True, exist_ok=True)

        proxy_files = self.find_proxy_files()
        for processed_count, proxy_file in enumerate(proxy_files, start=1):
            LOGGER.log(TRACE, f"Found '{proxy_file.name}' in {proxy_file.parent}.")
            self.process_proxy_file(proxy_file, template, report)
            LOGGER.log(
                TRACE, f"Processed {processed_count} of {len(proxy_files)} potential proxies."
            )

        report.missing_proxies = self.report_missing_proxies(template)

        LOGGER.info(
            f"{plural(report.good_proxy_count, 'completed render')} available in "
            f"'{self.config.output_directory}'!"
        )
        return report

    def process_proxy_file(
        self, proxy_file: pathlib.Path, template: CardTemplate, report: ProxyReport
    ) -> None:
        """
        Keep or discard a single rendered proxy
        :param proxy_file: Candidate image
        :param template: Rendering pass being cleaned up
        :param report: Running tally for the pass
        """
        if proxy_file.suffix.lower() != constants.PROXY_EXTENSION:
            LOGGER.warning(
                f"'{proxy_file.name}' does not end with extension "
                f"'{constants.PROXY_EXTENSION}'. Cannot process as a proxy."
            )
            return

        parsed_file_name = parse_proxy_file_name(proxy_file.name)
        if parsed_file_name is None:
            LOGGER.warning(f"'{proxy_file.name}' is not numbered like a proxy. Skipping.")
            return
        number, card_name = parsed_file_name

        card = self.find_card(card_name)
        if card is None:
            LOGGER.warning(f"Unable to find a card for the rendered proxy '{proxy_file.name}'.")
            report.unmatched_proxies.append(proxy_file.name)
            return

        if not should_keep_proxy(template, card, number):
            report.bad_proxy_count += 1
            if self.config.delete_bad_faces:
                LOGGER.log(TRACE, f"Found bad proxy for {card_name}. Deleting '{proxy_file.name}'.")
                proxy_file.unlink()
            else:
                LOGGER.log(TRACE, f"Found bad proxy for {card_name}: '{proxy_file.name}'.")
            return

        LOGGER.debug(f"Found good proxy for {card.display_name}.")
        good_proxy_path = self.get_proxy_path(card)

        # Specialized passes may legitimately rerender; standard renders are never replaced
        if good_proxy_path.is_file() and template == CardTemplate.STANDARD:
            LOGGER.log(TRACE, f"A proxy for {card.display_name} already exists. Not replacing it.")
            report.good_proxy_count += 1
            return

        try:
            shutil.copyfile(proxy_file, good_proxy_path)
        except OSError as error:
            LOGGER.error(f"Unable to collect good proxy for {card.display_name}! {error}")
            return

        LOGGER.debug(f"Good proxy for {card.display_name} copied to '{good_proxy_path}'.")
        report.good_proxy_count += 1

    def report_missing_proxies(self, template: CardTemplate) -> List[str]:
        """
        Warn about every card in the pass that ended up without a proxy
        :param template: Rendering pass being cleaned up
        :return: Display names of cards with no proxy
        """
        missing_proxies = [
            card.display_name
            for card in self.cards
            if card.template == template and not self.get_proxy_path(card).is_file()
        ]

        for display_name in missing_proxies:
            LOGGER.warning(f"No proxy found for {display_name}.")

        if missing_proxies:
            LOGGER.error(
                f"{plural(len(missing_proxies), 'card')} did not have successful proxies generated. "
                "Consider specifying them in the config file and running again!"
            )

        return missing_proxies
