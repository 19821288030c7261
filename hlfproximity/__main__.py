"""
HLF Proximity Main Executor
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from hlfproximity.consts import CardTemplate
from hlfproximity.hlf_config import HlfConfig
from hlfproximity.utils import init_logger

LOGGER: logging.Logger = logging.getLogger(__name__)


def validate_proximity_files(config: HlfConfig) -> None:
    """
    Make sure everything needed to run exists before rendering anything.
    If not, stop the run with an error message.
    :param config: Run configuration
    """
    from hlfproximity.errors import HlfRunError

    if config.valid:
        return

    if config.scryfall_path is None:
        raise HlfRunError(
            "config",
            "No Scryfall JSON found. Set 'scryfall_path' or use --download-catalog.",
        )

    if config.proximity_directory is None:
        raise HlfRunError(
            "config",
            f"No Proximity directory with '{config.proximity_jar}' and "
            f"'templates/{config.template_assets[CardTemplate.STANDARD]}' found.",
        )


def dispatcher(args: argparse.Namespace, config: HlfConfig) -> None:
    """
    HLF Proximity Dispatcher
    """
    from hlfproximity.art_manager import ArtManager
    from hlfproximity.card_builder import parse_catalog
    from hlfproximity.output_generator import write_card_manifest
    from hlfproximity.providers import ScryfallBulkProvider
    from hlfproximity.proximity_manager import ProximityManager

    if args.download_catalog:
        catalog_path = ScryfallBulkProvider(config).download_catalog()
        if catalog_path:
            config.scryfall_path = catalog_path

    validate_proximity_files(config)

    cards = parse_catalog(config)

    if args.manifest:
        write_card_manifest(cards, config, args.pretty)

    art_manager = ArtManager(cards, config)
    for template in args.passes:
        pass_cards = [card for card in cards if card.template == template]
        if not pass_cards:
            LOGGER.info(f"No cards use the {template.value} template. Skipping pass.")
            continue

        if not args.skip_render:
            result = ProximityManager(cards, config, template).run()
            if not result.succeeded:
                LOGGER.error(
                    f"The {template.value} pass finished with "
                    f"{len(result.remaining_failures)} cards still failing to render."
                )

        if not args.skip_reconcile:
            art_manager.clean_proxies(template)


def main(argv: Optional[List[str]] = None) -> int:
    """
    HLF Proximity safe main call
    """
    from hlfproximity.arg_parser import parse_args
    from hlfproximity.errors import HlfRunError
    from hlfproximity.utils import set_trace_enabled

    init_logger()
    args = parse_args(argv)

    start_time = time.time()
    LOGGER.info("Starting HLF Proximity run")

    try:
        config = HlfConfig(args.config)
        set_trace_enabled(config.trace)
        dispatcher(args, config)
    except HlfRunError as error:
        LOGGER.critical(f"Run failed: {error}")
        return 1
    finally:
        LOGGER.info(f"Run finished in {time.time() - start_time:.2f} seconds")

    return 0


if __name__ == "__main__":
    sys.exit(main())
