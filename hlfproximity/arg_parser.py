"""
HLF Proximity Arg Parser to determine what actions to take
"""

import argparse
import logging
import pathlib
from typing import List, Optional

from .consts import CardTemplate

LOGGER = logging.getLogger(__name__)

PASS_ORDER: List[CardTemplate] = [
    CardTemplate.STANDARD,
    CardTemplate.SKETCH,
    CardTemplate.DOUBLE_FEATURE,
]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments from user to determine how to spawn up
    the pipeline and complete the request.
    :param argv: Arguments to parse, defaults to sys.argv
    :return: Namespace of requests
    """
    parser = argparse.ArgumentParser("hlfproximity")

    parser.add_argument(
        "--config",
        type=pathlib.Path,
        metavar="PATH",
        default=None,
        help="Properties file to load instead of hlfproximity/resources/hlf.properties.",
    )
    parser.add_argument(
        "--download-catalog",
        action="store_true",
        help="Download the latest Scryfall bulk catalog before building cards.",
    )
    parser.add_argument(
        "--passes",
        type=CardTemplate,
        nargs="+",
        choices=PASS_ORDER,
        metavar="PASS",
        default=list(PASS_ORDER),
        help="Rendering passes to run: standard, sketch, double_feature. Always run in that order.",
    )
    parser.add_argument(
        "--skip-render",
        action="store_true",
        help="Do not run Proximity, only collect proxies already rendered.",
    )
    parser.add_argument(
        "--skip-reconcile",
        action="store_true",
        help="Do not collect rendered proxies into the output directory.",
    )
    parser.add_argument(
        "--manifest",
        action="store_true",
        help="Write every derived card face to cards.json in the output directory.",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="When writing the manifest, indent the JSON for human readability.",
    )

    args = parser.parse_args(argv)
    args.passes = [template for template in PASS_ORDER if template in args.passes]
    return args
