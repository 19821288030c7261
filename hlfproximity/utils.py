"""
HLF Proximity simple utilities
"""

import logging
import os
import time
from typing import Optional

from . import constants

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")

LOGGER = logging.getLogger(__name__)


def init_logger() -> None:
    """
    Initialize the main system logger
    """
    constants.LOG_PATH.mkdir(parents=True, exist_ok=True)

    start_time = time.strftime("%Y-%m-%d_%H.%M.%S")

    logging.basicConfig(
        level=(
            TRACE
            if os.environ.get("HLF_DEBUG", "").lower() in ["true", "1"]
            else logging.DEBUG
        ),
        format="[%(levelname)s] %(asctime)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(
                str(constants.LOG_PATH.joinpath(f"hlf_{start_time}.log"))
            ),
        ],
    )
    logging.getLogger("urllib3").setLevel(logging.ERROR)


def set_trace_enabled(enabled: bool) -> None:
    """
    Toggle TRACE output on the root logger once the config is known
    :param enabled: Should trace messages be emitted
    """
    if enabled:
        logging.getLogger().setLevel(TRACE)
        LOGGER.debug("Trace messages are enabled.")
    else:
        LOGGER.debug("Trace messages are disabled.")


def plural(count: int, word: str, plural_word: Optional[str] = None) -> str:
    """
    Render "<count> <word>" with the plural form where needed
    :param count: How many
    :param word: Singular noun
    :param plural_word: Irregular plural, defaults to word + "s"
    :return: Phrase
    """
    if count == 1:
        return f"{count} {word}"
    return f"{count} {plural_word or word + 's'}"


def to_camel_case(snake_str: str) -> str:
    """
    Convert "snake_case" => "camelCase"
    :param snake_str: Snake String
    :return: Camel String
    """
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
