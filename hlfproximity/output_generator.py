"""
HLF output generator to write out derived card data
"""
import datetime
import json
import logging
import pathlib
from typing import Any, List

from .classes import HlfCardObject
from .hlf_config import HlfConfig

LOGGER = logging.getLogger(__name__)

MANIFEST_FILE_NAME: str = "cards"


def write_to_file(
    output_directory: pathlib.Path,
    file_name: str,
    file_contents: Any,
    pretty_print: bool,
) -> pathlib.Path:
    """
    Dump content to a file in the output directory
    :param output_directory: Directory to write into
    :param file_name: File to dump to
    :param file_contents: Contents to dump
    :param pretty_print: Pretty or minimal
    :return: Written file
    """
    write_file = output_directory.joinpath(f"{file_name}.json")
    write_file.parent.mkdir(parents=True, exist_ok=True)

    with write_file.open("w", encoding="utf-8") as file:
        json.dump(
            obj={
                "meta": {"date": datetime.date.today().isoformat()},
                "data": file_contents,
            },
            fp=file,
            indent=(4 if pretty_print else None),
            ensure_ascii=False,
            default=lambda o: o.to_json(),
        )
        if pretty_print:
            file.write("\n")

    return write_file


def write_card_manifest(
    cards: List[HlfCardObject], config: HlfConfig, pretty_print: bool
) -> pathlib.Path:
    """
    Write every derived card face, with its override flags, next to the proxies
    :param cards: Derived card pool
    :param config: Run configuration
    :param pretty_print: Pretty or minimal
    :return: Manifest file
    """
    manifest = write_to_file(
        config.output_directory, MANIFEST_FILE_NAME, cards, pretty_print
    )
    LOGGER.info(f"Wrote {len(cards)} card faces to {manifest}")
    return manifest
