"""
Scryfall bulk catalog provider
"""
import logging
import pathlib
from typing import Any, Dict, Optional, Union

import ratelimit
import requests
import requests.exceptions
import requests_cache
from singleton_decorator import singleton

from .. import constants
from ..hlf_config import HlfConfig, is_scryfall_json
from ..retryable_session import retryable_session

LOGGER = logging.getLogger(__name__)


@singleton
class ScryfallBulkProvider:
    """
    Downloads the Scryfall bulk card catalog the pipeline reads
    """

    BULK_DATA_URL: str = "https://api.scryfall.com/bulk-data"
    CHUNK_SIZE: int = 1024 * 1024

    config: HlfConfig
    session: Union[requests.Session, requests_cache.CachedSession]
    download_session: requests.Session

    def __init__(self, config: HlfConfig) -> None:
        self.config = config
        use_cache = config.get_boolean("Scryfall", "use_cache", False)
        self.session = retryable_session(
            cache_name=self.__class__.__name__ if use_cache else None
        )
        self.session.headers.update(self._build_http_header())

        # The catalog itself is far too large to cache
        self.download_session = retryable_session()
        self.download_session.headers.update(self._build_http_header())

    def _build_http_header(self) -> Dict[str, str]:
        """
        Construct the Authorization header for Scryfall
        :return: Authorization header
        """
        if not self.config.has_option("Scryfall", "client_secret"):
            LOGGER.debug("Scryfall client secret missing. Defaulting to non-authorized mode")
            return {}

        return {
            "Authorization": f"Bearer {self.config.get('Scryfall', 'client_secret')}",
            "Connection": "Keep-Alive",
        }

    @ratelimit.sleep_and_retry
    @ratelimit.limits(calls=10, period=1)
    def download(self, url: str) -> Any:
        """
        Download JSON content from Scryfall
        :param url: URL to download from
        :return: Parsed response, empty dict on failure
        """
        try:
            response = self.session.get(url)
            response.raise_for_status()
        except requests.exceptions.RequestException as error:
            LOGGER.error(f"Download of {url} failed: {error}")
            return {}

        LOGGER.debug(
            f"Downloaded {response.url} (Cache = {getattr(response, 'from_cache', False)})"
        )
        try:
            return response.json()
        except ValueError as error:
            LOGGER.error(f"Unable to convert response to JSON for URL: {url} -> {error}")
            return {}

    def get_bulk_download_url(self, bulk_type: str) -> Optional[str]:
        """
        Find where Scryfall currently hosts a bulk data file
        :param bulk_type: Bulk data type, e.g. "default_cards"
        :return: Download URL, if Scryfall offers that type
        """
        bulk_data = self.download(self.BULK_DATA_URL)
        for item in bulk_data.get("data", []):
            if item.get("type") == bulk_type:
                return str(item["download_uri"])

        LOGGER.error(f"Scryfall does not offer bulk data of type '{bulk_type}'")
        return None

    def download_catalog(
        self, destination: Optional[pathlib.Path] = None
    ) -> Optional[pathlib.Path]:
        """
        Stream the configured bulk catalog to disk
        :param destination: Where to save it, defaults to the package's scryfall directory
        :return: Saved catalog, or None if it couldn't be downloaded
        """
        bulk_type = self.config.bulk_type
        destination = destination or constants.SCRYFALL_DIR.joinpath(f"{bulk_type}.json")

        download_url = self.get_bulk_download_url(bulk_type)
        if not download_url:
            return None

        LOGGER.info(f"Downloading Scryfall {bulk_type} catalog from {download_url}")
        destination.parent.mkdir(parents=True, exist_ok=True)
        partial_destination = destination.with_suffix(".part")

        try:
            with self.download_session.get(download_url, stream=True) as response:
                response.raise_for_status()
                with partial_destination.open("wb") as file:
                    for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                        file.write(chunk)
        except (requests.exceptions.RequestException, OSError) as error:
            LOGGER.error(f"Unable to download Scryfall catalog: {error}")
            partial_destination.unlink(missing_ok=True)
            return None

        partial_destination.replace(destination)

        if not is_scryfall_json(destination):
            LOGGER.error(f"Downloaded file {destination} is not a Scryfall card catalog")
            return None

        LOGGER.info(f"Saved Scryfall catalog to {destination}")
        return destination
