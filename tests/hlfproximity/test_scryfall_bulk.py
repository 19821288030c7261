import json

import pytest
import responses

from hlfproximity.hlf_config import HlfConfig
from hlfproximity.providers import ScryfallBulkProvider

BULK_DATA_URL = "https://api.scryfall.com/bulk-data"
DOWNLOAD_URL = "https://data.scryfall.io/default-cards/default-cards-20240101.json"


@pytest.fixture
def bulk_data_index():
    return {
        "object": "list",
        "has_more": False,
        "data": [
            {
                "object": "bulk_data",
                "type": "oracle_cards",
                "download_uri": "https://data.scryfall.io/oracle-cards/oracle-cards.json",
            },
            {
                "object": "bulk_data",
                "type": "default_cards",
                "download_uri": DOWNLOAD_URL,
            },
        ],
    }


@responses.activate
def test_download_catalog(
    reset_scryfall_singleton, config, tmp_path, bulk_data_index, sample_catalog
):
    responses.add(responses.GET, BULK_DATA_URL, json=bulk_data_index, status=200)
    responses.add(
        responses.GET, DOWNLOAD_URL, body=json.dumps(sample_catalog), status=200
    )
    destination = tmp_path / "scryfall" / "default_cards.json"

    catalog_path = ScryfallBulkProvider(config).download_catalog(destination)

    assert catalog_path == destination
    assert json.loads(destination.read_text(encoding="utf-8")) == sample_catalog
    assert not destination.with_suffix(".part").exists()


@responses.activate
def test_unknown_bulk_type(reset_scryfall_singleton, make_config, tmp_path, bulk_data_index):
    config = make_config()
    config.bulk_type = "everything"
    responses.add(responses.GET, BULK_DATA_URL, json=bulk_data_index, status=200)

    provider = ScryfallBulkProvider(config)

    assert provider.get_bulk_download_url("everything") is None
    assert provider.download_catalog(tmp_path / "everything.json") is None


@responses.activate
def test_failed_download_leaves_nothing_behind(
    reset_scryfall_singleton, config, tmp_path, bulk_data_index
):
    responses.add(responses.GET, BULK_DATA_URL, json=bulk_data_index, status=200)
    responses.add(responses.GET, DOWNLOAD_URL, status=404)
    destination = tmp_path / "default_cards.json"

    assert ScryfallBulkProvider(config).download_catalog(destination) is None
    assert not destination.exists()
    assert not destination.with_suffix(".part").exists()


@responses.activate
def test_download_that_is_not_a_catalog(
    reset_scryfall_singleton, config, tmp_path, bulk_data_index
):
    responses.add(responses.GET, BULK_DATA_URL, json=bulk_data_index, status=200)
    responses.add(
        responses.GET, DOWNLOAD_URL, body=json.dumps([{"object": "error"}]), status=200
    )

    assert ScryfallBulkProvider(config).download_catalog(tmp_path / "bad.json") is None


@responses.activate
def test_client_secret_is_sent(reset_scryfall_singleton, bulk_data_index):
    config = HlfConfig(config_contents="[Scryfall]\nclient_secret=s3cret\n")
    responses.add(responses.GET, BULK_DATA_URL, json=bulk_data_index, status=200)

    ScryfallBulkProvider(config).get_bulk_download_url("default_cards")

    assert responses.calls[0].request.headers["Authorization"] == "Bearer s3cret"


def test_provider_is_a_singleton(reset_scryfall_singleton, config):
    assert ScryfallBulkProvider(config) is ScryfallBulkProvider(config)
