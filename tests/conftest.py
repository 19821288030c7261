"""Pytest configuration and fixtures for HLF Proximity tests."""

import json
import pathlib
from typing import Any, Callable, Dict, List, Optional

import pytest

from hlfproximity.hlf_config import HlfConfig
from hlfproximity.providers import ScryfallBulkProvider


def build_catalog_entry(
    name: str,
    layout: str = "split",
    mana_costs: tuple = ("{R}", "{U}"),
    artists: tuple = ("Franz Vohwinkel", "Franz Vohwinkel"),
    watermarks: tuple = (None, None),
    **fields: Any,
) -> Dict[str, Any]:
    """Build a Scryfall catalog entry shaped like the bulk data."""
    faces = []
    for face_name, mana_cost, artist, watermark in zip(
        name.split(" // "), mana_costs, artists, watermarks
    ):
        face: Dict[str, Any] = {
            "object": "card_face",
            "name": face_name,
            "mana_cost": mana_cost,
            "artist": artist,
        }
        if watermark:
            face["watermark"] = watermark
        faces.append(face)

    entry: Dict[str, Any] = {
        "object": "card",
        "name": name,
        "layout": layout,
        "set": "tst",
        "set_type": "expansion",
        "border_color": "black",
        "promo": False,
        "reprint": False,
        "variation": False,
        "keywords": [],
        "card_faces": faces,
    }
    entry.update(fields)
    return entry


@pytest.fixture
def catalog_entry() -> Callable[..., Dict[str, Any]]:
    """Factory for Scryfall catalog entries."""
    return build_catalog_entry


@pytest.fixture
def sample_catalog() -> List[Dict[str, Any]]:
    """A small catalog mixing legal and illegal printings."""
    return [
        build_catalog_entry(
            "Bonecrusher Giant // Stomp",
            layout="adventure",
            mana_costs=("{2}{R}", "{1}{R}"),
            artists=("Victor Adame Minguez", "Victor Adame Minguez"),
        ),
        build_catalog_entry(
            "Fire // Ice",
            mana_costs=("{1}{R}", "{1}{U}"),
            artists=("Franz Vohwinkel", "Franz Vohwinkel"),
        ),
        build_catalog_entry("Fire // Ice", reprint=True, set="mh2"),
        build_catalog_entry(
            "Delver of Secrets // Insectile Aberration",
            layout="transform",
            mana_costs=("{U}", ""),
        ),
        build_catalog_entry("Wear // Tear", promo=True),
        build_catalog_entry("Dead // Gone", frame_effects=["showcase"]),
        build_catalog_entry("Life // Death", border_color="white"),
    ]


@pytest.fixture
def write_catalog(tmp_path: pathlib.Path) -> Callable[[List[Dict[str, Any]]], pathlib.Path]:
    """Write catalog entries to a Scryfall-style JSON array on disk."""

    def _write(entries: List[Dict[str, Any]]) -> pathlib.Path:
        catalog_path = tmp_path / "scryfall" / "default_cards.json"
        catalog_path.parent.mkdir(parents=True, exist_ok=True)
        catalog_path.write_text(json.dumps(entries), encoding="utf-8")
        return catalog_path

    return _write


@pytest.fixture
def proximity_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """A Proximity directory with the jar, the HLF template and an art folder."""
    directory = tmp_path / "proximity"
    directory.joinpath("templates").mkdir(parents=True)
    directory.joinpath("art").mkdir()
    directory.joinpath("proximity-0.6.2.jar").write_bytes(b"jar")
    directory.joinpath("templates", "hlf.zip").write_bytes(b"zip")
    return directory


@pytest.fixture
def make_config(
    tmp_path: pathlib.Path, proximity_dir: pathlib.Path
) -> Callable[..., HlfConfig]:
    """
    Build an HlfConfig from properties text. The proximity and output
    directories point at the test's temporary directory unless overridden.
    """

    def _make(
        hlf_options: str = "",
        proximity_options: str = "",
        catalog_path: Optional[pathlib.Path] = None,
    ) -> HlfConfig:
        contents = (
            "[HLF]\n"
            f"proximity_directory={proximity_dir}\n"
            f"output_directory={tmp_path / 'Proxies'}\n"
            f"scryfall_path={catalog_path or ''}\n"
            f"{hlf_options}\n"
            "[Proximity]\n"
            f"{proximity_options}\n"
        )
        return HlfConfig(config_contents=contents)

    return _make


@pytest.fixture
def config(make_config: Callable[..., HlfConfig]) -> HlfConfig:
    """Default configuration rooted in the temporary directory."""
    return make_config()


@pytest.fixture
def reset_scryfall_singleton():
    """Reset the ScryfallBulkProvider singleton between tests."""
    ScryfallBulkProvider._instance = None
    yield
    ScryfallBulkProvider._instance = None
