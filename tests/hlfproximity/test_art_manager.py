import pytest

from hlfproximity.art_manager import ArtManager, parse_proxy_file_name, should_keep_proxy
from hlfproximity.card_builder import build_hlf_cards
from hlfproximity.consts import CardTemplate


@pytest.fixture
def card_pool(catalog_entry, config):
    entries = [
        catalog_entry(
            "Bonecrusher Giant // Stomp",
            layout="adventure",
            mana_costs=("{2}{R}", "{1}{R}"),
        ),
        catalog_entry("Fire // Ice"),
    ]
    return build_hlf_cards(entries, config)


@pytest.fixture
def cards_by_name(card_pool):
    return {card.display_name: card for card in card_pool}


@pytest.fixture
def render(proximity_dir):
    """Drop a fake Proximity render into the fronts or backs directory"""

    def _render(file_name, side="fronts", contents=b"png"):
        image_dir = proximity_dir / "images" / side
        image_dir.mkdir(parents=True, exist_ok=True)
        path = image_dir / file_name
        path.write_bytes(contents)
        return path

    return _render


@pytest.mark.parametrize(
    "file_name, expected",
    [
        ("1 Fire.png", (1, "Fire")),
        ("12 Bonecrusher Giant.png", (12, "Bonecrusher Giant")),
        ("3a Ice.png", (3, "Ice")),
        ("4b Ice.png", (4, "Ice")),
        ("0 Fire.png", None),
        ("Fire.png", None),
        ("x1 Fire.png", None),
    ],
)
def test_parse_proxy_file_name(file_name, expected):
    assert parse_proxy_file_name(file_name) == expected


def test_standard_pass_keeps_parity_per_face(cards_by_name):
    fire, ice = cards_by_name["Fire"], cards_by_name["Ice"]

    assert should_keep_proxy(CardTemplate.STANDARD, fire, 2)
    assert not should_keep_proxy(CardTemplate.STANDARD, fire, 3)
    assert should_keep_proxy(CardTemplate.STANDARD, ice, 3)
    assert not should_keep_proxy(CardTemplate.STANDARD, ice, 2)


def test_standard_pass_discards_specialized_templates(cards_by_name):
    stomp = cards_by_name["Stomp"]

    assert not should_keep_proxy(CardTemplate.STANDARD, stomp, 2)
    assert not should_keep_proxy(CardTemplate.STANDARD, stomp, 3)


def test_specialized_pass_keeps_only_backs(cards_by_name):
    for number in (1, 2):
        assert should_keep_proxy(CardTemplate.SKETCH, cards_by_name["Stomp"], number)
        assert not should_keep_proxy(
            CardTemplate.SKETCH, cards_by_name["Bonecrusher Giant"], number
        )
        assert should_keep_proxy(CardTemplate.DOUBLE_FEATURE, cards_by_name["Ice"], number)


def test_clean_standard_pass(card_pool, config, render):
    render("2 Fire.png", contents=b"good fire")
    render("1 Fire.png", contents=b"bad fire")
    render("3 Ice.png", side="backs", contents=b"good ice")
    render("4 Ice.png", side="backs", contents=b"bad ice")
    render("2 Bonecrusher Giant.png")
    render("5 Stomp.png", side="backs")
    render("6 Unknown Card.png")
    render("7 Fire.jpg")

    report = ArtManager(card_pool, config).clean_proxies(CardTemplate.STANDARD)

    output = config.output_directory
    assert output.joinpath("Fire.png").read_bytes() == b"good fire"
    assert output.joinpath("Ice.png").read_bytes() == b"good ice"
    assert output.joinpath("Bonecrusher Giant.png").is_file()
    assert not output.joinpath("Stomp.png").exists()
    assert report.good_proxy_count == 3
    assert report.bad_proxy_count == 3
    assert report.unmatched_proxies == ["6 Unknown Card.png"]
    # Stomp belongs to the sketch pass, so it isn't missing here
    assert report.missing_proxies == []


def test_bad_faces_are_kept_unless_configured(card_pool, config, make_config, render):
    bad = render("1 Fire.png")
    ArtManager(card_pool, config).clean_proxies(CardTemplate.STANDARD)
    assert bad.exists()

    deleting_config = make_config("delete_bad_faces=true")
    ArtManager(card_pool, deleting_config).clean_proxies(CardTemplate.STANDARD)
    assert not bad.exists()


def test_standard_pass_never_overwrites(card_pool, config, render):
    config.output_directory.mkdir(parents=True)
    config.output_directory.joinpath("Fire.png").write_bytes(b"first render")
    render("2 Fire.png", contents=b"second render")

    ArtManager(card_pool, config).clean_proxies(CardTemplate.STANDARD)

    assert config.output_directory.joinpath("Fire.png").read_bytes() == b"first render"


def test_sketch_pass_overwrites(card_pool, config, render):
    config.output_directory.mkdir(parents=True)
    config.output_directory.joinpath("Stomp.png").write_bytes(b"standard render")
    render("2 Stomp.png", side="backs", contents=b"sketch render")
    render("1 Bonecrusher Giant.png", contents=b"sketch front")

    report = ArtManager(card_pool, config).clean_proxies(CardTemplate.SKETCH)

    output = config.output_directory
    assert output.joinpath("Stomp.png").read_bytes() == b"sketch render"
    assert not output.joinpath("Bonecrusher Giant.png").exists()
    assert report.good_proxy_count == 1
    assert report.missing_proxies == []


def test_missing_proxies_are_reported(card_pool, config, render):
    render("2 Fire.png")

    report = ArtManager(card_pool, config).clean_proxies(CardTemplate.STANDARD)

    assert report.missing_proxies == ["Bonecrusher Giant", "Ice"]


def test_missing_image_directories(card_pool, config):
    report = ArtManager(card_pool, config).clean_proxies(CardTemplate.SKETCH)

    assert report.good_proxy_count == 0
    assert report.missing_proxies == ["Stomp"]
