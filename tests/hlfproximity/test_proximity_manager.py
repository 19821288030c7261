import logging
from unittest.mock import patch

import pytest

from hlfproximity.card_builder import build_hlf_cards
from hlfproximity.consts import CardTemplate
from hlfproximity.proximity_batch import ProximityBatch
from hlfproximity.proximity_manager import PassState, ProximityManager


def failure_line(name):
    return f"ERROR [Proximity] 1/20 412ms {name} FAILED"


@pytest.fixture
def scripted_proximity():
    """
    Replace Proximity with a script of output lines per batch name.
    Yields the list of batches in the order they ran.
    """
    ran_batches = []
    script = {}

    def fake_run(batch):
        ran_batches.append(batch)
        for line in script.get(batch.name, []):
            batch.handle_proximity_output(line)
        batch.has_run = True
        return True

    with patch.object(ProximityBatch, "run", autospec=True, side_effect=fake_run):
        yield script, ran_batches


@pytest.fixture
def card_pool(catalog_entry, config):
    entries = [
        catalog_entry(
            "Bonecrusher Giant // Stomp",
            layout="adventure",
            mana_costs=("{2}{R}", "{1}{R}"),
        ),
        catalog_entry("Fire // Ice"),
        catalog_entry("Wear // Tear", mana_costs=("{1}{R}", "{W}")),
    ]
    return build_hlf_cards(entries, config)


def test_partition_preserves_order_and_size(catalog_entry, config):
    entries = [catalog_entry(f"Left{i} // Right{i}") for i in range(23)]
    cards = build_hlf_cards(entries, config)[:45]

    batches = ProximityManager(cards, config).create_batches()

    assert config.batch_size == 20
    assert [batch.card_count for batch in batches] == [20, 20, 5]
    assert [card for batch in batches for card in batch.cards] == cards
    assert [batch.name for batch in batches] == ["hlf_all_0", "hlf_all_1", "hlf_all_2"]


def test_pairs_stay_together_with_even_batch_size(catalog_entry, make_config):
    config = make_config("batch_size=3")
    cards = build_hlf_cards(
        [catalog_entry(f"Left{i} // Right{i}") for i in range(5)], config
    )

    batches = ProximityManager(cards, config).create_batches()

    for batch in batches:
        for card in batch.cards:
            assert card.other_face in batch.cards


def test_pass_only_renders_its_template(card_pool, config):
    standard = ProximityManager(card_pool, config, CardTemplate.STANDARD)
    sketch = ProximityManager(card_pool, config, CardTemplate.SKETCH)

    assert [card.display_name for card in standard.cards] == [
        "Bonecrusher Giant",
        "Fire",
        "Ice",
        "Wear",
        "Tear",
    ]
    assert [card.display_name for card in sketch.cards] == ["Stomp"]
    assert sketch.create_batches()[0].name == "hlf_sketch_0"


def test_clean_run_succeeds_without_retries(card_pool, config, scripted_proximity):
    _, ran_batches = scripted_proximity

    result = ProximityManager(card_pool, config).run()

    assert result.state == PassState.SUCCEEDED
    assert result.succeeded
    assert result.batch_count == 1
    assert result.retry_rounds == []
    assert len(ran_batches) == 1


def test_failed_card_is_rerendered_with_both_faces(card_pool, config, scripted_proximity):
    script, ran_batches = scripted_proximity
    script["hlf_all_0"] = [failure_line("Bonecrusher Giant // Stomp")]

    result = ProximityManager(card_pool, config).run()

    assert result.state == PassState.SUCCEEDED
    assert len(result.retry_rounds) == 1
    retry_round = result.retry_rounds[0]
    assert retry_round.ordinal == 1
    assert [card.display_name for card in retry_round.cards] == [
        "Bonecrusher Giant",
        "Stomp",
    ]
    assert retry_round.batch.name == "hlf_all_rerender_0"
    assert [batch.name for batch in ran_batches] == ["hlf_all_0", "hlf_all_rerender_0"]


def test_rounds_only_carry_the_previous_rounds_failures(
    card_pool, config, scripted_proximity
):
    script, _ = scripted_proximity
    script["hlf_all_0"] = [failure_line("Fire // Ice"), failure_line("Wear // Tear")]
    script["hlf_all_rerender_0"] = [failure_line("Wear // Tear")]

    result = ProximityManager(card_pool, config).run()

    assert result.state == PassState.SUCCEEDED
    assert [
        [card.display_name for card in retry_round.cards]
        for retry_round in result.retry_rounds
    ] == [["Fire", "Ice", "Wear", "Tear"], ["Wear", "Tear"]]


def test_repeated_failure_reports_are_merged(card_pool, config, scripted_proximity):
    script, _ = scripted_proximity
    script["hlf_all_0"] = [failure_line("Fire // Ice"), failure_line("fire // ice")]

    result = ProximityManager(card_pool, config).run()

    assert [card.display_name for card in result.retry_rounds[0].cards] == ["Fire", "Ice"]


def test_retries_stop_at_the_ceiling(card_pool, config, scripted_proximity):
    script, ran_batches = scripted_proximity
    script["hlf_all_0"] = [failure_line("Fire // Ice")]
    for attempt in range(5):
        script[f"hlf_all_rerender_{attempt}"] = [failure_line("Fire // Ice")]

    result = ProximityManager(card_pool, config).run()

    assert result.state == PassState.EXHAUSTED_RETRIES
    assert not result.succeeded
    assert len(result.retry_rounds) == config.max_rerender_attempts == 3
    assert len(ran_batches) == 4
    assert result.remaining_failures == ["Fire // Ice"]


def test_no_retries_when_disabled(card_pool, make_config, scripted_proximity):
    config = make_config("max_rerender_attempts=0")
    script, ran_batches = scripted_proximity
    script["hlf_all_0"] = [failure_line("Fire // Ice")]

    result = ProximityManager(card_pool, config).run()

    assert result.state == PassState.EXHAUSTED_RETRIES
    assert result.retry_rounds == []
    assert len(ran_batches) == 1


def test_unknown_failed_card_cannot_be_retried(card_pool, config, scripted_proximity):
    script, ran_batches = scripted_proximity
    script["hlf_all_0"] = [failure_line("Who // What")]

    result = ProximityManager(card_pool, config).run()

    assert result.state == PassState.EXHAUSTED_RETRIES
    assert result.remaining_failures == ["Who // What"]
    assert len(ran_batches) == 1


def test_unattributed_failures_are_never_retried(card_pool, config, scripted_proximity):
    script, ran_batches = scripted_proximity
    script["hlf_all_0"] = ["ERROR FAILED"]

    result = ProximityManager(card_pool, config).run()

    assert result.state == PassState.SUCCEEDED
    assert result.unattributed_failure_count == 1
    assert result.retry_rounds == []
    assert len(ran_batches) == 1


def test_rerender_batch_that_cannot_run_ends_the_pass(card_pool, config):
    def fake_run(batch):
        if batch.name == "hlf_all_0":
            batch.handle_proximity_output(failure_line("Fire // Ice"))
            return True
        return False

    with patch.object(ProximityBatch, "run", autospec=True, side_effect=fake_run):
        result = ProximityManager(card_pool, config).run()

    assert result.state == PassState.EXHAUSTED_RETRIES
    assert result.remaining_failures == ["Fire // Ice"]
    assert len(result.retry_rounds) == 1


def test_rerunning_a_pass_starts_fresh(card_pool, config, scripted_proximity):
    script, _ = scripted_proximity
    script["hlf_all_0"] = [failure_line("Fire // Ice")]
    manager = ProximityManager(card_pool, config)

    first = manager.run()
    second = manager.run()

    assert len(first.retry_rounds) == len(second.retry_rounds) == 1
    assert second.batch_count == 1


def test_bonecrusher_failure_line_queues_both_faces(catalog_entry, config):
    cards = build_hlf_cards(
        [
            catalog_entry(
                "Bonecrusher Giant // Stomp",
                layout="adventure",
                mana_costs=("{2}{R}", "{1}{R}"),
            )
        ],
        config,
    )
    manager = ProximityManager(cards, config)
    batch = manager.create_batches()[0]

    batch.handle_proximity_output(
        "ERROR [Proximity] 3/20 412ms Bonecrusher Giant // Stomp FAILED"
    )

    assert manager.failed_render_count == 1
    assert manager.failed_card_names == ["Bonecrusher Giant // Stomp"]
    assert manager.find_cards_to_rerender(manager.failed_card_names) == cards


def test_standard_pass_failure_queues_both_faces(card_pool, config, scripted_proximity):
    script, ran_batches = scripted_proximity
    script["hlf_standard_0"] = [
        "ERROR [Proximity] 3/20 412ms Bonecrusher Giant // Stomp FAILED"
    ]

    result = ProximityManager(card_pool, config, CardTemplate.STANDARD).run()

    assert result.state == PassState.SUCCEEDED
    retry_round = result.retry_rounds[0]
    assert [card.display_name for card in retry_round.cards] == [
        "Bonecrusher Giant",
        "Stomp",
    ]
    assert retry_round.batch.name == "hlf_standard_rerender_0"
    assert ran_batches[-1] is retry_round.batch


def test_failure_count_message_agrees_with_count(card_pool, config, scripted_proximity, caplog):
    script, _ = scripted_proximity
    script["hlf_all_0"] = [failure_line("Fire // Ice")]
    script["hlf_all_rerender_0"] = [failure_line("Fire // Ice"), failure_line("Wear // Tear")]

    with caplog.at_level(logging.WARNING, logger="hlfproximity.proximity_manager"):
        ProximityManager(card_pool, config).run()

    assert "There is 1 card that failed to render." in caplog.text
    assert "There are still 2 cards that failed to render." in caplog.text
    assert "There are 1 card" not in caplog.text
