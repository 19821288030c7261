"""
HLF Proximity Manager

Splits the card pool into batches, runs them through Proximity
one after another, and re-renders cards that failed.
"""

import dataclasses
import enum
import logging
from typing import List, Optional

from . import constants
from .classes import HlfCardObject
from .consts import CardTemplate
from .hlf_config import HlfConfig
from .proximity_batch import ProximityBatch
from .utils import TRACE, plural

LOGGER = logging.getLogger(__name__)


class PassState(enum.Enum):
    """Where a rendering pass is in its lifecycle"""

    BATCHING = "batching"
    RUNNING = "running"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    EXHAUSTED_RETRIES = "exhausted_retries"


@dataclasses.dataclass
class RetryRound:
    """One additional attempt at rendering only previously failed cards"""

    ordinal: int
    cards: List[HlfCardObject]
    batch: ProximityBatch


@dataclasses.dataclass
class PassResult:
    """Summary of a rendering pass once it reaches a terminal state"""

    template: Optional[CardTemplate]
    state: PassState
    batch_count: int
    retry_rounds: List[RetryRound] = dataclasses.field(default_factory=list)
    remaining_failures: List[str] = dataclasses.field(default_factory=list)
    unattributed_failure_count: int = 0

    @property
    def succeeded(self) -> bool:
        return self.state == PassState.SUCCEEDED


class ProximityManager:
    """
    Handles everything related to running Proximity over a card pool
    for a single rendering pass
    """

    config: HlfConfig
    template: Optional[CardTemplate]
    all_cards: List[HlfCardObject]
    cards: List[HlfCardObject]
    state: PassState
    batches: List[ProximityBatch]
    retry_rounds: List[RetryRound]
    failed_render_count: int
    unattributed_failure_count: int
    __failed_card_names: List[str]

    def __init__(
        self,
        all_cards: List[HlfCardObject],
        config: HlfConfig,
        template: Optional[CardTemplate] = None,
    ) -> None:
        """
        Initializer for a rendering pass
        :param all_cards: Full derived card pool
        :param config: Run configuration
        :param template: Rendering pass; only cards with this template are rendered.
        None renders every card.
        """
        if all_cards is None:
            raise ValueError("Unable to run Proximity without a card pool")

        self.config = config
        self.template = template
        self.all_cards = all_cards
        self.cards = [
            card for card in all_cards if template is None or card.template == template
        ]
        self.reset()

    @property
    def pass_name(self) -> str:
        return self.template.value if self.template else "all"

    @property
    def batch_name_base(self) -> str:
        return f"{constants.BATCH_NAME_BASE}{self.pass_name}_"

    @property
    def rerender_batch_name_base(self) -> str:
        return f"{self.batch_name_base}rerender_"

    @property
    def failed_card_names(self) -> List[str]:
        return list(self.__failed_card_names)

    def reset(self) -> None:
        """
        Clear every per-pass counter and batch
        """
        self.state = PassState.BATCHING
        self.batches = []
        self.retry_rounds = []
        self.failed_render_count = 0
        self.unattributed_failure_count = 0
        self.__failed_card_names = []

    def run(self) -> PassResult:
        """
        Render every card in this pass, then retry failures
        until they succeed or the retry ceiling is hit
        :return: How the pass ended
        """
        self.reset()
        LOGGER.info(
            f"Starting {self.pass_name} pass with {plural(len(self.cards), 'card')}."
        )

        self.create_batches()

        self.state = PassState.RUNNING
        self.run_batches()

        if self.failed_render_count > 0:
            verb = "is" if self.failed_render_count == 1 else "are"
            LOGGER.warning(
                f"There {verb} {plural(self.failed_render_count, 'card')} that failed to render. "
                "Trying to rerender them now."
            )
            self.state = PassState.RETRYING
            self.attempt_rerenders()
        else:
            self.state = PassState.SUCCEEDED

        if self.unattributed_failure_count:
            LOGGER.error(
                f"{plural(self.unattributed_failure_count, 'render')} failed for unknown cards "
                f"during the {self.pass_name} pass and could not be retried."
            )

        return PassResult(
            template=self.template,
            state=self.state,
            batch_count=len(self.batches),
            retry_rounds=list(self.retry_rounds),
            remaining_failures=self.failed_card_names,
            unattributed_failure_count=self.unattributed_failure_count,
        )

    def create_batches(self) -> List[ProximityBatch]:
        """
        Sort every card into batches, preserving order
        :return: Created batches
        """
        batch_estimate = len(self.cards) // self.config.batch_size + 1
        LOGGER.info(
            f"Splitting {plural(len(self.cards), 'card')} into an estimated "
            f"{plural(batch_estimate, 'batch', 'batches')}."
        )

        current_batch: Optional[ProximityBatch] = None
        for processed_card_count, card in enumerate(self.cards, start=1):
            # Add cards to the most recently created batch until it's full, then create a new one
            if current_batch is None or current_batch.is_full:
                current_batch = ProximityBatch(
                    f"{self.batch_name_base}{len(self.batches)}",
                    self.config,
                    self.handle_failed_render,
                    template=self.template or CardTemplate.STANDARD,
                )
                self.batches.append(current_batch)

            current_batch.add_card(card)
            LOGGER.log(TRACE, f"Processed {processed_card_count} out of {len(self.cards)}.")

        LOGGER.info(f"{plural(len(self.batches), 'batch', 'batches')} successfully created.")
        return self.batches

    def run_batches(self) -> None:
        """
        Run each batch in sequence
        """
        for index, batch in enumerate(self.batches, start=1):
            LOGGER.info(f"Rendering batch {index} of {len(self.batches)}.")
            self.run_batch(batch)
            LOGGER.info(f"Completed batch {index} of {len(self.batches)}.")

    def run_batch(self, batch: ProximityBatch) -> bool:
        """
        Run a single batch and collect its unattributable failures
        :param batch: Batch to run
        :return: Whether Proximity ran
        """
        ran = batch.run()
        if not ran:
            LOGGER.error(
                f"{batch.name} did not run. {plural(batch.card_count, 'card')} will be "
                "missing from this pass."
            )
        self.unattributed_failure_count += batch.unattributed_failure_count
        return ran

    def handle_failed_render(self, failed_card: str) -> None:
        """
        Record a card Proximity reported as failed
        :param failed_card: Card name parsed from Proximity's output
        """
        self.failed_render_count += 1
        LOGGER.log(TRACE, f"Received '{failed_card}' as a card to rerender.")

        if failed_card.lower() not in (name.lower() for name in self.__failed_card_names):
            self.__failed_card_names.append(failed_card)

    def find_cards_to_rerender(self, failed_card_names: List[str]) -> List[HlfCardObject]:
        """
        Resolve failed names back to card faces across the whole card
        pool, so both faces of a matching card are retried.
        :param failed_card_names: Names parsed from Proximity's output
        :return: Faces to rerender, in pool order without repeats
        """
        cards_to_rerender: List[HlfCardObject] = []
        for failed_card in failed_card_names:
            matches = [
                card for card in self.all_cards if failed_card.lower() in card.name.lower()
            ]
            LOGGER.log(
                TRACE,
                f"Found {plural(len(matches), 'potential card')} to rerender for '{failed_card}'.",
            )
            if not matches:
                LOGGER.error(f"Unable to find '{failed_card}' in the card pool to rerender it.")

            for card in matches:
                if all(card is not queued for queued in cards_to_rerender):
                    cards_to_rerender.append(card)

        return cards_to_rerender

    def attempt_rerenders(self) -> None:
        """
        Rerender failed cards, one batch per round, until a round
        succeeds or there are no attempts left
        """
        while self.failed_render_count > 0:
            if len(self.retry_rounds) >= self.config.max_rerender_attempts:
                self.__exhaust_retries()
                return

            cards_to_rerender = self.find_cards_to_rerender(self.__failed_card_names)
            if not cards_to_rerender:
                self.__exhaust_retries()
                return

            ordinal = len(self.retry_rounds) + 1
            rerender_batch = ProximityBatch(
                f"{self.rerender_batch_name_base}{len(self.retry_rounds)}",
                self.config,
                self.handle_failed_render,
                template=self.template or CardTemplate.STANDARD,
                max_card_count=len(cards_to_rerender),
            )
            for card in cards_to_rerender:
                rerender_batch.add_card(card)
            self.retry_rounds.append(RetryRound(ordinal, cards_to_rerender, rerender_batch))

            carried_names = self.__failed_card_names
            self.failed_render_count = 0
            self.__failed_card_names = []

            LOGGER.info(f"Beginning rerender attempt {ordinal}.")
            if not self.run_batch(rerender_batch):
                self.__failed_card_names = carried_names
                self.__exhaust_retries()
                return
            LOGGER.info(f"Completed rerender attempt {ordinal}.")

            if self.failed_render_count > 0:
                verb = "is" if self.failed_render_count == 1 else "are"
                LOGGER.warning(
                    f"There {verb} still {plural(self.failed_render_count, 'card')} that failed to render."
                )
                remaining_tries = self.config.max_rerender_attempts - len(self.retry_rounds)
                if remaining_tries == 1:
                    LOGGER.debug("This is the last rerender attempt.")
                elif remaining_tries > 1:
                    LOGGER.debug(f"There are still {remaining_tries} tries remaining.")

        LOGGER.info("Rerender completed successfully!")
        self.state = PassState.SUCCEEDED

    def __exhaust_retries(self) -> None:
        self.state = PassState.EXHAUSTED_RETRIES
        LOGGER.error("No more retries available. Unable to completely render cards!")
        for failed_card in self.__failed_card_names:
            LOGGER.error(f" - {failed_card}")
        LOGGER.info(
            "If you know which cards failed to render, you can add them to 'card_subset' "
            "in the config file and set 'use_card_subset' to 'true', then relaunch "
            "to manually rerender those cards."
        )
