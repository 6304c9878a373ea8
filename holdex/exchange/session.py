"""
Interactive exchange session.

Wraps the pure engine with the two things it deliberately does not do:
running equity estimates off the caller's thread, and moving money
through the balance collaborator.

Each phase transition bumps a generation number. An estimate is applied
only if its generation is still current when it completes, so a result
for a phase the table has already left is dropped.
"""

import logging
import threading
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum, auto
from functools import partial
from typing import Optional

from holdex.game.cards import Card, Hand
from holdex.game.deck import Seed
from holdex.game.equity import EquityConfig, EquityResult, estimate_equity_chunked
from .balance import BalanceResult, BalanceService, BalanceServiceError
from .engine import (
    DEFAULT_BALANCE, advance_phase, cancel_bets, create_initial_state, equity_seed,
    place_bet, start_new_round, update_equities,
)
from .models import GameState

logger = logging.getLogger(__name__)


class BetStatus(Enum):
    """Outcome of a bet request."""
    ACCEPTED = auto()
    REJECTED = auto()            # Invalid request, nothing debited
    INSUFFICIENT_FUNDS = auto()  # Balance service refused the debit
    UNAVAILABLE = auto()         # Balance service failed


@dataclass(frozen=True)
class BetOutcome:
    status: BetStatus
    state: GameState
    error: Optional[BalanceServiceError] = None

    @property
    def accepted(self) -> bool:
        return self.status is BetStatus.ACCEPTED


class ExchangeSession:
    """
    One user's run of exchange rounds.

    Snapshots returned by the session are immutable and safe to share
    between threads; only the session's pointer to the current snapshot
    is guarded.
    """

    def __init__(
        self,
        balance_service: BalanceService,
        initial_balance: float = DEFAULT_BALANCE,
        config: Optional[EquityConfig] = None,
        executor: Optional[Executor] = None,
        seed: Optional[Seed] = None,
    ):
        """
        Initialize a session.

        Args:
            balance_service: Collaborator that holds the user's money
            initial_balance: Balance mirrored into the first snapshot
            config: Equity estimation settings
            executor: Pool for simulation chunks (a process pool if omitted)
            seed: Seed for the first round (wall clock if omitted)
        """
        self.balance_service = balance_service
        self.config = config or EquityConfig()

        self._owns_executor = executor is None
        self._executor = executor or ProcessPoolExecutor(max_workers=self.config.workers)
        # Serial coordinator: a superseded request waiting here is cancelled
        self._coordinator = ThreadPoolExecutor(max_workers=1, thread_name_prefix="equity")

        self._lock = threading.RLock()
        self._changed = threading.Condition(self._lock)
        self._generation = 0
        self._pending: Optional[Future] = None
        self._failure: Optional[BaseException] = None

        self._state = create_initial_state(initial_balance, seed)

    @property
    def state(self) -> GameState:
        with self._lock:
            return self._state

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def new_round(self, seed: Optional[Seed] = None) -> GameState:
        """Deal the next round."""
        with self._lock:
            self._state = start_new_round(self._state, seed)
            self._supersede()
            logger.debug("Round %d dealt from seed %s", self._state.round_number, self._state.seed)
            return self._state

    def advance(self) -> GameState:
        """
        Advance one phase and dispatch its equity estimate.

        Entering SETTLE credits the total payout to the balance service;
        a BalanceServiceError from that credit propagates to the caller.
        """
        with self._lock:
            previous = self._state
            state = advance_phase(previous, self.config.tie_share)
            if state is previous:
                return state

            self._state = state
            generation = self._supersede()
            if state.is_calculating:
                self._submit(generation, state)

        if state.settlements:
            payout = sum(s.payout for s in state.settlements)
            if payout > 0:
                self._credit(payout)
        return state

    def place_bet(self, seat_index: int, stake: float) -> BetOutcome:
        """Back a seat at its displayed odds, debiting the stake."""
        with self._lock:
            current = self._state
            candidate = place_bet(current, seat_index, stake)
            if candidate is current:
                return BetOutcome(BetStatus.REJECTED, current)

            try:
                result = self.balance_service.debit(stake)
            except BalanceServiceError as e:
                logger.warning("Debit of %.2f failed: %s", stake, e)
                return BetOutcome(BetStatus.UNAVAILABLE, current, error=e)

            if result is not BalanceResult.OK:
                return BetOutcome(BetStatus.INSUFFICIENT_FUNDS, current)

            self._state = candidate
            return BetOutcome(BetStatus.ACCEPTED, candidate)

    def cancel_bets(self) -> GameState:
        """
        Refund all of the round's stakes.

        The refund is credited before the bets are cleared, so if the
        credit fails the bets remain in place.
        """
        with self._lock:
            current = self._state
            cancelled = cancel_bets(current)
            if cancelled is current:
                return current
            self._credit(current.total_staked)
            self._state = cancelled
            return cancelled

    def wait_for_equity(self, timeout: Optional[float] = None) -> GameState:
        """Block until the current phase's estimate is installed."""
        with self._changed:
            done = self._changed.wait_for(
                lambda: not self._state.is_calculating or self._failure is not None,
                timeout,
            )
            if self._failure is not None:
                failure, self._failure = self._failure, None
                raise failure
            if not done:
                raise TimeoutError(
                    f"Equity for generation {self._generation} not ready after {timeout}s"
                )
            return self._state

    def close(self) -> None:
        with self._lock:
            self._supersede()
        self._coordinator.shutdown(wait=True, cancel_futures=True)
        if self._owns_executor:
            self._executor.shutdown(wait=True, cancel_futures=True)

    def __enter__(self) -> "ExchangeSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _supersede(self) -> int:
        """Start a new generation, cancelling a request not yet started."""
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._failure = None
        # Waiters on a superseded estimate re-check the new snapshot
        self._changed.notify_all()
        return self._generation

    def _submit(self, generation: int, state: GameState) -> None:
        logger.debug(
            "Dispatching equity for round %d %s (generation %d)",
            state.round_number, state.phase, generation,
        )
        future = self._coordinator.submit(
            self._estimate,
            generation,
            state.hands,
            state.visible_board,
            equity_seed(state.seed, state.phase),
        )
        self._pending = future
        future.add_done_callback(partial(self._on_equity_done, generation))

    def _estimate(
        self,
        generation: int,
        hands: tuple[Hand, ...],
        board: tuple[Card, ...],
        seed: str,
    ) -> Optional[EquityResult]:
        return estimate_equity_chunked(
            hands,
            board,
            iterations=self.config.clamp(),
            seed=seed,
            executor=self._executor,
            chunks=self.config.workers,
            tie_share=self.config.tie_share,
            should_stop=lambda: self._generation != generation,
        )

    def _on_equity_done(self, generation: int, future: Future) -> None:
        if future.cancelled():
            return

        with self._lock:
            if generation != self._generation:
                logger.debug(
                    "Discarding equity for generation %d (current %d)",
                    generation, self._generation,
                )
                return

            error = future.exception()
            if error is not None:
                logger.error("Equity estimate for generation %d failed", generation, exc_info=error)
                self._failure = error
            else:
                result = future.result()
                if result is None:
                    return
                self._state = update_equities(self._state, result.equities)
            self._pending = None
            self._changed.notify_all()

    def _credit(self, amount: float) -> None:
        try:
            result = self.balance_service.credit(amount)
        except BalanceServiceError as e:
            logger.warning("Credit of %.2f failed: %s", amount, e)
            e.amount = amount
            raise
        if result is not BalanceResult.OK:
            raise BalanceServiceError(f"Credit of {amount:.2f} refused: {result.name}", amount)
