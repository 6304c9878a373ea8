"""
Monte Carlo equity estimation for the four exchange seats.

All four hole-card pairs are known to the engine; only the board is
hidden. Each trial completes the board from the unknown cards, ranks
the seats and counts a win (sole winner) or a tie (dead heat).
"""

import logging
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

import numpy as np

from .cards import Card, Hand, card_id
from .deck import (
    BOARD_CARDS, NUM_SEATS, Seed, SeededRandom, create_full_deck, default_seed,
)
from .evaluator import determine_winners, evaluate_hand

logger = logging.getLogger(__name__)

EPSILON = 1e-4
DEFAULT_ITERATIONS = 50_000
PRE_DEAL_EQUITY = 1.0 / NUM_SEATS


class HandCountError(ValueError):
    """Raised when equity is requested for anything other than four hands."""


class TieShare(Enum):
    """How a tie contributes to total equity."""
    HALF = "half"    # flat half share per tied trial
    EXACT = "exact"  # 1 / number of tied winners per trial


@dataclass
class EquityConfig:
    """Configuration for equity estimation."""
    iterations: int = DEFAULT_ITERATIONS
    min_iterations: int = 1_000
    max_iterations: int = 200_000
    workers: int = 4               # Parallel chunks per request
    tie_share: TieShare = TieShare.HALF

    def clamp(self, iterations: Optional[int] = None) -> int:
        """Keep an iteration count inside the supported range."""
        n = self.iterations if iterations is None else iterations
        return max(self.min_iterations, min(self.max_iterations, n))


@dataclass(frozen=True)
class HandEquity:
    """Estimated odds for one seat."""
    seat: int
    win_probability: float   # Sole winner
    tie_probability: float   # Part of a dead heat
    total_equity: float
    fair_odds: float         # 1 / total_equity, as a decimal multiplier


@dataclass(frozen=True)
class EquityResult:
    """Result of one equity estimate."""
    equities: tuple[HandEquity, ...]
    total_simulations: int
    known_cards: int
    remaining_cards: int     # Board cards still to come


@dataclass
class TrialCounts:
    """
    Per-seat counters from a batch of trials.

    Counts from independent batches combine by plain addition.
    """
    wins: np.ndarray
    ties: np.ndarray
    tie_shares: np.ndarray
    trials: int = 0

    @classmethod
    def empty(cls) -> "TrialCounts":
        return cls(
            wins=np.zeros(NUM_SEATS, dtype=np.int64),
            ties=np.zeros(NUM_SEATS, dtype=np.int64),
            tie_shares=np.zeros(NUM_SEATS, dtype=np.float64),
        )

    def record(self, winners: Sequence[int]) -> None:
        if len(winners) == 1:
            self.wins[winners[0]] += 1
        else:
            share = 1.0 / len(winners)
            for idx in winners:
                self.ties[idx] += 1
                self.tie_shares[idx] += share
        self.trials += 1

    def __add__(self, other: "TrialCounts") -> "TrialCounts":
        return TrialCounts(
            wins=self.wins + other.wins,
            ties=self.ties + other.ties,
            tie_shares=self.tie_shares + other.tie_shares,
            trials=self.trials + other.trials,
        )


def _check_hands(
    hands: Sequence[Sequence[Card]], board: Sequence[Card]
) -> list[list[Card]]:
    if len(hands) != NUM_SEATS:
        raise HandCountError(
            f"Hold'em Exchange requires exactly {NUM_SEATS} hands, got {len(hands)}"
        )
    if len(board) > BOARD_CARDS:
        raise ValueError(f"Board has at most {BOARD_CARDS} cards, got {len(board)}")
    hands = [list(hand) for hand in hands]

    # Check for card collisions
    all_ids = [card_id(c) for hand in hands for c in hand] + [card_id(c) for c in board]
    if len(set(all_ids)) != len(all_ids):
        raise ValueError("Duplicate cards detected")
    return hands


def unknown_cards(hands: Sequence[Sequence[Card]], board: Sequence[Card]) -> list[Card]:
    """Cards not held by any seat and not yet on the board."""
    known = {card_id(c) for hand in hands for c in hand}
    known.update(card_id(c) for c in board)
    return [c for c in create_full_deck() if card_id(c) not in known]


def _draw(cards: list[Card], need: int, rng: SeededRandom) -> list[Card]:
    """
    Partial Fisher-Yates: shuffle only the last `need` positions.

    Those positions are distributed exactly as after a full shuffle.
    """
    n = len(cards)
    for i in range(n - 1, n - 1 - need, -1):
        j = rng.next_int(0, i)
        cards[i], cards[j] = cards[j], cards[i]
    return cards[n - need:]


def simulate(
    hands: Sequence[Sequence[Card]],
    board: Sequence[Card],
    iterations: int,
    seed: Seed,
) -> TrialCounts:
    """
    Run `iterations` board completions and count results per seat.

    Module-level so it can be shipped to a process pool.
    """
    hands = [list(hand) for hand in hands]
    board = list(board)
    need = BOARD_CARDS - len(board)
    deck = unknown_cards(hands, board)
    rng = SeededRandom(seed)
    counts = TrialCounts.empty()

    for _ in range(iterations):
        full_board = board + _draw(deck, need, rng)
        evaluated = [evaluate_hand(hand, full_board) for hand in hands]
        counts.record(determine_winners(evaluated))

    return counts


def build_result(
    counts: TrialCounts,
    known_cards: int,
    remaining_cards: int,
    tie_share: TieShare = TieShare.HALF,
) -> EquityResult:
    """Turn raw counters into per-seat probabilities and fair odds."""
    total = max(counts.trials, 1)
    win_p = counts.wins / total
    tie_p = counts.ties / total

    if tie_share is TieShare.EXACT:
        total_equity = win_p + counts.tie_shares / total
    else:
        total_equity = win_p + tie_p * 0.5

    equities = tuple(
        HandEquity(
            seat=i,
            win_probability=float(win_p[i]),
            tie_probability=float(tie_p[i]),
            total_equity=float(total_equity[i]),
            fair_odds=1.0 / max(float(total_equity[i]), EPSILON),
        )
        for i in range(NUM_SEATS)
    )
    return EquityResult(
        equities=equities,
        total_simulations=counts.trials,
        known_cards=known_cards,
        remaining_cards=remaining_cards,
    )


def _river_counts(hands: Sequence[Sequence[Card]], board: Sequence[Card]) -> TrialCounts:
    counts = TrialCounts.empty()
    evaluated = [evaluate_hand(hand, board) for hand in hands]
    counts.record(determine_winners(evaluated))
    return counts


def estimate_equity(
    hands: Sequence[Sequence[Card]],
    board: Sequence[Card] = (),
    iterations: int = DEFAULT_ITERATIONS,
    seed: Optional[Seed] = None,
    tie_share: TieShare = TieShare.HALF,
) -> EquityResult:
    """
    Estimate win/tie probabilities for four hands.

    Args:
        hands: Exactly four hole-card pairs
        board: Revealed board cards (0-5)
        iterations: Number of Monte Carlo trials (ignored on the river)
        seed: Seed for reproducible results (wall clock if omitted)
        tie_share: Tie weighting used for total equity

    Returns:
        EquityResult with one HandEquity per seat

    Raises:
        HandCountError: if len(hands) != 4
    """
    board = list(board)
    hands = _check_hands(hands, board)
    need = BOARD_CARDS - len(board)
    known = NUM_SEATS * 2 + len(board)

    if need == 0:
        return build_result(_river_counts(hands, board), known, 0, tie_share)

    if iterations < 1:
        raise ValueError(f"iterations must be positive, got {iterations}")

    counts = simulate(hands, board, iterations, default_seed() if seed is None else seed)
    return build_result(counts, known, need, tie_share)


def chunk_sizes(iterations: int, chunks: int) -> list[int]:
    """Split iterations into at most `chunks` near-equal positive parts."""
    chunks = max(1, min(chunks, iterations))
    base, extra = divmod(iterations, chunks)
    return [base + (1 if i < extra else 0) for i in range(chunks)]


def estimate_equity_chunked(
    hands: Sequence[Sequence[Card]],
    board: Sequence[Card],
    iterations: int,
    seed: Seed,
    executor: Optional[Executor] = None,
    chunks: int = 4,
    tie_share: TieShare = TieShare.HALF,
    should_stop: Optional[Callable[[], bool]] = None,
) -> Optional[EquityResult]:
    """
    Estimate equity with the trials split into independently seeded chunks.

    Chunk i is seeded with f"{seed}/{i}", so the result depends only on
    (seed, iterations, chunks) and not on scheduling: running the chunks
    on an executor or inline (executor=None) gives identical counts.

    Returns None if `should_stop` reports the request was superseded;
    outstanding chunks are cancelled.
    """
    board = list(board)
    hands = _check_hands(hands, board)
    need = BOARD_CARDS - len(board)
    known = NUM_SEATS * 2 + len(board)

    if need == 0:
        return build_result(_river_counts(hands, board), known, 0, tie_share)

    if iterations < 1:
        raise ValueError(f"iterations must be positive, got {iterations}")

    sizes = chunk_sizes(iterations, chunks)
    if executor is None:
        counts = TrialCounts.empty()
        for i, n in enumerate(sizes):
            counts = counts + simulate(hands, board, n, f"{seed}/{i}")
        return build_result(counts, known, need, tie_share)

    futures: list[Future] = [
        executor.submit(simulate, hands, board, n, f"{seed}/{i}")
        for i, n in enumerate(sizes)
    ]

    counts = TrialCounts.empty()
    for future in futures:
        if should_stop is not None and should_stop():
            for f in futures:
                f.cancel()
            logger.debug("Equity request for seed %s superseded, dropping chunks", seed)
            return None
        counts = counts + future.result()

    return build_result(counts, known, need, tie_share)


def pre_deal_equities() -> tuple[HandEquity, ...]:
    """Blind odds before any card is shown: 25% and 4.0 for every seat."""
    return tuple(
        HandEquity(
            seat=i,
            win_probability=PRE_DEAL_EQUITY,
            tie_probability=0.0,
            total_equity=PRE_DEAL_EQUITY,
            fair_odds=1.0 / PRE_DEAL_EQUITY,
        )
        for i in range(NUM_SEATS)
    )


def preflop_estimate(hand: Hand) -> float:
    """
    Rough 4-way all-in equity for a starting hand.

    Used for instant display while the simulation runs.
    """
    cards = list(hand)
    if len(cards) != 2:
        return PRE_DEAL_EQUITY

    c1, c2 = cards
    high = max(c1.rank, c2.rank)
    gap = abs(c1.rank - c2.rank)
    suited = c1.suit == c2.suit

    if c1.rank == c2.rank:
        if high >= 13:
            return 0.35
        if high >= 9:
            return 0.30
        return 0.28

    if high == 14:
        return 0.30 if suited else 0.28

    if suited and gap <= 2 and high >= 10:
        return 0.28

    return PRE_DEAL_EQUITY
