"""
Best-five-of-seven hand evaluation.

Hands are ranked into ten categories and broken by kickers. Both are
folded into a single integer score:

    score = category * 15**5 + sum(kickers[i] * 15**(4 - i))

Ranks never exceed 14, so the kicker polynomial stays below 15**5 and
the category always dominates. Equal scores are genuine ties.
"""

from collections import Counter, defaultdict
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional, Sequence

from .cards import Card

CATEGORY_WEIGHT = 15 ** 5
MIN_CARDS = 5
WHEEL_RANKS = (14, 5, 4, 3, 2)


class InsufficientCardsError(ValueError):
    """Raised when fewer than five cards are given to the evaluator."""


class HandCategory(IntEnum):
    """Hand categories (higher is better)."""
    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10

    @property
    def label(self) -> str:
        return HAND_CATEGORY_NAMES[self]


HAND_CATEGORY_NAMES = {
    HandCategory.HIGH_CARD: "High Card",
    HandCategory.PAIR: "Pair",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.FLUSH: "Flush",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.ROYAL_FLUSH: "Royal Flush",
}


@dataclass(frozen=True)
class EvaluatedHand:
    """A ranked hand. `score` is the only comparison key."""
    category: HandCategory
    kickers: tuple[int, ...]
    score: int

    @property
    def name(self) -> str:
        return self.category.label

    def __repr__(self) -> str:
        return f"EvaluatedHand({self.name}, kickers={list(self.kickers)})"


def calculate_score(category: HandCategory, kickers: Sequence[int]) -> int:
    """Fold category and up to five kickers into one integer."""
    score = int(category) * CATEGORY_WEIGHT
    for i, rank in enumerate(kickers[:5]):
        score += rank * 15 ** (4 - i)
    return score


def _make(category: HandCategory, kickers: Sequence[int]) -> EvaluatedHand:
    kickers = tuple(int(k) for k in kickers)
    return EvaluatedHand(category, kickers, calculate_score(category, kickers))


def find_straight(ranks: Iterable[int]) -> Optional[int]:
    """
    Return the high card of the best straight in `ranks`, or None.

    Duplicates are collapsed. The wheel (A-2-3-4-5) counts the Ace low
    and reports 5 as its high card.
    """
    unique = sorted(set(ranks), reverse=True)

    run = 1
    for i in range(1, len(unique)):
        if unique[i - 1] - unique[i] == 1:
            run += 1
            if run == 5:
                return unique[i] + 4
        else:
            run = 1

    if all(r in unique for r in WHEEL_RANKS):
        return 5
    return None


def evaluate_hand(hole: Iterable[Card], board: Iterable[Card]) -> EvaluatedHand:
    """
    Evaluate the best five-card hand from hole cards plus board.

    Args:
        hole: Hole cards (normally 2)
        board: Board cards (0-5)

    Returns:
        EvaluatedHand for the best category found

    Raises:
        InsufficientCardsError: fewer than 5 cards in total
    """
    cards = list(hole) + list(board)
    if len(cards) < MIN_CARDS:
        raise InsufficientCardsError(
            f"Need at least {MIN_CARDS} cards to evaluate, got {len(cards)}"
        )

    by_suit: dict[int, list[int]] = defaultdict(list)
    for card in cards:
        by_suit[card.suit].append(card.rank)

    flush_ranks = None
    for ranks in by_suit.values():
        if len(ranks) >= 5:
            flush_ranks = sorted(ranks, reverse=True)
            break

    if flush_ranks is not None:
        sf_high = find_straight(flush_ranks)
        if sf_high is not None:
            if sf_high == 14:
                return _make(HandCategory.ROYAL_FLUSH, [sf_high])
            return _make(HandCategory.STRAIGHT_FLUSH, [sf_high])

    # Group ranks by multiplicity, highest rank first within each group
    counts = Counter(card.rank for card in cards)
    quads, trips, pairs, singles = [], [], [], []
    for rank in sorted(counts, reverse=True):
        n = counts[rank]
        if n == 4:
            quads.append(rank)
        elif n == 3:
            trips.append(rank)
        elif n == 2:
            pairs.append(rank)
        else:
            singles.append(rank)

    if quads:
        rest = [r for r in counts if r != quads[0]]
        return _make(HandCategory.FOUR_OF_A_KIND, [quads[0], max(rest)])

    if trips and (len(trips) > 1 or pairs):
        pair_rank = max(trips[1:] + pairs)
        return _make(HandCategory.FULL_HOUSE, [trips[0], pair_rank])

    if flush_ranks is not None:
        return _make(HandCategory.FLUSH, flush_ranks[:5])

    straight_high = find_straight(counts)
    if straight_high is not None:
        return _make(HandCategory.STRAIGHT, [straight_high])

    if trips:
        return _make(HandCategory.THREE_OF_A_KIND, [trips[0]] + singles[:2])

    if len(pairs) >= 2:
        # A third pair can outrank the best single as the kicker
        leftover = pairs[2:3] + singles[:1]
        kickers = [pairs[0], pairs[1]]
        if leftover:
            kickers.append(max(leftover))
        return _make(HandCategory.TWO_PAIR, kickers)

    if pairs:
        return _make(HandCategory.PAIR, [pairs[0]] + singles[:3])

    return _make(HandCategory.HIGH_CARD, singles[:5])


def compare_hands(a: EvaluatedHand, b: EvaluatedHand) -> int:
    """Return 1 if a beats b, -1 if b beats a, 0 for a tie."""
    if a.score > b.score:
        return 1
    if a.score < b.score:
        return -1
    return 0


def determine_winners(hands: Sequence[EvaluatedHand]) -> list[int]:
    """
    Indices of every hand holding the top score.

    One index is a clean win; more than one is a dead heat.
    """
    if not hands:
        return []
    best = max(h.score for h in hands)
    return [i for i, h in enumerate(hands) if h.score == best]
