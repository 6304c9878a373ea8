"""
Seeded deck for reproducible dealing.

A round is a pure function of its seed: the deck is shuffled once with
a seeded xorshift generator and dealt in a fixed order, so any process
holding the seed can rebuild the same hands and board.
"""

import time
from dataclasses import dataclass
from typing import Sequence, Union

from .cards import Card, Hand, Rank, Suit, card_id

MASK_32 = 0xFFFFFFFF

# Pre-shuffle order: suit-major, ranks ascending within each suit
DECK_SUIT_ORDER = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)

NUM_SEATS = 4
HOLE_CARDS = 2
BOARD_CARDS = 5

Seed = Union[str, int]


def _to_int32(x: int) -> int:
    x &= MASK_32
    return x - 0x100000000 if x & 0x80000000 else x


def hash_seed(seed: Seed) -> int:
    """
    Hash a seed into a nonzero unsigned 32-bit state.

    Strings use the 31-multiplier string hash over UTF-16 code units,
    truncated to 32 bits, so seeds outside the BMP hash as surrogate pairs.
    """
    if isinstance(seed, str):
        h = 0
        data = seed.encode("utf-16-le", "surrogatepass")
        for i in range(0, len(data), 2):
            unit = int.from_bytes(data[i:i + 2], "little")
            h = _to_int32(h * 31 + unit)
        state = h & MASK_32
    else:
        state = int(seed) & MASK_32
    return state or 1


class SeededRandom:
    """
    Deterministic xorshift32 generator.

    Every deal and simulation owns its own instance; nothing here is
    shared between rounds or threads.
    """

    WARMUP = 10

    def __init__(self, seed: Seed):
        self.state = hash_seed(seed)
        for _ in range(self.WARMUP):
            self.next_uint32()

    def next_uint32(self) -> int:
        x = self.state
        x ^= (x << 13) & MASK_32
        x ^= x >> 17
        x ^= (x << 5) & MASK_32
        self.state = x
        return x

    def next(self) -> float:
        """Next float in [0, 1]; 1.0 only for the all-ones state."""
        return self.next_uint32() / MASK_32

    def next_int(self, lo: int, hi: int) -> int:
        """Next integer in [lo, hi] inclusive."""
        span = hi - lo + 1
        return min(int(self.next() * span), span - 1) + lo

    def clone(self) -> "SeededRandom":
        cloned = SeededRandom.__new__(SeededRandom)
        cloned.state = self.state
        return cloned


def create_full_deck() -> list[Card]:
    """All 52 cards in dealing order before the shuffle (s, h, d, c; 2 to A)."""
    return [Card(int(rank), int(suit)) for suit in DECK_SUIT_ORDER for rank in Rank]


def shuffle_deck(cards: Sequence[Card], rng: SeededRandom) -> list[Card]:
    """Fisher-Yates shuffle into a new list; the input is left untouched."""
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.next_int(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def remove_cards(cards: Sequence[Card], to_remove: Sequence[Card]) -> list[Card]:
    """Return `cards` without any of `to_remove`."""
    remove_ids = {card_id(c) for c in to_remove}
    return [c for c in cards if card_id(c) not in remove_ids]


def deal_cards(cards: Sequence[Card], count: int) -> tuple[list[Card], list[Card]]:
    """Split off the first `count` cards: (dealt, remaining)."""
    if count > len(cards):
        raise ValueError(f"Cannot deal {count} cards, only {len(cards)} remaining")
    return list(cards[:count]), list(cards[count:])


class Deck:
    """A 52-card deck shuffled once from a seed."""

    def __init__(self, seed: Seed):
        self.rng = SeededRandom(seed)
        self._cards = shuffle_deck(create_full_deck(), self.rng)

    def deal(self, n: int = 1) -> list[Card]:
        """Deal n cards from the top of the deck."""
        dealt, self._cards = deal_cards(self._cards, n)
        return dealt

    @property
    def remaining(self) -> int:
        return len(self._cards)

    def cards(self) -> list[Card]:
        """Copy of the undealt cards."""
        return list(self._cards)

    def clone(self) -> "Deck":
        cloned = Deck.__new__(Deck)
        cloned.rng = self.rng.clone()
        cloned._cards = list(self._cards)
        return cloned

    def __len__(self) -> int:
        return len(self._cards)


@dataclass(frozen=True)
class DealtRound:
    """Four seats of hole cards plus the full five-card board."""
    hands: tuple[Hand, Hand, Hand, Hand]
    board: tuple[Card, ...]
    seed: str

    def all_cards(self) -> list[Card]:
        cards = [c for hand in self.hands for c in hand]
        return cards + list(self.board)


def default_seed() -> str:
    """Wall-clock seed in milliseconds."""
    return str(int(time.time() * 1000))


def deal_round(seed: Seed) -> DealtRound:
    """
    Deal a complete round: 2 cards to each seat 0-3, then 5 to the board.

    The seed is stringified first, so 42 and "42" deal the same round.
    The dealing order is fixed; changing it changes every seed's round.
    """
    seed_str = str(seed)
    deck = Deck(seed_str)

    hands = tuple(Hand(*deck.deal(HOLE_CARDS)) for _ in range(NUM_SEATS))
    board = tuple(deck.deal(BOARD_CARDS))

    return DealtRound(hands=hands, board=board, seed=seed_str)
