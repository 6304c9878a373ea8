"""Card and hole-card representation utilities."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Optional, Sequence

from treys import Card as TreysCard


class Rank(IntEnum):
    """Card ranks (2-14 where 14 is Ace)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


class Suit(IntEnum):
    """Card suits."""
    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3


# Mapping for string conversion
RANK_STR = {
    2: "2", 3: "3", 4: "4", 5: "5", 6: "6", 7: "7", 8: "8", 9: "9",
    10: "T", 11: "J", 12: "Q", 13: "K", 14: "A"
}
STR_RANK = {v: k for k, v in RANK_STR.items()}
STR_RANK["10"] = 10

SUIT_STR = {0: "c", 1: "d", 2: "h", 3: "s"}
STR_SUIT = {v: k for k, v in SUIT_STR.items()}

SUIT_SYMBOLS = {0: "♣", 1: "♦", 2: "♥", 3: "♠"}
STR_SUIT.update({v: k for k, v in SUIT_SYMBOLS.items()})

NUM_CARDS = 52


@dataclass(frozen=True)
class Card:
    """A playing card."""
    rank: int  # 2-14
    suit: int  # 0-3

    def __str__(self) -> str:
        return f"{RANK_STR[self.rank]}{SUIT_STR[self.suit]}"

    def __repr__(self) -> str:
        return str(self)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Parse card from string like 'As', 'Th', '10c' or 'A♠'."""
        s = s.strip()
        if len(s) not in (2, 3):
            raise ValueError(f"Invalid card string: {s}")
        rank_str = s[:-1].upper()
        suit_char = s[-1].lower()

        if rank_str not in STR_RANK:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_char not in STR_SUIT:
            raise ValueError(f"Invalid suit: {suit_char}")

        return cls(rank=STR_RANK[rank_str], suit=STR_SUIT[suit_char])

    @property
    def id(self) -> int:
        return card_id(self)

    def to_treys(self) -> int:
        """Convert to treys library card format."""
        return TreysCard.new(str(self))


@dataclass(frozen=True)
class Hand:
    """
    The two hole cards dealt to one seat.

    Cards keep the order they were dealt in; use `canonical`
    for the suit-independent notation.
    """
    card1: Card
    card2: Card

    @property
    def cards(self) -> tuple[Card, Card]:
        return (self.card1, self.card2)

    @property
    def is_pair(self) -> bool:
        """Check if hand is a pocket pair."""
        return self.card1.rank == self.card2.rank

    @property
    def is_suited(self) -> bool:
        """Check if hand is suited."""
        return self.card1.suit == self.card2.suit

    @property
    def canonical(self) -> str:
        """
        Get canonical hand notation (e.g., 'AKs', 'QQ', '72o').

        This groups equivalent hands regardless of specific suits.
        """
        high, low = sorted((self.card1.rank, self.card2.rank), reverse=True)
        r1 = RANK_STR[high]
        r2 = RANK_STR[low]

        if self.is_pair:
            return f"{r1}{r2}"
        elif self.is_suited:
            return f"{r1}{r2}s"
        else:
            return f"{r1}{r2}o"

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __len__(self) -> int:
        return 2

    def __str__(self) -> str:
        return f"{self.card1}{self.card2}"

    def __repr__(self) -> str:
        return f"Hand({self.card1}, {self.card2})"

    @classmethod
    def from_string(cls, s: str) -> "Hand":
        """Parse hand from string like 'AsKh' or 'As Kh'."""
        cards = parse_cards(s)
        if cards is None or len(cards) != 2:
            raise ValueError(f"Invalid hand string: {s}")
        return cls(cards[0], cards[1])


def parse_card(s: str) -> Optional[Card]:
    """
    Parse a single card, returning None for malformed input.

    Unlike `Card.from_string` this never raises.
    """
    if not isinstance(s, str):
        return None
    try:
        return Card.from_string(s)
    except ValueError:
        return None


def parse_cards(s: str) -> Optional[list[Card]]:
    """
    Parse a card list like 'As Kh Td' or 'AsKhTd'.

    Returns None if any card is malformed.
    """
    if not isinstance(s, str):
        return None

    tokens = s.split()
    if len(tokens) == 1:
        tokens = _split_compact(tokens[0])
        if tokens is None:
            return None

    cards = []
    for token in tokens:
        card = parse_card(token)
        if card is None:
            return None
        cards.append(card)
    return cards


def _split_compact(s: str) -> Optional[list[str]]:
    """Split 'AsKh10d' into ['As', 'Kh', '10d']."""
    tokens = []
    i = 0
    while i < len(s):
        width = 3 if s.startswith("10", i) else 2
        if i + width > len(s):
            return None
        tokens.append(s[i:i + width])
        i += width
    return tokens


def create_card(rank: int, suit: int) -> Card:
    """Create a card, validating rank and suit."""
    if rank not in RANK_STR:
        raise ValueError(f"Invalid rank: {rank}")
    if suit not in SUIT_STR:
        raise ValueError(f"Invalid suit: {suit}")
    return Card(int(rank), int(suit))


def card_id(card: Card) -> int:
    """Unique id 0-51 for a card."""
    return (card.rank - 2) * 4 + card.suit


def id_to_card(cid: int) -> Card:
    """Inverse of `card_id`."""
    if not 0 <= cid < NUM_CARDS:
        raise ValueError(f"Invalid card id: {cid}")
    return Card(cid // 4 + 2, cid % 4)


def card_to_display(card: Card) -> str:
    """Render a card with its suit symbol, e.g. 'A♠'."""
    return f"{RANK_STR[card.rank]}{SUIT_SYMBOLS[card.suit]}"


def sort_cards(cards: Sequence[Card]) -> list[Card]:
    """Sort cards by rank (highest first), then suit."""
    return sorted(cards, key=lambda c: (-c.rank, c.suit))
