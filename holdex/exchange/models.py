"""Immutable snapshots for the exchange round."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from holdex.game.cards import Card, Hand
from holdex.game.equity import HandEquity
from holdex.game.evaluator import EvaluatedHand


class Phase(Enum):
    """Round phases, in the only order they may occur."""
    PRE_DEAL = 0    # Nothing shown
    PRE_FLOP = 1    # Hole cards shown
    FLOP = 2        # 3 board cards
    TURN = 3        # 4 board cards
    RIVER = 4       # 5 board cards
    SETTLE = 5      # Showdown and payouts

    @classmethod
    def from_index(cls, index: int) -> "Phase":
        """Phase for a sync index; indexes past the end clamp to SETTLE."""
        if index < 0:
            raise ValueError(f"Invalid phase index: {index}")
        return PHASE_ORDER[min(index, len(PHASE_ORDER) - 1)]

    @property
    def next(self) -> Optional["Phase"]:
        if self is Phase.SETTLE:
            return None
        return PHASE_ORDER[self.value + 1]

    @property
    def hole_cards_visible(self) -> bool:
        return self is not Phase.PRE_DEAL

    @property
    def visible_board_count(self) -> int:
        return VISIBLE_BOARD[self]

    @property
    def needs_equity(self) -> bool:
        """Phases whose odds come from a fresh simulation."""
        return self not in (Phase.PRE_DEAL, Phase.SETTLE)

    def __str__(self) -> str:
        return self.name


PHASE_ORDER = tuple(Phase)

VISIBLE_BOARD = {
    Phase.PRE_DEAL: 0,
    Phase.PRE_FLOP: 0,
    Phase.FLOP: 3,
    Phase.TURN: 4,
    Phase.RIVER: 5,
    Phase.SETTLE: 5,
}


@dataclass(frozen=True)
class Bet:
    """A back bet on one seat. Odds are locked when the bet is placed."""
    seat_index: int
    stake: float
    odds: float
    phase: Phase

    def __repr__(self) -> str:
        return f"Bet(seat={self.seat_index}, {self.stake:.2f} @ {self.odds:.2f}, {self.phase})"


@dataclass(frozen=True)
class Settlement:
    """Outcome of one bet at showdown."""
    bet: Bet
    won: bool
    is_dead_heat: bool
    dead_heat_divisor: int
    payout: float     # Total return, stake included
    profit: float     # payout - stake


@dataclass(frozen=True)
class GameState:
    """
    One snapshot of an exchange round.

    All four hands and the full board are dealt up front and revealed
    progressively; `visible_hole_cards` and `visible_board_count` say
    how much of them a viewer may see. Every operation returns a new
    snapshot; collections are tuples so snapshots never share mutable
    state.
    """
    phase: Phase
    seed: str

    hands: tuple[Hand, ...]
    board: tuple[Card, ...]

    visible_hole_cards: bool
    visible_board_count: int

    equities: Optional[tuple[HandEquity, ...]]
    is_calculating: bool

    bets: tuple[Bet, ...]
    balance: float

    # Only populated at SETTLE
    evaluated_hands: Optional[tuple[EvaluatedHand, ...]]
    winner_indices: Optional[tuple[int, ...]]
    settlements: Optional[tuple[Settlement, ...]]

    round_number: int
    total_profit: float

    @property
    def visible_board(self) -> tuple[Card, ...]:
        return self.board[:self.visible_board_count]

    @property
    def total_staked(self) -> float:
        return sum(bet.stake for bet in self.bets)

    @property
    def is_settled(self) -> bool:
        return self.phase is Phase.SETTLE
