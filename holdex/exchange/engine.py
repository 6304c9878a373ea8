"""
Pure round transitions.

PRE_DEAL -> PRE_FLOP -> FLOP -> TURN -> RIVER -> SETTLE

Every function takes a snapshot and returns a new one; invalid requests
(bad bets, cancelling after showdown) return the input unchanged.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

from holdex.game.cards import Card
from holdex.game.deck import NUM_SEATS, Seed, deal_round, default_seed
from holdex.game.equity import (
    EquityConfig, HandEquity, TieShare, estimate_equity, estimate_equity_chunked,
    pre_deal_equities,
)
from holdex.game.evaluator import determine_winners, evaluate_hand
from .models import Bet, GameState, Phase, Settlement

logger = logging.getLogger(__name__)

DEFAULT_BALANCE = 1000.0

PHASE_NAMES = {
    Phase.PRE_DEAL: "Pre-deal",
    Phase.PRE_FLOP: "Pre-flop",
    Phase.FLOP: "Flop",
    Phase.TURN: "Turn",
    Phase.RIVER: "River",
    Phase.SETTLE: "Settle",
}


def equity_seed(seed: str, phase: Phase) -> str:
    """Simulation seed for a phase; every client derives the same one."""
    return f"{seed}:{phase.name}"


def _dealt_state(
    seed: Optional[Seed],
    balance: float,
    round_number: int,
    total_profit: float,
) -> GameState:
    dealt = deal_round(default_seed() if seed is None else seed)
    return GameState(
        phase=Phase.PRE_DEAL,
        seed=dealt.seed,
        hands=dealt.hands,
        board=dealt.board,
        visible_hole_cards=False,
        visible_board_count=0,
        equities=pre_deal_equities(),
        is_calculating=False,
        bets=(),
        balance=balance,
        evaluated_hands=None,
        winner_indices=None,
        settlements=None,
        round_number=round_number,
        total_profit=total_profit,
    )


def create_initial_state(
    balance: float = DEFAULT_BALANCE,
    seed: Optional[Seed] = None,
) -> GameState:
    """First round of a session, dealt at PRE_DEAL with blind odds."""
    return _dealt_state(seed, balance, round_number=1, total_profit=0.0)


def start_new_round(state: GameState, seed: Optional[Seed] = None) -> GameState:
    """
    Deal the next round, keeping balance and running profit.

    Bets still open on an unsettled round are dropped without refund;
    cancel them first to get the stakes back.
    """
    if state.bets and not state.is_settled:
        logger.warning(
            "Starting round %d with %d unsettled bets on round %d",
            state.round_number + 1, len(state.bets), state.round_number,
        )
    return _dealt_state(
        seed, state.balance, state.round_number + 1, state.total_profit,
    )


def advance_phase(state: GameState, tie_share: TieShare = TieShare.HALF) -> GameState:
    """
    Move to the next phase.

    Old equities are discarded; the new phase is marked as calculating
    until `update_equities` installs a fresh estimate. Advancing into
    SETTLE settles every bet. At SETTLE this is a no-op.
    """
    next_phase = state.phase.next
    if next_phase is None:
        return state

    new_state = replace(
        state,
        phase=next_phase,
        visible_hole_cards=next_phase.hole_cards_visible,
        visible_board_count=next_phase.visible_board_count,
        equities=None,
        is_calculating=next_phase.needs_equity,
    )

    if next_phase is Phase.SETTLE:
        return settle_round(new_state, tie_share)
    return new_state


def update_equities(state: GameState, equities: Sequence[HandEquity]) -> GameState:
    """Install a completed estimate for the current phase."""
    if state.is_settled:
        return state
    return replace(state, equities=tuple(equities), is_calculating=False)


def can_bet(state: GameState) -> bool:
    """Betting is open until showdown, including blind PRE_DEAL bets."""
    return not state.is_settled


def place_bet(state: GameState, seat_index: int, stake: float) -> GameState:
    """
    Back a seat at its currently displayed odds.

    Rejected (state returned unchanged) when betting is closed, the
    stake is not in (0, balance], the seat is not 0-3, or no odds are
    displayed because the phase estimate is still running.
    """
    if not can_bet(state):
        return state
    if not 0 < stake <= state.balance:
        return state
    if not 0 <= seat_index < NUM_SEATS:
        return state
    if state.equities is None:
        return state

    bet = Bet(
        seat_index=seat_index,
        stake=stake,
        odds=state.equities[seat_index].fair_odds,
        phase=state.phase,
    )
    return replace(
        state,
        bets=state.bets + (bet,),
        balance=state.balance - stake,
    )


def cancel_bets(state: GameState) -> GameState:
    """Refund every stake of the round. No-op once settled or with no bets."""
    if state.is_settled or not state.bets:
        return state
    return replace(
        state,
        bets=(),
        balance=state.balance + state.total_staked,
    )


def settle_bet(bet: Bet, winners: Sequence[int]) -> Settlement:
    """
    Settle one bet against the winner set.

    Dead heat: the stake comes back in full and the winnings at the
    locked odds are divided by the number of tied winners.
    """
    won = bet.seat_index in winners
    dead_heat = won and len(winners) > 1
    divisor = len(winners) if dead_heat else 1

    if won:
        winnings = bet.stake * (bet.odds - 1) / divisor
        payout = bet.stake + winnings
        profit = winnings
    else:
        payout = 0.0
        profit = -bet.stake

    return Settlement(
        bet=bet,
        won=won,
        is_dead_heat=dead_heat,
        dead_heat_divisor=divisor,
        payout=payout,
        profit=profit,
    )


def _showdown(state: GameState, tie_share: TieShare = TieShare.HALF) -> GameState:
    evaluated = tuple(evaluate_hand(hand, state.board) for hand in state.hands)
    winners = tuple(determine_winners(evaluated))
    final = estimate_equity(state.hands, state.board, tie_share=tie_share)
    return replace(
        state,
        phase=Phase.SETTLE,
        evaluated_hands=evaluated,
        winner_indices=winners,
        equities=final.equities,
        is_calculating=False,
    )


def settle_round(state: GameState, tie_share: TieShare = TieShare.HALF) -> GameState:
    """Evaluate the full board and pay out every bet."""
    state = _showdown(state, tie_share)
    settlements = tuple(settle_bet(bet, state.winner_indices) for bet in state.bets)

    total_payout = sum(s.payout for s in settlements)
    total_profit = sum(s.profit for s in settlements)

    logger.debug(
        "Round %d settled: winners=%s bets=%d payout=%.2f profit=%.2f",
        state.round_number, list(state.winner_indices), len(settlements),
        total_payout, total_profit,
    )

    return replace(
        state,
        settlements=settlements,
        balance=state.balance + total_payout,
        total_profit=state.total_profit + total_profit,
    )


def create_state_from_seed(
    seed: str,
    phase_index: int,
    round_number: int,
    config: Optional[EquityConfig] = None,
) -> GameState:
    """
    Rebuild a round snapshot from the sync triple.

    The deal and the phase's equity estimate are both functions of the
    seed, so independent processes derive identical snapshots, matching
    what a live `ExchangeSession` with the same config shows. Balance
    is managed externally and starts at zero.
    """
    config = config or EquityConfig()
    phase = Phase.from_index(phase_index)
    state = replace(
        _dealt_state(seed, 0.0, round_number, 0.0),
        phase=phase,
        visible_hole_cards=phase.hole_cards_visible,
        visible_board_count=phase.visible_board_count,
    )

    if phase is Phase.SETTLE:
        state = _showdown(state, config.tie_share)
        return replace(state, settlements=())

    if phase.needs_equity:
        result = estimate_equity_chunked(
            state.hands,
            state.visible_board,
            iterations=config.clamp(),
            seed=equity_seed(state.seed, phase),
            chunks=config.workers,
            tie_share=config.tie_share,
        )
        state = update_equities(state, result.equities)

    return state


def visible_board(state: GameState) -> tuple[Card, ...]:
    """Board cards a viewer may see in the current phase."""
    return state.visible_board


def phase_display_name(phase: Phase) -> str:
    return PHASE_NAMES[phase]
