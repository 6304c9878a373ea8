"""Round state machine, bet settlement and session orchestration."""

from .models import Phase, PHASE_ORDER, Bet, Settlement, GameState
from .engine import (
    create_initial_state,
    start_new_round,
    advance_phase,
    update_equities,
    place_bet,
    cancel_bets,
    create_state_from_seed,
    can_bet,
    visible_board,
    phase_display_name,
)
from .balance import BalanceService, BalanceResult, BalanceServiceError, InMemoryBalance
from .session import ExchangeSession, BetOutcome, BetStatus

__all__ = [
    # Models
    "Phase",
    "PHASE_ORDER",
    "Bet",
    "Settlement",
    "GameState",
    # Engine
    "create_initial_state",
    "start_new_round",
    "advance_phase",
    "update_equities",
    "place_bet",
    "cancel_bets",
    "create_state_from_seed",
    "can_bet",
    "visible_board",
    "phase_display_name",
    # Balance
    "BalanceService",
    "BalanceResult",
    "BalanceServiceError",
    "InMemoryBalance",
    # Session
    "ExchangeSession",
    "BetOutcome",
    "BetStatus",
]
