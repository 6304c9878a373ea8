"""Cards, seeded dealing, hand evaluation and equity estimation."""

from .cards import Card, Hand, Rank, Suit, parse_card, parse_cards, card_id, id_to_card
from .deck import SeededRandom, Deck, DealtRound, deal_round
from .evaluator import (
    HandCategory, EvaluatedHand, InsufficientCardsError,
    evaluate_hand, compare_hands, determine_winners,
)
from .equity import (
    EquityConfig, EquityResult, HandEquity, HandCountError, TieShare,
    estimate_equity, estimate_equity_chunked, pre_deal_equities,
)

__all__ = [
    "Card",
    "Hand",
    "Rank",
    "Suit",
    "parse_card",
    "parse_cards",
    "card_id",
    "id_to_card",
    "SeededRandom",
    "Deck",
    "DealtRound",
    "deal_round",
    "HandCategory",
    "EvaluatedHand",
    "InsufficientCardsError",
    "evaluate_hand",
    "compare_hands",
    "determine_winners",
    "EquityConfig",
    "EquityResult",
    "HandEquity",
    "HandCountError",
    "TieShare",
    "estimate_equity",
    "estimate_equity_chunked",
    "pre_deal_equities",
]
