"""Pytest configuration and fixtures."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from holdex.game.cards import Hand, parse_cards
from holdex.game.equity import HandEquity
from holdex.exchange.engine import advance_phase, create_initial_state, update_equities


def make_state(hands, board, balance=1000.0):
    """A PRE_DEAL state with fixed hole cards and board."""
    state = create_initial_state(balance, seed="fixture")
    return replace(
        state,
        hands=tuple(Hand.from_string(h) for h in hands),
        board=tuple(parse_cards(board)),
    )


def with_odds(state, odds):
    """Install a completed estimate displaying the given odds per seat."""
    equities = [
        HandEquity(seat=i, win_probability=1 / o, tie_probability=0.0,
                   total_equity=1 / o, fair_odds=o)
        for i, o in enumerate(odds)
    ]
    return update_equities(state, equities)


def run_to_settle(state):
    """Advance until showdown."""
    while not state.is_settled:
        state = advance_phase(state)
    return state


@pytest.fixture
def sole_winner_state():
    """Seat 0 wins with trip aces over seat 1's trip kings."""
    return make_state(
        ["AsAh", "KsKh", "7c2d", "8d3c"],
        "Ad Kd 9s 4h 2s",
    )


@pytest.fixture
def two_way_heat_state():
    """Seats 0 and 1 share the ace-high straight."""
    return make_state(
        ["Tc3d", "Td4s", "5h6h", "7c8d"],
        "Ah Kd Qc Js 2h",
    )


@pytest.fixture
def royal_board_state():
    """Everyone plays the royal flush on the board."""
    return make_state(
        ["2c3c", "4d5d", "6h7h", "8c9d"],
        "As Ks Qs Js Ts",
    )


@pytest.fixture
def thread_pool():
    with ThreadPoolExecutor(max_workers=2) as executor:
        yield executor
