"""
Hold'em Exchange: a betting exchange on four-seat Texas hold'em rounds.

Rounds are dealt deterministically from a seed, odds are estimated by
Monte Carlo simulation as the board is revealed, and bets settle at
showdown with dead-heat splitting for tied winners.
"""

__version__ = "0.1.0"
