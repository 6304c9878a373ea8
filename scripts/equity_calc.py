#!/usr/bin/env python3
"""Estimate four-way equity for explicit hands and board."""

import argparse
import logging
import sys
import time
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from holdex.game.cards import Hand, card_to_display, parse_cards
from holdex.game.equity import TieShare, estimate_equity, preflop_estimate


def main():
    parser = argparse.ArgumentParser(
        description="Monte Carlo equity for four Hold'em Exchange hands"
    )
    parser.add_argument(
        "hands",
        nargs=4,
        help="Four hole-card pairs (e.g., AsKs QhQd 7c8c 2d2h)",
    )
    parser.add_argument(
        "-b", "--board",
        default="",
        help="Revealed board cards (e.g., 'Qs7s2h' or 'Qs 7s 2h')",
    )
    parser.add_argument(
        "-i", "--iterations",
        type=int,
        default=50000,
        help="Number of simulations (default: 50000)",
    )
    parser.add_argument(
        "--seed",
        default="equity",
        help="Simulation seed (default: 'equity')",
    )
    parser.add_argument(
        "--exact-ties",
        action="store_true",
        help="Weight ties by 1/#winners instead of a flat half share",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()
    console = Console()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    hands = []
    for text in args.hands:
        cards = parse_cards(text)
        if cards is None or len(cards) != 2:
            console.print(f"[red]Invalid hand: {text}[/]")
            return 1
        hands.append(Hand(*cards))

    board = parse_cards(args.board) if args.board else []
    if board is None or len(board) > 5:
        console.print(f"[red]Invalid board: {args.board}[/]")
        return 1

    board_display = " ".join(card_to_display(c) for c in board) or "-"
    console.print(f"[bold]Board:[/] {board_display}")

    tie_share = TieShare.EXACT if args.exact_ties else TieShare.HALF
    start = time.perf_counter()
    try:
        with console.status(f"Running {args.iterations} simulations..."):
            result = estimate_equity(hands, board, args.iterations, args.seed, tie_share)
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        return 1
    elapsed = time.perf_counter() - start

    table = Table(show_header=True, header_style="bold")
    table.add_column("Seat", justify="right")
    table.add_column("Hand")
    table.add_column("Win", justify="right")
    table.add_column("Tie", justify="right")
    table.add_column("Equity", justify="right")
    table.add_column("Fair odds", justify="right", style="yellow")
    if not board:
        table.add_column("Quick est.", justify="right", style="dim")

    for hand, eq in zip(hands, result.equities):
        row = [
            str(eq.seat),
            " ".join(card_to_display(c) for c in hand),
            f"{eq.win_probability:.2%}",
            f"{eq.tie_probability:.2%}",
            f"{eq.total_equity:.2%}",
            f"{eq.fair_odds:.2f}",
        ]
        if not board:
            row.append(f"{preflop_estimate(hand):.0%}")
        table.add_row(*row)

    console.print(table)
    console.print(
        f"[dim]{result.total_simulations} simulations, "
        f"{result.remaining_cards} board cards to come, {elapsed:.2f}s[/]"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
