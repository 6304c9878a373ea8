#!/usr/bin/env python3
"""Play one Hold'em Exchange round from a seed.

Walks the round phase by phase, showing the revealed cards and the
odds for each seat, places any requested bets along the way and
prints the settlement at showdown.
"""

import argparse
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from holdex.game.cards import card_to_display
from holdex.game.equity import EquityConfig, TieShare
from holdex.exchange import (
    ExchangeSession, GameState, InMemoryBalance, Phase, phase_display_name,
)


def parse_bet(text: str) -> tuple[str, int, float]:
    """Parse 'FLOP:2:50' into (phase, seat, stake)."""
    try:
        phase, seat, stake = text.split(":")
        phase = phase.upper()
        if phase not in [p.name for p in Phase]:
            raise ValueError(phase)
        return phase, int(seat), float(stake)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid bet '{text}', expected PHASE:SEAT:STAKE (e.g. FLOP:2:50)"
        )


def main():
    parser = argparse.ArgumentParser(
        description="Play a Hold'em Exchange round"
    )
    parser.add_argument(
        "-s", "--seed",
        help="Round seed (default: wall clock)",
    )
    parser.add_argument(
        "-b", "--bet",
        type=parse_bet,
        action="append",
        default=[],
        help="Bet as PHASE:SEAT:STAKE, may repeat (e.g. -b PRE_FLOP:0:20 -b TURN:3:50)",
    )
    parser.add_argument(
        "--balance",
        type=float,
        default=1000.0,
        help="Starting balance (default: 1000)",
    )
    parser.add_argument(
        "-i", "--iterations",
        type=int,
        default=20000,
        help="Monte Carlo iterations per phase (default: 20000)",
    )
    parser.add_argument(
        "-w", "--workers",
        type=int,
        default=4,
        help="Simulation chunks per phase (default: 4)",
    )
    parser.add_argument(
        "--exact-ties",
        action="store_true",
        help="Weight ties by 1/#winners instead of a flat half share",
    )
    parser.add_argument(
        "--threads",
        action="store_true",
        help="Simulate on threads instead of processes",
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

    config = EquityConfig(
        iterations=args.iterations,
        workers=args.workers,
        tie_share=TieShare.EXACT if args.exact_ties else TieShare.HALF,
    )
    executor = ThreadPoolExecutor(max_workers=args.workers) if args.threads else None
    balance = InMemoryBalance(args.balance)

    bets_by_phase: dict[str, list[tuple[int, float]]] = {}
    for phase, seat, stake in args.bet:
        bets_by_phase.setdefault(phase, []).append((seat, stake))

    with ExchangeSession(balance, args.balance, config, executor, seed=args.seed) as session:
        state = session.state
        console.print(f"[bold]Round {state.round_number}[/]  seed [cyan]{state.seed}[/]")

        while True:
            if state.is_calculating:
                with console.status(f"Simulating {phase_display_name(state.phase)}..."):
                    state = session.wait_for_equity()

            _display_state(console, state)

            for seat, stake in bets_by_phase.get(state.phase.name, []):
                outcome = session.place_bet(seat, stake)
                if outcome.accepted:
                    bet = outcome.state.bets[-1]
                    console.print(f"  [green]Bet[/] {stake:.2f} on seat {seat} @ {bet.odds:.2f}")
                else:
                    console.print(f"  [red]Bet on seat {seat} for {stake:.2f}: {outcome.status.name}[/]")
                state = outcome.state

            if state.is_settled:
                break
            state = session.advance()

        _display_settlement(console, state, balance.balance)

    if executor is not None:
        executor.shutdown()
    return 0


def _display_state(console: Console, state: GameState) -> None:
    """Show visible cards and odds for the current phase."""
    board = " ".join(card_to_display(c) for c in state.visible_board) or "-"
    console.print()
    console.print(f"[bold cyan]{phase_display_name(state.phase)}[/]  Board: {board}")

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Seat", justify="right")
    table.add_column("Hole", width=8)
    table.add_column("Win", justify="right")
    table.add_column("Tie", justify="right")
    table.add_column("Equity", justify="right")
    table.add_column("Odds", justify="right", style="yellow")

    for seat, hand in enumerate(state.hands):
        hole = " ".join(card_to_display(c) for c in hand) if state.visible_hole_cards else "?? ??"
        if state.equities is None:
            table.add_row(str(seat), hole, "-", "-", "-", "-")
            continue
        eq = state.equities[seat]
        table.add_row(
            str(seat),
            hole,
            f"{eq.win_probability:.1%}",
            f"{eq.tie_probability:.1%}",
            f"{eq.total_equity:.1%}",
            f"{eq.fair_odds:.2f}",
        )

    console.print(table)


def _display_settlement(console: Console, state: GameState, balance: float) -> None:
    """Show the showdown and every bet's result."""
    lines = []
    for seat, evaluated in enumerate(state.evaluated_hands):
        marker = "[green]*[/]" if seat in state.winner_indices else " "
        lines.append(f"{marker} Seat {seat}: {evaluated.name} {list(evaluated.kickers)}")

    if len(state.winner_indices) > 1:
        lines.append(f"[yellow]Dead heat between seats {list(state.winner_indices)}[/]")

    console.print()
    console.print(Panel("\n".join(lines), title="[bold]Showdown[/]", border_style="green"))

    if not state.settlements:
        console.print("[dim]No bets placed[/]")
        return

    table = Table(title="Settlement")
    table.add_column("Seat", justify="right")
    table.add_column("Phase")
    table.add_column("Stake", justify="right")
    table.add_column("Odds", justify="right")
    table.add_column("Result")
    table.add_column("Payout", justify="right")
    table.add_column("Profit", justify="right")

    for s in state.settlements:
        if s.is_dead_heat:
            result = f"[yellow]dead heat /{s.dead_heat_divisor}[/]"
        elif s.won:
            result = "[green]won[/]"
        else:
            result = "[red]lost[/]"
        table.add_row(
            str(s.bet.seat_index),
            s.bet.phase.name,
            f"{s.bet.stake:.2f}",
            f"{s.bet.odds:.2f}",
            result,
            f"{s.payout:.2f}",
            f"{s.profit:+.2f}",
        )

    console.print(table)
    console.print(f"[bold]Balance:[/] {balance:.2f}  [bold]Profit:[/] {state.total_profit:+.2f}")


if __name__ == "__main__":
    sys.exit(main())
