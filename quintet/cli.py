"""
Quintet CLI - Command-line interface for the engine.

Usage:
    quintet cards                      List the card catalog
    quintet simulate [options]         Run bot-vs-bot matches
    quintet play [options]             Play against a bot in the terminal
"""

import argparse
import logging
import os
import sys

from .bots import STRATEGIES, get_strategy
from .cards.base_cards import create_default_registry
from .cards.types import TargetKind, TargetValue
from .engine_core.board import PLAYER_ONE, opponent
from .engine_core.state import DRAW, SimultaneousFivePolicy
from .session import Match, MatchConfig


def main(argv=None):
    """Main CLI entry point. Returns the process exit code."""
    parser = argparse.ArgumentParser(
        description="Quintet - Card-augmented five-in-a-row engine",
        prog="quintet",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Cards command
    subparsers.add_parser("cards", help="List the card catalog")

    # Simulate command
    sim_parser = subparsers.add_parser("simulate", help="Run bot-vs-bot matches")
    sim_parser.add_argument("--seed", default="demo", help="Base seed")
    sim_parser.add_argument("--games", type=int, default=1, help="Number of matches")
    sim_parser.add_argument("--size", type=int, default=15, help="Board size")
    sim_parser.add_argument("--p1", default="heuristic-v1", choices=sorted(STRATEGIES), help="Player 1 strategy")
    sim_parser.add_argument("--p2", default="random-baseline", choices=sorted(STRATEGIES), help="Player 2 strategy")
    sim_parser.add_argument("--max-turns", type=int, default=400, help="Stop a match after this many turns")
    sim_parser.add_argument(
        "--policy",
        default=SimultaneousFivePolicy.ATTACKER.value,
        choices=[p.value for p in SimultaneousFivePolicy],
        help="Who wins simultaneous fives",
    )

    # Play command
    play_parser = subparsers.add_parser("play", help="Play against a bot")
    play_parser.add_argument("--seed", default="demo", help="Match seed")
    play_parser.add_argument("--size", type=int, default=15, help="Board size")
    play_parser.add_argument("--bot", default="heuristic-v1", choices=sorted(STRATEGIES), help="Bot strategy")
    play_parser.add_argument("--first", type=int, default=1, choices=[1, 2], help="Who moves first")

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "cards":
        return cmd_cards(args)
    elif args.command == "simulate":
        return cmd_simulate(args)
    elif args.command == "play":
        return cmd_play(args)

    parser.print_help()
    return 1


def configure_logging(verbose: bool = False):
    level = "DEBUG" if verbose else os.getenv("QUINTET_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def cmd_cards(args):
    """List the card catalog."""
    registry = create_default_registry()
    for definition in registry.list():
        meta = definition.meta
        print(f"{meta.icon} {definition.id:<22} [{definition.target.kind.value}] {meta.description}")
    return 0


def cmd_simulate(args):
    """Run bot-vs-bot matches and print the outcomes."""
    bots = {1: get_strategy(args.p1), 2: get_strategy(args.p2)}
    tally = {1: 0, 2: 0, DRAW: 0, None: 0}

    for game in range(args.games):
        seed = args.seed if args.games == 1 else f"{args.seed}-{game}"
        config = MatchConfig(board_size=args.size, seed=seed, simultaneous_five_policy=args.policy)
        match = Match(config)
        while not match.is_over and match.turn_number <= args.max_turns:
            match.play_policy_turn(bots[match.game.current_player])

        winner = match.game.winner
        tally[winner] += 1
        outcome = "unfinished" if winner is None else ("draw" if winner == DRAW else f"P{winner} ({bots[winner].get_name()})")
        print(f"game {game + 1}: seed={seed} turns={match.turn_number} winner={outcome}")

    print(
        f"\n{args.p1} (P1): {tally[1]}  {args.p2} (P2): {tally[2]}  "
        f"draws: {tally[DRAW]}  unfinished: {tally[None]}"
    )
    return 0


def cmd_play(args):
    """Interactive match against a bot."""
    human = PLAYER_ONE
    config = MatchConfig(
        board_size=args.size,
        seed=args.seed,
        first_player=args.first,
        opponent="bot",
        bot_player=opponent(human),
        bot_strategy_id=args.bot,
    )
    match = Match(config)
    print(f"You are X (P{human}). Enter a card number, then a target as 'x y'. 'q' quits.")

    while not match.is_over:
        if match.is_bot_turn():
            decision = match.play_bot_turn()
            print(f"Bot plays {decision.card_id}: {decision.explanation}")
            continue

        print()
        print(_render(match))
        drawn = list(match.machine.drawn)
        for i, card_id in enumerate(drawn, 1):
            print(f"  {i}) {card_id}")

        answer = _ask("card> ")
        if answer is None:
            return 0
        card_id = drawn[int(answer) - 1] if answer.isdigit() and 0 < int(answer) <= len(drawn) else answer
        if not match.choose_card(card_id):
            print("Not one of your cards.")
            continue

        while match.machine is not None and match.machine.awaiting_target:
            answer = _ask("target> ")
            if answer is None:
                return 0
            target = _parse_target(match, answer)
            if target is None or not match.select_target(target):
                print("Target not accepted.")

    print()
    print(_render(match))
    winner = match.game.winner
    if winner is None:
        print("No cards left: match stalled.")
    elif winner == DRAW:
        print("Draw.")
    else:
        print("You win!" if winner == human else "The bot wins.")
    return 0


def _ask(prompt):
    try:
        answer = input(prompt).strip()
    except EOFError:
        return None
    return None if answer.lower() in {"q", "quit"} else answer


def _parse_target(match, answer):
    definition = match.registry.get(match.machine.chosen)
    parts = answer.split()
    if not parts or not all(p.isdigit() for p in parts):
        return None
    if definition.target.kind == TargetKind.PLAYER:
        return TargetValue.for_player(int(parts[0]))
    if len(parts) != 2:
        return None
    return TargetValue.cell((int(parts[0]), int(parts[1])))


def _render(match):
    snap = match.snapshot()
    size = snap["board"]["size"]
    header = "    " + " ".join(f"{x % 10}" for x in range(size))
    rows = match.game.board.render().splitlines()
    lines = [header] + [f"{y:>3} {row}" for y, row in enumerate(rows)]
    lines.append(
        f"turn {snap['turn_number']}  P{snap['current_player']} to move  "
        f"deck {snap['deck']['draw_pile']}/{snap['deck']['discard_pile']}"
    )
    for entry in snap["history"][-1]["logs"] if snap["history"] else []:
        lines.append(f"  {entry['message']}")
    return "\n".join(lines)


if __name__ == "__main__":
    sys.exit(main())
