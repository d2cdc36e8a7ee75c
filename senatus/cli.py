"""
Senatus CLI - Command-line interface for the engine.

Usage:
    senatus serve [--host H] [--port P]       Run the REST API with uvicorn
    senatus simulate [--turns N] [--seed S]   Let two bots play and print a summary
    senatus state [--seed S] [--viewer P]     Print the state of a fresh game as JSON
"""

import argparse
import sys

from .config import SENATUS_HOST, SENATUS_PORT, SENATUS_SEED, configure_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Senatus - Patrician influence contest engine",
        prog="senatus",
    )
    parser.add_argument("--log-level", help="Logging level (default: SENATUS_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default=SENATUS_HOST, help="Bind host")
    serve_parser.add_argument("--port", type=int, default=SENATUS_PORT, help="Bind port")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Let two bots play")
    simulate_parser.add_argument("--turns", type=int, default=20, help="Standard-play turns to run")
    simulate_parser.add_argument("--seed", type=int, default=SENATUS_SEED, help="Deck and bot seed")
    simulate_parser.add_argument(
        "--policy", choices=["random", "first"], default="random", help="Bot policy for both players"
    )

    # State command
    state_parser = subparsers.add_parser("state", help="Print a fresh game's state")
    state_parser.add_argument("--seed", type=int, default=SENATUS_SEED, help="Deck seed")
    state_parser.add_argument("--viewer", default=None, help="caesar or cleopatra")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "state":
        cmd_state(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the REST API."""
    import uvicorn

    uvicorn.run("senatus.api.app:app", host=args.host, port=args.port)


def cmd_simulate(args):
    """Let two bots play and print the result."""
    from .bots import FirstLegalPolicy, RandomPolicy, run_bots
    from .engine_core import Game, PatricianType, Player

    game = Game(seed=args.seed)
    if args.policy == "first":
        policies = {player: FirstLegalPolicy() for player in Player}
    else:
        base = args.seed if args.seed is not None else 0
        policies = {player: RandomPolicy(seed=base + i) for i, player in enumerate(Player)}

    applied = run_bots(game, policies, max_turns=args.turns)

    print(f"Moves applied: {applied}")
    print(f"Turns completed: {max(game.turn_number - 1, 0)}")
    print(f"Mode: {game.mode.value}, phase: {game.turn_phase.value}")
    print("\nClaimed Patricians:")
    for player in Player:
        counts = game.claimed_counts(player)
        total = sum(counts.values())
        detail = ", ".join(f"{t.value}={counts[t]}" for t in PatricianType if counts[t])
        print(f"  {player.value}: {total}" + (f" ({detail})" if detail else ""))
    print("\nBoard remaining:")
    for patrician_type in PatricianType:
        print(f"  {patrician_type.value}: {game.ledger.remaining(patrician_type)}")
    print(f"\nDiscard pile: {len(game.discard_pile)} card(s)")


def cmd_state(args):
    """Print the state of a fresh game as JSON."""
    from .api.service import GameService
    from .engine_core import GameError

    service = GameService()
    created = service.create_game(seed=args.seed)
    try:
        state = service.get_state(created.game_id, args.viewer)
    except GameError as e:
        print(f"Error: {e.message}")
        sys.exit(1)
    print(state.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
