"""
CyberDuel CLI - Command-line interface for the engine.

Usage:
    cyberduel actions [--role attacker|defender]   List the action catalog
    cyberduel simulate [--role ...] [--seed N]      Autoplay a full match
    cyberduel serve [--host H] [--port P]           Run the HTTP/WebSocket API
"""

import argparse
import asyncio
import logging
import sys

from .config import Settings
from .errors import ConfigError


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="CyberDuel - Attacker vs defender PVP engine",
        prog="cyberduel",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Actions command
    actions_parser = subparsers.add_parser("actions", help="List the action catalog")
    actions_parser.add_argument("--role", choices=["attacker", "defender"], help="Only this role")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Autoplay a match against the bot")
    simulate_parser.add_argument("--role", choices=["attacker", "defender"], default="attacker")
    simulate_parser.add_argument("--username", default="Cipher007", help="Human-seat username")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Seed for both seats")
    simulate_parser.add_argument("--max-steps", type=int, default=500)

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "actions":
        cmd_actions(args)
    elif args.command == "simulate":
        cmd_simulate(args, settings)
    elif args.command == "serve":
        cmd_serve(args, settings)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_actions(args):
    """Print the action catalog."""
    from .engine_core import DEFAULT_CATALOG, Role

    actions = DEFAULT_CATALOG.actions_for(Role(args.role)) if args.role else list(DEFAULT_CATALOG)
    for action in actions:
        print(
            f"{action.id:<26} {action.role.value:<9} "
            f"cost={action.cost:<3} damage={action.damage:<4} defense={action.defense}"
        )
        print(f"    {action.description}")


def cmd_simulate(args, settings: Settings):
    """Autoplay a match and print the battle log."""
    from dataclasses import replace
    from .api.service import PvpService
    from .bots import RandomPolicy
    from .engine_core import PlayerProfile, Role
    from .session import GameLoop

    sim_settings = replace(settings, matchmaking_delay=0.0, submit_latency=0.0, opponent_interval=0.0)
    seed = args.seed
    service = PvpService(
        settings=sim_settings,
        strategy=RandomPolicy(seed=None if seed is None else seed + 1),
    )
    loop = GameLoop(service, human_strategy=RandomPolicy(seed=seed), max_steps=args.max_steps)
    profile = PlayerProfile(username=args.username, role=Role(args.role))

    result = asyncio.run(loop.run(profile))

    for entry in result.match.log:
        print(f"[turn {entry.turn:>3}] {entry.text}")
    print()
    if result.finished:
        print(f"Winner: {result.winner} after {result.match.turn_number} turns")
    else:
        print(f"Stopped after {result.steps} steps without a winner")
        sys.exit(2)


def cmd_serve(args, settings: Settings):
    """Run the API under uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api import create_app

    uvicorn.run(create_app(settings=settings), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
