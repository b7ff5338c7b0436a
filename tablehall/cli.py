"""
Tablehall CLI - Command-line interface for the engine.

Usage:
    tablehall serve [--host H] [--port P]     Run the REST API
    tablehall play alice bob [--seed N]       Hot-seat game in the terminal
"""

import argparse
import sys

from .config import configure_logging

PLAY_HELP = """Commands:
  play <i> [<i> ...]      attack with the cards at those positions
  yield                   skip the attack
  discard <i> [<i> ...]   suffer damage with those cards
  special [<i>]           play a Special
  next <seat>             choose who goes next after a Special
  leave                   current player leaves the game
  help                    show this text
  quit                    end the game"""


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tablehall - Cooperative card-game campaign engine",
        prog="tablehall",
    )
    parser.add_argument("--log-level", help="Logging level (default from TABLEHALL_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a hot-seat game in the terminal")
    play_parser.add_argument("players", nargs="+", help="Player names, host first (1-4)")
    play_parser.add_argument("--seed", type=int, help="Seed for a reproducible shuffle")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "play":
        cmd_play(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api.app import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


def cmd_play(args):
    """Hot-seat game: everyone shares one terminal."""
    from .api.schemas import (
        CardsRequest,
        CreateSessionRequest,
        ErrorResponse,
        NextPlayerRequest,
        PlayerRequest,
    )
    from .api.service import CampaignService
    from .games.campaign.decks import seeded_shuffler

    if len(set(args.players)) != len(args.players):
        print("Error: player names must be distinct")
        sys.exit(1)

    shuffler = seeded_shuffler(args.seed) if args.seed is not None else None
    service = CampaignService(shuffler=shuffler)
    key = "terminal"
    host = args.players[0]

    service.create_session(CreateSessionRequest(session_key=key, host_id=host))
    for name in args.players[1:]:
        response = service.join(key, PlayerRequest(player_id=name))
        if isinstance(response, ErrorResponse):
            print(f"Error: {response.error}")
            sys.exit(1)

    response = service.start(key, PlayerRequest(player_id=host))
    print(PLAY_HELP)

    while not getattr(response, "session_closed", False):
        state = service.get_game_state(key)
        if isinstance(state, ErrorResponse):
            break
        current = state.active_player_id
        view = service.get_game_state(key, viewer_id=current)
        _print_table(view)

        try:
            line = input(f"{current}> ").strip()
        except EOFError:
            line = "quit"
        if not line:
            continue
        command, *rest = line.split()
        try:
            numbers = [int(x) for x in rest]
        except ValueError:
            print("Positions must be numbers")
            continue

        if command == "help":
            print(PLAY_HELP)
            continue
        if command == "quit":
            service.end_session(key, requester_id=host)
            print("Game ended.")
            return
        if command == "play":
            response = service.play(key, CardsRequest(player_id=current, indices=numbers))
        elif command == "yield":
            response = service.yield_turn(key, PlayerRequest(player_id=current))
        elif command == "discard":
            response = service.discard(key, CardsRequest(player_id=current, indices=numbers))
        elif command == "special":
            response = service.play_special(key, CardsRequest(player_id=current, indices=numbers or None))
        elif command == "next" and len(numbers) == 1:
            response = service.select_next_player(
                key, NextPlayerRequest(player_id=current, target_index=numbers[0])
            )
        elif command == "leave":
            response = service.leave(key, current)
        else:
            print(f"Unknown command: {line}")
            continue

        if isinstance(response, ErrorResponse):
            print(f"  ! {response.error}")
            response = None
            continue
        _print_result(response)

    if response is not None and response.game_over:
        over = response.game_over
        if over.won:
            print(f"\nVictory ({over.victory})! The castle is cleared.")
        else:
            print(f"\nDefeat: {over.reason.replace('_', ' ')}.")


def _print_table(view):
    boss = view.boss
    immune = "" if boss.immunity_negated else f", immune to {boss.suit}"
    print(
        f"\n{boss.name}: {boss.health}/{boss.max_health} health, "
        f"attack {boss.attack_value}{immune} ({boss.remaining} bosses left)"
    )
    print(f"Deck {view.deck_size}, discard {view.discard_size}, phase {view.phase}")
    for seat, player in enumerate(view.players):
        marker = "*" if player.is_current_turn else " "
        print(f" {marker} [{seat}] {player.player_id}: {player.hand_size} cards")
        if player.hand is not None:
            cards = ", ".join(f"{i}:{card.name}" for i, card in enumerate(player.hand))
            print(f"       {cards}")


def _print_result(response):
    if response.cards_played:
        print(f"  played {', '.join(response.cards_played)}")
    if response.suit_powers_blocked:
        print(f"  blocked: {', '.join(response.suit_powers_blocked)}")
    if response.damage_dealt:
        print(f"  dealt {response.damage_dealt} damage")
    if response.cards_healed:
        print(f"  {response.cards_healed} cards returned to the deck")
    if response.cards_drawn:
        print(f"  {response.cards_drawn} cards drawn")
    if response.defeated_boss:
        print(f"  {response.defeated_boss} {response.boss_outcome}")
    if response.damage_suffered:
        print(f"  absorbed {response.damage_suffered} damage")
    if response.pending_choice:
        print(f"  choose the next player: {', '.join(response.pending_choice)}")


if __name__ == "__main__":
    main()
