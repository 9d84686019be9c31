"""
Command-line entry point: run a game with the console display.
"""

import argparse
import asyncio
import logging
import sys
import threading
from typing import Optional, TextIO

from nightfall import GameLoop
from nightfall.agents import DecisionContext, HumanAgent
from nightfall.config.config_loader import load_config
from nightfall.config.game_config import GameConfig, TIE_BREAK_POLICIES
from nightfall.core import GameError
from nightfall.display import ConsoleSink, EventEmitter

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def print_game_summary(game: GameLoop) -> None:
    """Print a nicely formatted game summary."""
    state = game.game_state
    summary = game.get_game_summary()

    print("\nGAME SUMMARY")
    print("-" * 60)

    winner_names = {"town": "Town", "assassin": "Assassins", "neutral": "Jester"}
    winner = summary["winner"]
    print(f"Winner: {winner_names.get(winner, 'None')} ({summary['end_reason']})")
    print(f"Total Days: {summary['days']}")
    print(f"Total Nights: {summary['nights']}")
    print(f"Random Seed: {summary['random_seed']}")

    alive_players = state.get_alive_players()
    if alive_players:
        print("\nAlive Players:")
        for player in alive_players:
            print(f"  - {player.name}: {player.role.title} ({player.team.value.title()})")

    eliminated = state.roster.eliminated_players()
    if eliminated:
        print(f"\nEliminated Players ({len(eliminated)}):")
        for player in eliminated:
            elimination_info = next(
                (action["data"] for action in state.action_log
                 if action["type"] == "player_eliminated" and action["data"]["player"] == player.player_id),
                {},
            )
            reason = elimination_info.get("reason", "")
            if elimination_info.get("night_number") is not None:
                details = f"{reason.replace('_', ' ')} on night {elimination_info['night_number']}"
            elif elimination_info.get("day_number") is not None:
                details = f"voted out on day {elimination_info['day_number']} by {elimination_info.get('voters')}"
            else:
                details = reason
            print(f"  - {player.name}: {player.role.title} ({player.team.value.title()}) - {details}")


def prompt_for_decision(context: DecisionContext) -> None:
    """Tell the human player what they are being asked."""
    action = context.action.value.replace("_", " ")
    print(f"\n>>> Your move ({action}): choose a player id from {context.candidates}, "
          f"or press Enter for none")


def read_lines(stream: TextIO, loop: asyncio.AbstractEventLoop,
               lines: "asyncio.Queue[Optional[str]]") -> None:
    """Blocking reader for a daemon thread. None marks the end of input."""
    for line in iter(stream.readline, ""):
        if not _post(loop, lines, line):
            return
    _post(loop, lines, None)


def _post(loop: asyncio.AbstractEventLoop, lines: "asyncio.Queue[Optional[str]]",
          item: Optional[str]) -> bool:
    try:
        loop.call_soon_threadsafe(lines.put_nowait, item)
    except RuntimeError:
        # Event loop is closed once the game has ended
        logger.debug("Game over, console input no longer read")
        return False
    return True


async def feed_human_input(human: HumanAgent, lines: "asyncio.Queue[Optional[str]]",
                           poll: float) -> None:
    """Hand console lines to the human player, one per open decision."""
    while True:
        line = await lines.get()
        if line is None:
            logger.info("End of console input; open decisions will time out")
            return
        text = line.strip()

        while human.waiting_for is None:
            await asyncio.sleep(poll)
        candidates = human.last_context.candidates

        target = None
        if text:
            try:
                target = int(text)
            except ValueError:
                print(f"Not a player id: {text!r}")
                continue
            if target not in candidates:
                print(f"Player {target} cannot be chosen now; pick from {candidates}")
                continue

        human.submit(target, human.waiting_for)
        # Wait for the choice to be taken so the next line answers the next decision
        while human.has_pending_input:
            await asyncio.sleep(poll)


async def play_with_console(game: GameLoop, stream: TextIO) -> None:
    """Run the game while console lines drive the human player."""
    human = game.human_agent
    human.on_decision = prompt_for_decision
    lines: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
    reader = threading.Thread(target=read_lines, args=(stream, asyncio.get_running_loop(), lines),
                              daemon=True)
    reader.start()

    feeder = asyncio.ensure_future(feed_human_input(human, lines, game.config.clock_tick))
    try:
        await game.run()
    finally:
        feeder.cancel()
        try:
            await feeder
        except asyncio.CancelledError:
            pass


def build_config(args: argparse.Namespace) -> GameConfig:
    """Load config from YAML if provided, then apply command-line overrides."""
    config = load_config(args.config)

    if args.seed is not None:
        config.random_seed = args.seed
    if args.players is not None:
        config.player_names = [f"Player {i}" for i in range(1, args.players + 1)]
    if args.jester:
        config.include_jester = True
    if args.tie_break is not None:
        config.tie_break = args.tie_break
    if args.max_rounds is not None:
        config.max_rounds = args.max_rounds
    if args.human is not None:
        config.human_player = args.human
    if args.log_level is not None:
        config.log_level = args.log_level
    config.validate()
    return config


def main(argv: Optional[list] = None, input_stream: Optional[TextIO] = None) -> int:
    """
    Entry point for running a game.

    When a seat is played by a human, their choices are read line by line
    from input_stream (stdin by default).
    """
    parser = argparse.ArgumentParser(
        description="Run a Nightfall game simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                              # Five random players
  python main.py --players 8 --jester         # Eight players with a Jester
  python main.py --config configs/game.yaml   # Use a YAML config
  python main.py --tie-break no_elimination   # Nobody leaves on a tie
  python main.py --human 1                    # Play seat 1 yourself
        """
    )
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="Path to YAML configuration file (default: use default config)")
    parser.add_argument("--seed", "-s", type=int, default=None,
                        help="Random seed for reproducible games (generated and shown if not provided)")
    parser.add_argument("--players", "-p", type=int, default=None,
                        help="Number of players (at least 4)")
    parser.add_argument("--jester", action="store_true",
                        help="Seat a Jester (needs at least 5 players)")
    parser.add_argument("--tie-break", type=str, choices=TIE_BREAK_POLICIES, default=None,
                        help="Vote tie policy")
    parser.add_argument("--max-rounds", type=int, default=None,
                        help="End the game without a winner after this many days")
    parser.add_argument("--human", type=int, default=None, metavar="SEAT",
                        help="Play this seat yourself from the console")
    parser.add_argument("--log-level", type=str, default=None,
                        help="Logging level (DEBUG, INFO, WARNING)")

    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        parser.error(str(e))

    configure_logging(config.log_level)

    print("Nightfall Game Simulation")
    print("=" * 60)
    if args.config:
        print(f"Using config: {args.config}")

    emitter = EventEmitter()
    if config.use_judge_announcements:
        emitter.add_sink(ConsoleSink())

    try:
        game = GameLoop(config=config, event_emitter=emitter)
    except GameError as e:
        print(f"\nCannot start game: {e}")
        return 1

    human = game.human_agent
    if human is not None:
        print(f"You play seat {human.player.player_id}. Type a player id and press Enter when asked.")
        asyncio.run(play_with_console(game, input_stream or sys.stdin))
    else:
        game.run_game()

    print("=" * 60)
    print_game_summary(game)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
