#!/usr/bin/env python3
"""
All That Glitters: a rune-placement puzzle.
Main entry point and command-line interface.
"""

import argparse
import logging
import time

from alchemy.engine import AlchemyEngine, GameConfig
from alchemy.rankings import get_ranking
from ai.greedy import ActionKind, GreedyPlayer


def build_config(args) -> GameConfig:
    """Build a GameConfig from common command-line options."""
    return GameConfig(
        grid_width=args.width,
        grid_height=args.height,
        forge_capacity=args.forge,
        skill_level=args.skill_level,
        seed=args.seed,
    )


def finish_board(engine: AlchemyEngine):
    """Bank a completed board and move on to the next one."""
    board = engine.board
    engine.complete_board()
    engine.start_new_round()
    print(f"\n✨ Board {board} turned to gold! On to board {engine.board}.")


def print_summary(engine: AlchemyEngine, duration: float):
    ranking = get_ranking(engine.score)
    print("\n" + "=" * 40)
    print("GAME OVER")
    print("=" * 40)
    print(f"Final Score: {engine.score}")
    print(f"Rank: {ranking.title}" + (f" (next at {ranking.next_at})" if ranking.next_at else ""))
    print(f"Boards Cleared: {engine.boards_cleared}")
    print(f"Lines Cleared: {engine.lines_cleared}")
    print(f"Best Streak: {engine.max_placement_streak}")
    print(f"Game Duration: {duration:.2f} seconds")


def demo_game(args):
    """Let the greedy bot play one game."""
    print("All That Glitters - Demo")
    print("=" * 40)

    engine = AlchemyEngine(build_config(args))
    player = GreedyPlayer()
    start_time = time.time()
    turn = 0

    while turn < args.max_turns:
        if engine.is_level_complete():
            finish_board(engine)
            continue
        if engine.is_game_over():
            break

        turn += 1
        rune = engine.current_rune
        action = player.play_turn(engine)
        if action.kind == ActionKind.NONE:
            break
        if action.kind == ActionKind.DISCARD:
            print(f"Turn {turn}: {rune} -> forge")
        else:
            print(f"Turn {turn}: {rune} -> ({action.x}, {action.y}) [{action.kind.value}]")

        if turn % args.show_every == 0:
            print()
            print(engine)
            print("-" * 30)

    print()
    print(engine)
    print_summary(engine, time.time() - start_time)


PLAY_HELP = """Commands:
  p X Y   place the current rune at column X, row Y
  s X Y   use a skull rune on column X, row Y
  d       discard the current rune to the forge
  q       quit"""


def play_game(args):
    """Interactive text game."""
    engine = AlchemyEngine(build_config(args))
    print(PLAY_HELP)

    while True:
        if engine.is_level_complete():
            finish_board(engine)
        if engine.is_game_over():
            break

        print()
        print(engine)
        try:
            command = input("> ").strip().split()
        except EOFError:
            break
        if not command:
            continue

        verb = command[0].lower()
        if verb == 'q':
            break
        if verb == 'd':
            if not engine.discard_to_forge():
                print("The forge is full.")
            continue
        if verb in ('p', 's') and len(command) == 3:
            try:
                x, y = int(command[1]), int(command[2])
            except ValueError:
                print(PLAY_HELP)
                continue
            if verb == 'p':
                result = engine.place_rune(x, y)
                if not result.placed:
                    print("That rune cannot go there.")
                elif result.row_column_cleared:
                    print("Line cleared!")
            elif not engine.use_skull_to_remove(x, y):
                print("Nothing the skull can remove there.")
            continue
        print(PLAY_HELP)

    print_summary(engine, engine.get_game_time_seconds())


def benchmark(args):
    """Run several bot games and report averages."""
    print(f"Running {args.games} games...")
    player = GreedyPlayer()
    scores = []
    boards = []
    start_time = time.time()

    for game in range(args.games):
        config = build_config(args)
        if args.seed is not None:
            config.seed = args.seed + game
        engine = AlchemyEngine(config)
        stats = player.play_game(engine, max_turns=args.max_turns)
        scores.append(stats['score'])
        boards.append(stats['boards_cleared'])
        if (game + 1) % 10 == 0:
            print(f"Game {game + 1}/{args.games}: Score={stats['score']}, Boards={stats['boards_cleared']}")

    duration = time.time() - start_time
    avg_score = sum(scores) / len(scores)
    print(f"\nBenchmark Results:")
    print(f"Average Score: {avg_score:.1f} ({get_ranking(int(avg_score)).title})")
    print(f"Best Score: {max(scores)}")
    print(f"Average Boards Cleared: {sum(boards) / len(boards):.2f}")
    print(f"Time: {duration:.2f}s ({args.games / duration:.1f} games/s)")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="All That Glitters: a rune-placement puzzle")
    parser.add_argument('--verbose', action='store_true', help='Log engine transitions')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    def add_game_options(sub):
        sub.add_argument('--width', type=int, default=9, help='Grid width')
        sub.add_argument('--height', type=int, default=8, help='Grid height')
        sub.add_argument('--forge', type=int, default=3, help='Forge capacity')
        sub.add_argument('--skill-level', type=int, choices=[1, 2, 3], default=None,
                         help='1 Apprentice, 2 Adept, 3 Master')
        sub.add_argument('--seed', type=int, default=None, help='Random seed')

    demo_parser = subparsers.add_parser('demo', help='Watch the bot play a game')
    add_game_options(demo_parser)
    demo_parser.add_argument('--max-turns', type=int, default=2000, help='Stop after this many turns')
    demo_parser.add_argument('--show-every', type=int, default=10, help='Print the board every N turns')

    play_parser = subparsers.add_parser('play', help='Play in the terminal')
    add_game_options(play_parser)

    benchmark_parser = subparsers.add_parser('benchmark', help='Run many bot games')
    add_game_options(benchmark_parser)
    benchmark_parser.add_argument('--games', type=int, default=50, help='Number of games')
    benchmark_parser.add_argument('--max-turns', type=int, default=2000, help='Turn limit per game')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.command == 'demo':
        demo_game(args)
    elif args.command == 'play':
        play_game(args)
    elif args.command == 'benchmark':
        benchmark(args)
    else:
        parser.print_help()
        print("\nFor a quick demo, run: python main.py demo")


if __name__ == "__main__":
    main()
