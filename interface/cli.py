"""Console front end: engine self-play or a human-vs-engine game.

    python -m interface.cli selfplay [--fen FEN] [--max-moves N] [--depth D] [--seed S]
    python -m interface.cli play [--color white|black] [--depth D]
"""

import argparse
import logging
import random
import sys

import chess

from gambit.config import CONFIG
from gambit.main import Engine

log = logging.getLogger(__name__)

MAX_MOVES = 200


def selfplay(fen=None, max_moves=MAX_MOVES, depth=None, seed=None, use_book=True):
    """Play the engine against itself. Returns (engine, plies_played)."""
    engine = Engine(fen, rng=random.Random(seed), depth=depth, use_book=use_book)
    plies = 0
    while not engine.is_game_over() and plies < max_moves:
        move = engine.get_best_move()
        if move is None:
            log.warning("No move found in %s", engine.get_fen())
            break
        engine.make_move(move)
        plies += 1
    return engine, plies


def play(human_color=chess.WHITE, depth=None):
    engine = Engine(depth=depth)
    while not engine.is_game_over():
        engine.print_board()
        print("----------------------------")
        if engine.board.turn == human_color:
            user_move = input("Enter your move (uci format, e2e4): ").strip()
            if user_move.lower() in ("quit", "exit"):
                return
            if not engine.make_move(user_move):
                print("Illegal move, try again.")
        else:
            choice = engine.choose()
            print(f"Engine plays: {choice.move} ({choice.source}, eval {choice.score})")
            engine.make_move(choice.move)

    engine.print_board()
    print("Game Over")
    print(f"Result: {engine.result()}")


def main(argv=None):
    parser = argparse.ArgumentParser(prog="gambit")
    sub = parser.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("selfplay", help="engine vs engine")
    sp.add_argument("--fen", default=None)
    sp.add_argument("--max-moves", type=int, default=MAX_MOVES)
    sp.add_argument("--depth", type=int, default=None)
    sp.add_argument("--seed", type=int, default=CONFIG.seed)
    sp.add_argument("--no-book", action="store_true")

    pp = sub.add_parser("play", help="human vs engine")
    pp.add_argument("--color", choices=("white", "black"), default="white")
    pp.add_argument("--depth", type=int, default=None)

    args = parser.parse_args(argv)
    logging.basicConfig(level=CONFIG.log_level.upper())

    if args.command == "play":
        play(chess.WHITE if args.color == "white" else chess.BLACK, args.depth)
        return 0

    engine, plies = selfplay(args.fen, args.max_moves, args.depth, args.seed, not args.no_book)
    board = engine.board
    print(f"Total plies: {plies}")
    print(f"Final FEN: {board.fen()}")
    if board.is_checkmate():
        print(f"Result: Checkmate! Winner: {'Black' if board.turn == chess.WHITE else 'White'}")
    elif engine.is_game_over():
        print("Result: Draw")
    else:
        print("Result: Unknown / Max moves reached")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
