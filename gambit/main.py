"""Engine facade: a board owned by the caller plus a configured move selector."""

import random
from typing import Optional

import chess

from gambit.config import CONFIG, Config
from gambit.core.book import OpeningBook
from gambit.core.evaluator import Evaluator
from gambit.core.rules import ChessRules
from gambit.core.search import SearchEngine
from gambit.core.selector import MoveChoice, MoveSelector


def build_selector(
    config: Optional[Config] = None,
    rng: Optional[random.Random] = None,
    use_book: Optional[bool] = None,
    depth: Optional[int] = None,
    book: Optional[OpeningBook] = None,
) -> MoveSelector:
    cfg = config or CONFIG
    rules = ChessRules()
    evaluator = Evaluator(rules, cfg.eval.piece_values, cfg.eval.use_positional)
    search = SearchEngine(
        rules,
        evaluator,
        depth=depth or cfg.search.depth,
        alpha_beta=cfg.search.alpha_beta,
    )

    book_enabled = cfg.book.enabled if use_book is None else use_book
    if not book_enabled:
        book = None
    elif book is None:
        book = OpeningBook.from_toml(cfg.book.path) if cfg.book.path else OpeningBook()

    return MoveSelector(
        rules,
        search,
        book=book,
        rng=rng or random.Random(cfg.seed),
        randomize_ties=cfg.search.randomize_ties,
        time_limit_ms=cfg.search.time_limit_ms,
    )


class Engine:
    def __init__(self, fen: Optional[str] = None, config: Optional[Config] = None,
                 rng: Optional[random.Random] = None, **selector_options):
        self.board = chess.Board(fen) if fen else chess.Board()
        self.selector = build_selector(config, rng, **selector_options)
        self.move_history = []

    def set_fen(self, fen: str):
        """Set board state from a FEN string; raises ValueError if invalid."""
        self.board.set_fen(fen)
        self.move_history.clear()

    def get_fen(self) -> str:
        return self.board.fen()

    def choose(self) -> MoveChoice:
        return self.selector.choose(self.board)

    def get_best_move(self) -> Optional[str]:
        return self.selector.get_best_move(self.board)

    def make_move(self, move_uci: str) -> bool:
        """Push a UCI move (e.g. 'e2e4'). Returns True if legal."""
        try:
            move = chess.Move.from_uci(move_uci)
        except ValueError:
            return False
        if move not in self.board.legal_moves:
            return False
        self.board.push(move)
        self.move_history.append(move_uci)
        return True

    def undo_move(self):
        if self.move_history:
            self.board.pop()
            self.move_history.pop()

    def is_game_over(self) -> bool:
        return self.selector.rules.terminal_status(self.board).is_over

    def result(self) -> str:
        return self.board.result(claim_draw=True)

    def print_board(self):
        print(self.board)
