"""Move selection: opening book first, then a full-window search of every
root move.

Each root move is searched with an open (-INF, +INF) window, so the value
recorded for it is its exact minimax value at the configured depth. That
keeps the choice identical with and without alpha-beta pruning and makes
exact ties meaningful for tie-breaking.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import List, Optional

from .book import OpeningBook
from .errors import IllegalMoveError
from .rules import Color, RulesEngine
from .search import INF, SearchEngine
from .utils import format_info

log = logging.getLogger(__name__)


@dataclass
class MoveChoice:
    move: Optional[str]
    score: Optional[int] = None
    nodes: int = 0
    elapsed_ms: float = 0.0
    source: str = "none"  # "book", "search", "forced" or "none"


class MoveSelector:
    def __init__(
        self,
        rules: RulesEngine,
        search: SearchEngine,
        book: Optional[OpeningBook] = None,
        rng: Optional[random.Random] = None,
        randomize_ties: bool = True,
        time_limit_ms: Optional[int] = None,
    ):
        self.rules = rules
        self.search = search
        self.book = book
        self.rng = rng or random.Random()
        self.randomize_ties = randomize_ties
        self.time_limit_ms = time_limit_ms

    def get_best_move(self, position) -> Optional[str]:
        return self.choose(position).move

    def choose(self, position) -> MoveChoice:
        start = time.perf_counter()

        book_move = self._book_move(position)
        if book_move is not None:
            log.info("Book move: %s", book_move)
            return MoveChoice(book_move, elapsed_ms=_ms_since(start), source="book")

        moves = self.rules.legal_moves(position)
        if not moves:
            return MoveChoice(None, elapsed_ms=_ms_since(start))
        if len(moves) == 1:
            return MoveChoice(moves[0], elapsed_ms=_ms_since(start), source="forced")

        maximizing = self.rules.side_to_move(position) is Color.WHITE
        self.search.reset()
        log.debug("Searching %d root moves to depth %d", len(moves), self.search.max_depth)
        best_value = -INF if maximizing else INF
        best_moves: List[str] = []

        for move in self.search.order_moves(position, moves):
            self.rules.apply_move(position, move)
            try:
                value = self.search.search(position, self.search.max_depth - 1, -INF, INF, not maximizing)
            finally:
                self.rules.undo_move(position)

            if value == best_value:
                best_moves.append(move)
            elif (value > best_value) if maximizing else (value < best_value):
                best_value = value
                best_moves = [move]

            if self._out_of_time(start):
                log.warning("Time limit of %d ms reached, stopping after %s", self.time_limit_ms, move)
                break

        log.debug("Root search done: %d moves tie at %s after %d nodes", len(best_moves), best_value, self.search.nodes)
        if self.randomize_ties and len(best_moves) > 1:
            best = self.rng.choice(best_moves)
        else:
            best = best_moves[0]

        choice = MoveChoice(best, best_value, self.search.nodes, _ms_since(start), "search")
        log.info(format_info(choice))
        return choice

    def _book_move(self, position) -> Optional[str]:
        if self.book is None:
            return None
        move = self.book.lookup(self.rules, position, self.rng)
        if move is None:
            return None
        # A stale book entry must never reach the caller.
        try:
            self.rules.apply_move(position, move)
        except IllegalMoveError:
            log.warning("Book move %s rejected by the rules engine, falling back to search", move)
            return None
        self.rules.undo_move(position)
        return move

    def _out_of_time(self, start: float) -> bool:
        return self.time_limit_ms is not None and _ms_since(start) >= self.time_limit_ms


def _ms_since(start: float) -> float:
    return (time.perf_counter() - start) * 1000
