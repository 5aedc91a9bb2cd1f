"""Depth-bounded minimax with alpha-beta pruning and capture-first ordering.

Scores are always White-relative: White is the maximizing side and Black the
minimizing side. Every move applied during a search is undone before the
call returns, so the caller's position is left exactly as it was given.
"""

from typing import List, Optional, Sequence

from .evaluator import Evaluator
from .rules import RulesEngine
from .tables import MATE_SCORE

INF = 10 * MATE_SCORE


def order_moves(rules: RulesEngine, position, moves: Sequence[str]) -> List[str]:
    """Captures first. The sort is stable, so ties keep the input order."""
    return sorted(moves, key=lambda m: 0 if rules.is_capture(position, m) else 1)


class SearchEngine:
    def __init__(
        self,
        rules: RulesEngine,
        evaluator: Optional[Evaluator] = None,
        depth: int = 3,
        alpha_beta: bool = True,
    ):
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")
        self.rules = rules
        self.evaluator = evaluator or Evaluator(rules)
        self.max_depth = depth
        self.alpha_beta = alpha_beta
        self.nodes = 0

    def reset(self):
        self.nodes = 0

    def order_moves(self, position, moves: Sequence[str]) -> List[str]:
        return order_moves(self.rules, position, moves)

    def search(self, position, depth: int, alpha: int, beta: int, maximizing: bool) -> int:
        self.nodes += 1

        if depth <= 0:
            return self.evaluator.evaluate(position)

        if self.rules.terminal_status(position).is_over:
            return self._leaf_score(position, depth)

        moves = self.rules.legal_moves(position)
        if not moves:
            return self._leaf_score(position, depth)

        if maximizing:
            max_eval = -INF
            for move in self.order_moves(position, moves):
                value = self._child(position, move, depth - 1, alpha, beta, False)
                max_eval = max(max_eval, value)
                alpha = max(alpha, value)
                if self.alpha_beta and beta <= alpha:
                    break
            return max_eval

        min_eval = INF
        for move in self.order_moves(position, moves):
            value = self._child(position, move, depth - 1, alpha, beta, True)
            min_eval = min(min_eval, value)
            beta = min(beta, value)
            if self.alpha_beta and beta <= alpha:
                break
        return min_eval

    def _child(self, position, move: str, depth: int, alpha: int, beta: int, maximizing: bool) -> int:
        # IllegalMoveError from apply_move propagates: the search is aborted.
        self.rules.apply_move(position, move)
        try:
            return self.search(position, depth, alpha, beta, maximizing)
        finally:
            self.rules.undo_move(position)

    def _leaf_score(self, position, depth: int) -> int:
        score = self.evaluator.evaluate(position)
        # A mate found with more depth remaining is a faster mate.
        if score >= MATE_SCORE:
            return score + depth
        if score <= -MATE_SCORE:
            return score - depth
        return score
