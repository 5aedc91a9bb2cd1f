"""Static evaluator: material plus piece-square tables, scored from White's side."""

from typing import Dict, Optional

from .errors import UnclassifiedPositionError
from .rules import Color, PieceType, RulesEngine, Terminal, TerminalStatus
from .tables import DRAW_SCORE, MATE_SCORE, PIECE_VALUES, PST, piece_values_from_names


class Evaluator:
    def __init__(
        self,
        rules: RulesEngine,
        piece_values: Optional[Dict[str, int]] = None,
        use_positional: bool = True,
    ):
        self.rules = rules
        self.piece_values = (
            piece_values_from_names(piece_values) if piece_values else dict(PIECE_VALUES)
        )
        self.piece_values[PieceType.KING] = 0
        self.use_positional = use_positional

    def evaluate(self, position) -> int:
        """Return static eval in centipawns, positive favors White."""
        status = self.rules.terminal_status(position)
        if not isinstance(status, TerminalStatus) or not isinstance(status.kind, Terminal):
            raise UnclassifiedPositionError(f"Rules engine returned {status!r}")

        if status.kind is Terminal.CHECKMATE:
            if status.winner is Color.WHITE:
                return MATE_SCORE
            if status.winner is Color.BLACK:
                return -MATE_SCORE
            raise UnclassifiedPositionError("Checkmate reported without a winner")
        if status.kind in (Terminal.STALEMATE, Terminal.OTHER_DRAW):
            return DRAW_SCORE

        score = 0
        for piece in self.rules.board_pieces(position):
            value = self.piece_values[piece.piece_type]
            if self.use_positional:
                value += self.positional_bonus(piece.piece_type, piece.color, piece.file, piece.rank)
            if piece.color is Color.WHITE:
                score += value
            else:
                score -= value
        return score

    @staticmethod
    def positional_bonus(piece_type: PieceType, color: Color, file: int, rank: int) -> int:
        # Table row 0 is the eighth rank; Black reads the table rank-mirrored.
        row = 7 - rank if color is Color.WHITE else rank
        return PST[piece_type][row][file]
