"""Rules-engine boundary: the capability protocol the core consumes and its
python-chess implementation.

The evaluator, search and selector only ever talk to a ``RulesEngine``. They
never import ``chess`` and never inspect the position object themselves, so
any rules implementation that provides these methods can drive the engine.
"""

import enum
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol

import chess

from .errors import IllegalMoveError


class Color(enum.Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class PieceType(enum.Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


class Terminal(enum.Enum):
    NONE = "none"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    OTHER_DRAW = "other_draw"


@dataclass(frozen=True)
class TerminalStatus:
    kind: Terminal
    winner: Optional[Color] = None  # set only for checkmate

    @property
    def is_over(self) -> bool:
        return self.kind is not Terminal.NONE


ONGOING = TerminalStatus(Terminal.NONE)


@dataclass(frozen=True)
class PlacedPiece:
    file: int  # 0 = a-file
    rank: int  # 0 = first rank
    piece_type: PieceType
    color: Color


class RulesEngine(Protocol):
    def legal_moves(self, position) -> List[str]: ...

    def apply_move(self, position, move: str) -> None: ...

    def undo_move(self, position) -> None: ...

    def terminal_status(self, position) -> TerminalStatus: ...

    def side_to_move(self, position) -> Color: ...

    def board_pieces(self, position) -> Iterable[PlacedPiece]: ...

    def fen(self, position) -> str: ...

    def is_capture(self, position, move: str) -> bool: ...


_PIECE_TYPES = {
    chess.PAWN: PieceType.PAWN,
    chess.KNIGHT: PieceType.KNIGHT,
    chess.BISHOP: PieceType.BISHOP,
    chess.ROOK: PieceType.ROOK,
    chess.QUEEN: PieceType.QUEEN,
    chess.KING: PieceType.KING,
}


class ChessRules:
    """``RulesEngine`` over a ``chess.Board``; moves are UCI strings."""

    def legal_moves(self, board: chess.Board) -> List[str]:
        return [m.uci() for m in board.legal_moves]

    def apply_move(self, board: chess.Board, move: str) -> None:
        """Push a UCI move (e.g. 'e2e4'). Raises IllegalMoveError if rejected."""
        try:
            parsed = chess.Move.from_uci(move)
        except (ValueError, TypeError) as e:
            raise IllegalMoveError(f"Malformed move {move!r}") from e
        if parsed not in board.legal_moves:
            raise IllegalMoveError(f"Illegal move {move!r} in {board.fen()}")
        board.push(parsed)

    def undo_move(self, board: chess.Board) -> None:
        board.pop()

    def terminal_status(self, board: chess.Board) -> TerminalStatus:
        if board.is_checkmate():
            # The side to move is mated; the other side delivered it.
            loser = Color.WHITE if board.turn == chess.WHITE else Color.BLACK
            return TerminalStatus(Terminal.CHECKMATE, winner=loser.opponent)
        if board.is_stalemate():
            return TerminalStatus(Terminal.STALEMATE)
        if (
            board.is_insufficient_material()
            or board.is_seventyfive_moves()
            or board.is_fivefold_repetition()
            or board.halfmove_clock >= 100
            or board.is_repetition(3)
        ):
            return TerminalStatus(Terminal.OTHER_DRAW)
        return ONGOING

    def side_to_move(self, board: chess.Board) -> Color:
        return Color.WHITE if board.turn == chess.WHITE else Color.BLACK

    def board_pieces(self, board: chess.Board) -> Iterable[PlacedPiece]:
        for sq, piece in board.piece_map().items():
            yield PlacedPiece(
                file=chess.square_file(sq),
                rank=chess.square_rank(sq),
                piece_type=_PIECE_TYPES[piece.piece_type],
                color=Color.WHITE if piece.color == chess.WHITE else Color.BLACK,
            )

    def fen(self, board: chess.Board) -> str:
        return board.fen()

    def is_capture(self, board: chess.Board, move: str) -> bool:
        return board.is_capture(chess.Move.from_uci(move))
