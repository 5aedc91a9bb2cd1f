"""Core engine components: rules boundary, evaluator, search, book and selector."""

from .book import DEFAULT_BOOK, OpeningBook, normalize_fen
from .errors import ConfigError, GambitError, IllegalMoveError, UnclassifiedPositionError
from .evaluator import Evaluator
from .rules import ChessRules, Color, PieceType, PlacedPiece, RulesEngine, Terminal, TerminalStatus
from .search import INF, SearchEngine, order_moves
from .selector import MoveChoice, MoveSelector
from .tables import MATE_SCORE
