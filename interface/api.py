"""FastAPI REST interface for the move recommender.

Stateless per request: the client sends the full FEN each time and the
engine searches a private board built from it.
"""

import logging
import random
from typing import List, Optional

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from gambit.config import CONFIG
from gambit.core.book import OpeningBook
from gambit.core.rules import ChessRules
from gambit.main import build_selector

logging.basicConfig(level=CONFIG.log_level.upper())
log = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.api.engine_name, version=CONFIG.api.version)

_rules = ChessRules()
_book = OpeningBook.from_toml(CONFIG.book.path) if CONFIG.book.path else OpeningBook()


class BestMoveRequest(BaseModel):
    fen: str = chess.STARTING_FEN
    depth: Optional[int] = Field(default=None, ge=1, le=6)
    use_book: bool = True
    seed: Optional[int] = None


class BestMoveResponse(BaseModel):
    move: Optional[str]
    san: Optional[str]
    score: Optional[int]
    nodes: int
    source: str
    elapsed_ms: float
    fen: str


class FenRequest(BaseModel):
    fen: str


def _parse_board(fen: str) -> chess.Board:
    try:
        board = chess.Board(fen)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {e}")
    if not board.is_valid():
        raise HTTPException(status_code=400, detail=f"Illegal position: {board.status()!r}")
    return board


@app.get("/health")
def health():
    return {"status": "ok", "engine": CONFIG.api.engine_name, "depth": CONFIG.search.depth}


@app.post("/bestmove", response_model=BestMoveResponse)
def best_move(req: BestMoveRequest):
    board = _parse_board(req.fen)
    rng = random.Random(req.seed if req.seed is not None else CONFIG.seed)
    selector = build_selector(rng=rng, book=_book, use_book=req.use_book, depth=req.depth)

    choice = selector.choose(board)
    san = board.san(chess.Move.from_uci(choice.move)) if choice.move else None
    return BestMoveResponse(
        move=choice.move,
        san=san,
        score=choice.score,
        nodes=choice.nodes,
        source=choice.source,
        elapsed_ms=round(choice.elapsed_ms, 2),
        fen=board.fen(),
    )


@app.post("/book")
def book_candidates(req: FenRequest):
    board = _parse_board(req.fen)
    moves: List[str] = _book.candidates(_rules, board)
    return {"fen": board.fen(), "candidates": sorted(set(moves)), "weights": {m: moves.count(m) for m in set(moves)}}
