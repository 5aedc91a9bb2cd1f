"""Curated opening book keyed by normalized FEN.

Keys keep only piece placement, side to move and castling rights, so the
en-passant square and the move counters never cause a miss. Candidate lists
may repeat a move to make it more likely; a lookup draws uniformly from the
list. Moves are UCI tokens, the notation the rules engine applies.
"""

import logging
import random
import tomllib
from typing import Dict, List, Mapping, Optional, Sequence

from .rules import RulesEngine

log = logging.getLogger(__name__)


def normalize_fen(fen: str) -> str:
    return " ".join(fen.split()[:3])


DEFAULT_BOOK: Dict[str, List[str]] = {
    # ------------ 1. (White) ------------ #
    "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq": [
        "e2e4", "e2e4", "e2e4", "e2e4",  # King's Pawn
        "d2d4", "d2d4", "d2d4",          # Queen's Pawn
        "g1f3", "g1f3",                  # Reti / Zukertort
        "c2c4",                          # English
    ],
    # ------------ 1. (Black) ------------ #
    # 1. e4
    "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq": [
        "e7e5", "e7e5", "e7e5",  # Open Game
        "c7c5", "c7c5", "c7c5",  # Sicilian
        "e7e6", "e7e6",          # French
        "c7c6",                  # Caro-Kann
        "d7d5",                  # Scandinavian
        "d7d6",                  # Pirc
        "g8f6",                  # Alekhine
    ],
    # 1. d4
    "rnbqkbnr/pppppppp/8/8/3P4/8/PPP1PPPP/RNBQKBNR b KQkq": [
        "d7d5", "d7d5", "d7d5",
        "g8f6", "g8f6",
        "f7f5",                  # Dutch
        "e7e6",
    ],
    # 1. Nf3
    "rnbqkbnr/pppppppp/8/8/8/5N2/PPPPPPPP/RNBQKB1R b KQkq": [
        "d7d5", "g8f6", "c7c5", "e7e6", "g7g6",
    ],
    # 1. c4
    "rnbqkbnr/pppppppp/8/8/2P5/8/PP1PPPPP/RNBQKBNR b KQkq": [
        "e7e5", "c7c5", "g8f6", "e7e6",
    ],
    # ------------ 2. (White) ------------ #
    # 1. e4 e5
    "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq": [
        "g1f3", "g1f3", "g1f3",
        "b1c3",                  # Vienna
        "f2f4",                  # King's Gambit
        "f1c4",                  # Bishop's Opening
    ],
    # 1. e4 c5
    "rnbqkbnr/pp1ppppp/8/2p5/4P3/8/PPPP1PPP/RNBQKBNR w KQkq": [
        "g1f3", "g1f3", "g1f3",  # Open Sicilian
        "b1c3",                  # Closed
        "c2c3",                  # Alapin
        "d2d4",                  # Smith-Morra
    ],
    # 1. e4 e6
    "rnbqkbnr/pppp1ppp/4p3/8/4P3/8/PPPP1PPP/RNBQKBNR w KQkq": [
        "d2d4", "d2d4", "d2d4",
        "d2d3",                  # King's Indian Attack
    ],
    # 1. d4 d5
    "rnbqkbnr/ppp1pppp/8/3p4/3P4/8/PPP1PPPP/RNBQKBNR w KQkq": [
        "c2c4", "c2c4", "c2c4",  # Queen's Gambit
        "g1f3",
        "c1f4",                  # London
    ],
    # 1. d4 Nf6
    "rnbqkb1r/pppppppp/5n2/8/3P4/8/PPP1PPPP/RNBQKBNR w KQkq": [
        "c2c4", "c2c4", "c2c4",
        "g1f3",
        "c1g5",
    ],
    # ------------ 2. (Black) ------------ #
    # 1. e4 e5 2. Nf3
    "rnbqkbnr/pppp1ppp/8/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq": [
        "b8c6", "b8c6", "b8c6", "b8c6",
        "d7d6", "d7d6",          # Philidor
        "g8f6",                  # Petrov
        "f7f6",                  # Damiano
    ],
    # 1. e4 c5 2. Nf3
    "rnbqkbnr/pp1ppppp/8/2p5/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq": [
        "d7d6", "d7d6",
        "b8c6",
        "e7e6",
    ],
    # 1. d4 d5 2. c4
    "rnbqkbnr/ppp1pppp/8/3p4/2PP4/8/PP2PPPP/RNBQKBNR b KQkq": [
        "e7e6", "e7e6",          # QGD
        "c7c6",                  # Slav
        "d5c4",                  # QGA
    ],
    # ------------ 3. (White) ------------ #
    # 1. e4 e5 2. Nf3 Nc6
    "r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq": [
        "f1b5", "f1b5",          # Ruy Lopez
        "f1c4", "f1c4",          # Italian
        "d2d4",                  # Scotch
    ],
    # 1. e4 e6 2. d4 d5
    "rnbqkbnr/ppp2ppp/4p3/3p4/3PP3/8/PPP2PPP/RNBQKBNR w KQkq": [
        "e4e5",                  # Advance
        "b1c3",                  # Classical
        "b1d2",                  # Tarrasch
        "e4d5",                  # Exchange
    ],
}


class OpeningBook:
    def __init__(self, entries: Optional[Mapping[str, Sequence[str]]] = None):
        source = DEFAULT_BOOK if entries is None else entries
        self._entries: Dict[str, List[str]] = {}
        for fen, moves in source.items():
            self._entries.setdefault(normalize_fen(fen), []).extend(moves)

    @classmethod
    def from_toml(cls, path: str) -> "OpeningBook":
        """Load a book from a ``[positions]`` table mapping FEN to UCI moves."""
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        positions = raw.get("positions", {})
        log.info("Loaded %d book positions from %s", len(positions), path)
        return cls(positions)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, fen: str) -> bool:
        return bool(self._entries.get(normalize_fen(fen)))

    def candidates(self, rules: RulesEngine, position) -> List[str]:
        return list(self._entries.get(normalize_fen(rules.fen(position)), []))

    def lookup(self, rules: RulesEngine, position, rng: Optional[random.Random] = None) -> Optional[str]:
        """Return a weighted-random candidate for ``position``, or None on a miss."""
        moves = self._entries.get(normalize_fen(rules.fen(position)))
        if not moves:
            return None
        return (rng or random.Random()).choice(moves)
