"""
Integration test suite for the gambit move recommender.

Tests components working together end-to-end:
- Full game simulations (engine vs engine)
- Engine facade (board ownership, move validation)
- Configuration (TOML merge, env override, validation, strength tiers)
- FastAPI REST API
- Console self-play
"""

import random

import chess
import pytest

from gambit.config import CONFIG, Config, _env_depth_override
from gambit.core.book import DEFAULT_BOOK, OpeningBook, normalize_fen
from gambit.core.errors import ConfigError
from gambit.core.rules import ChessRules
from gambit.main import Engine, build_selector

START_MOVES = set(DEFAULT_BOOK[normalize_fen(chess.STARTING_FEN)])


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE — FULL GAME SIMULATIONS
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    """The engine plays games without producing illegal moves."""

    def test_engine_vs_engine_legal_moves(self):
        engine = Engine(rng=random.Random(5), depth=1)
        plies = 0
        while not engine.is_game_over() and plies < 60:
            move = engine.get_best_move()
            assert move is not None
            assert move in ChessRules().legal_moves(engine.board), f"Illegal move {move} at ply {plies}"
            assert engine.make_move(move)
            plies += 1
        assert plies > 8

    def test_engine_plays_from_midgame(self):
        fen = "r1bqkb1r/pppppppp/2n2n2/8/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3"
        engine = Engine(fen, rng=random.Random(1), depth=2)
        for _ in range(8):
            if engine.is_game_over():
                break
            move = engine.get_best_move()
            assert engine.make_move(move)
        assert len(engine.move_history) > 0

    def test_engine_alternating_colors(self):
        engine = Engine(rng=random.Random(2), depth=1)
        for i in range(10):
            expected_turn = chess.WHITE if i % 2 == 0 else chess.BLACK
            assert engine.board.turn == expected_turn
            assert engine.make_move(engine.get_best_move())

    def test_book_then_search_transition(self):
        engine = Engine(rng=random.Random(9), depth=1)
        sources = []
        for _ in range(12):
            choice = engine.choose()
            sources.append(choice.source)
            engine.make_move(choice.move)
        assert sources[0] == "book"
        assert "search" in sources


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE FACADE
# ════════════════════════════════════════════════════════════════════════════


class TestEngineFacade:
    def test_initial_position(self):
        assert Engine().get_fen() == chess.STARTING_FEN

    def test_make_legal_move(self):
        engine = Engine()
        assert engine.make_move("e2e4") is True
        assert engine.move_history == ["e2e4"]

    def test_make_illegal_move(self):
        engine = Engine()
        assert engine.make_move("e2e5") is False
        assert engine.make_move("zzzz") is False
        assert engine.make_move("") is False
        assert engine.get_fen() == chess.STARTING_FEN

    def test_undo_move(self):
        engine = Engine()
        engine.make_move("e2e4")
        engine.undo_move()
        engine.undo_move()  # empty history is a no-op
        assert engine.get_fen() == chess.STARTING_FEN

    def test_set_fen(self):
        engine = Engine()
        engine.make_move("e2e4")
        fen = "8/8/8/8/8/8/8/4K2k w - - 0 1"
        engine.set_fen(fen)
        assert engine.get_fen() == fen
        assert engine.move_history == []

    def test_best_move_does_not_mutate_board(self):
        fen = "r1bqk2r/pppp1ppp/2n2n2/2b1p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"
        engine = Engine(fen, depth=2)
        engine.get_best_move()
        assert engine.get_fen() == fen

    def test_start_position_uses_book(self):
        engine = Engine(rng=random.Random(0), depth=3)
        assert engine.get_best_move() in START_MOVES

    def test_game_over_and_result(self):
        engine = Engine("rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3")
        assert engine.is_game_over()
        assert engine.result() == "0-1"
        assert engine.get_best_move() is None


# ════════════════════════════════════════════════════════════════════════════
#  CONFIGURATION
# ════════════════════════════════════════════════════════════════════════════


class TestConfig:
    def test_defaults(self):
        cfg = Config()
        assert cfg.search.depth == 3
        assert cfg.search.alpha_beta is True
        assert cfg.eval.use_positional is True
        assert cfg.book.enabled is True
        assert cfg.validate() is cfg

    def test_missing_file_gives_defaults(self, tmp_path):
        cfg = Config.load_from_toml(str(tmp_path / "absent.toml"))
        assert cfg == Config()

    def test_load_from_toml(self, tmp_path):
        path = tmp_path / "gambit.toml"
        path.write_text(
            "log_level = \"DEBUG\"\n"
            "seed = 11\n"
            "[search]\n"
            "depth = 2\n"
            "randomize_ties = false\n"
            "[eval]\n"
            "use_positional = false\n"
            "[book]\n"
            "enabled = false\n"
        )
        cfg = Config.load_from_toml(str(path))
        assert cfg.search.depth == 2
        assert cfg.search.randomize_ties is False
        assert cfg.eval.use_positional is False
        assert cfg.book.enabled is False
        assert cfg.log_level == "DEBUG"
        assert cfg.seed == 11

    def test_unknown_option_rejected(self, tmp_path):
        path = tmp_path / "gambit.toml"
        path.write_text("[search]\nhash_size_mb = 64\n")
        with pytest.raises(ConfigError):
            Config.load_from_toml(str(path))

    def test_invalid_depth_rejected(self, tmp_path):
        path = tmp_path / "gambit.toml"
        path.write_text("[search]\ndepth = 0\n")
        with pytest.raises(ConfigError):
            Config.load_from_toml(str(path))

    def test_unknown_piece_value_rejected(self, tmp_path):
        path = tmp_path / "gambit.toml"
        path.write_text(
            "[eval]\n"
            "piece_values = { PAWN = 100, KNIGHT = 320, BISHOP = 330, ROOK = 500, QUEEN = 900, PAWNS = 1 }\n"
        )
        with pytest.raises(ConfigError, match="PAWNS"):
            Config.load_from_toml(str(path))

    def test_non_integer_piece_value_rejected(self):
        cfg = Config()
        cfg.eval.piece_values["QUEEN"] = "nine hundred"
        with pytest.raises(ConfigError):
            cfg.validate()

    def test_king_piece_value_accepted(self):
        cfg = Config()
        cfg.eval.piece_values["KING"] = 0
        assert cfg.validate() is cfg

    def test_shared_book_is_used(self):
        book = OpeningBook({chess.STARTING_FEN: ["b1c3"]})
        selector = build_selector(Config(), rng=random.Random(0), book=book)
        assert selector.book is book
        assert selector.get_best_move(chess.Board()) == "b1c3"
        assert build_selector(Config(), book=book, use_book=False).book is None

    def test_invalid_log_level_rejected(self):
        cfg = Config(log_level="LOUD")
        with pytest.raises(ConfigError):
            cfg.validate()

    def test_env_depth_override(self, monkeypatch):
        monkeypatch.setenv("GAMBIT_SEARCH_DEPTH", "2")
        assert _env_depth_override(Config()).search.depth == 2

    def test_env_depth_override_invalid(self, monkeypatch):
        monkeypatch.setenv("GAMBIT_SEARCH_DEPTH", "deep")
        with pytest.raises(ConfigError):
            _env_depth_override(Config())

    def test_reduced_strength(self):
        cfg = Config()
        weak = cfg.reduced_strength()
        assert weak.search.depth == 1
        assert weak.eval.use_positional is False
        assert cfg.search.depth == 3
        assert cfg.eval.use_positional is True

    def test_reduced_strength_still_finds_mate(self):
        selector = build_selector(Config().reduced_strength(), rng=random.Random(0))
        assert selector.search.max_depth == 1
        assert selector.get_best_move(chess.Board("6k1/5ppp/8/8/8/8/8/R3K3 w - - 0 1")) == "a1a8"

    def test_book_path_from_config(self, tmp_path):
        path = tmp_path / "book.toml"
        path.write_text('[positions]\n"%s" = ["g1f3"]\n' % chess.STARTING_FEN)
        cfg = Config()
        cfg.book.path = str(path)
        selector = build_selector(cfg, rng=random.Random(0))
        assert selector.get_best_move(chess.Board()) == "g1f3"

    def test_book_disabled(self):
        cfg = Config()
        cfg.book.enabled = False
        assert build_selector(cfg).book is None
        assert build_selector(cfg, use_book=True).book is not None


# ════════════════════════════════════════════════════════════════════════════
#  FASTAPI REST API
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app

        self.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["depth"] == CONFIG.search.depth

    def test_bestmove_start_uses_book(self):
        response = self.client.post("/bestmove", json={"seed": 4})
        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "book"
        assert data["move"] in START_MOVES
        assert data["fen"] == chess.STARTING_FEN

    def test_bestmove_without_book(self):
        response = self.client.post("/bestmove", json={"use_book": False, "depth": 1, "seed": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "search"
        assert data["nodes"] > 0
        assert chess.Move.from_uci(data["move"]) in chess.Board().legal_moves
        assert data["san"] == chess.Board().san(chess.Move.from_uci(data["move"]))

    def test_bestmove_finds_mate(self):
        fen = "6k1/5ppp/8/8/8/8/8/R3K3 w - - 0 1"
        response = self.client.post("/bestmove", json={"fen": fen, "depth": 2})
        data = response.json()
        assert data["move"] == "a1a8"
        assert data["san"] == "Ra8#"

    def test_bestmove_game_over(self):
        fen = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        data = self.client.post("/bestmove", json={"fen": fen}).json()
        assert data["move"] is None
        assert data["source"] == "none"

    def test_bestmove_invalid_fen(self):
        response = self.client.post("/bestmove", json={"fen": "invalid"})
        assert response.status_code == 400

    def test_bestmove_illegal_position(self):
        # Black is in check with White to move.
        response = self.client.post("/bestmove", json={"fen": "4k3/4R3/8/8/8/8/8/4K3 w - - 0 1"})
        assert response.status_code == 400

    def test_bestmove_empty_board(self):
        response = self.client.post("/bestmove", json={"fen": "8/8/8/8/8/8/8/8 w - - 0 1"})
        assert response.status_code == 400

    def test_book_illegal_position(self):
        response = self.client.post("/book", json={"fen": "8/8/8/8/8/8/8/8 w - - 0 1"})
        assert response.status_code == 400

    def test_bestmove_uses_shared_book(self, monkeypatch):
        from interface import api

        monkeypatch.setattr(api, "_book", OpeningBook({chess.STARTING_FEN: ["b1c3"]}))
        data = self.client.post("/bestmove", json={"seed": 0}).json()
        assert data["source"] == "book"
        assert data["move"] == "b1c3"

    def test_bestmove_depth_bounds(self):
        response = self.client.post("/bestmove", json={"depth": 0})
        assert response.status_code == 422

    def test_book_candidates(self):
        response = self.client.post("/book", json={"fen": chess.STARTING_FEN})
        assert response.status_code == 200
        data = response.json()
        assert set(data["candidates"]) == START_MOVES
        assert data["weights"]["e2e4"] == 4

    def test_book_miss(self):
        data = self.client.post("/book", json={"fen": "8/8/4k3/8/8/4K3/8/1Q6 w - - 0 1"}).json()
        assert data["candidates"] == []


# ════════════════════════════════════════════════════════════════════════════
#  CONSOLE SELF-PLAY
# ════════════════════════════════════════════════════════════════════════════


class TestSelfPlay:
    def test_selfplay_delivers_mate(self, capsys):
        from interface.cli import main

        code = main(["selfplay", "--fen", "6k1/5ppp/8/8/8/8/8/R3K3 w - - 0 1", "--depth", "1"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Checkmate! Winner: White" in out
        assert "Total plies: 1" in out

    def test_selfplay_move_cap(self):
        from interface.cli import selfplay

        engine, plies = selfplay(max_moves=6, depth=1, seed=3)
        assert plies == 6
        assert len(engine.move_history) == 6

    def test_selfplay_reports_unfinished(self, capsys):
        from interface.cli import main

        code = main(["selfplay", "--max-moves", "2", "--depth", "1", "--seed", "1"])
        assert code == 1
        assert "Max moves reached" in capsys.readouterr().out
