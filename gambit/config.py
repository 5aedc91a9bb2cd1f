# gambit/config.py
from dataclasses import dataclass, field, replace
from typing import Dict, Optional
import os
import tomllib

from gambit.core.errors import ConfigError

# Defaults (centipawns). The king carries no material value.
PIECE_VALUES = {
    "PAWN": 100,
    "KNIGHT": 320,
    "BISHOP": 330,
    "ROOK": 500,
    "QUEEN": 900,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

@dataclass
class SearchConfig:
    depth: int = 3
    alpha_beta: bool = True
    randomize_ties: bool = True  # pick uniformly among equally valued root moves
    time_limit_ms: Optional[int] = None  # None means depth-only

@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    use_positional: bool = True

@dataclass
class BookConfig:
    enabled: bool = True
    path: Optional[str] = None  # TOML book replacing the built-in repertoire

@dataclass
class ApiConfig:
    engine_name: str = "Gambit"
    version: str = "1.0.0"

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    book: BookConfig = field(default_factory=BookConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    log_level: str = "INFO"
    seed: Optional[int] = None

    @staticmethod
    def load_from_toml(path: str = "gambit.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "book", "api"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if not hasattr(target, k):
                    raise ConfigError(f"Unknown option [{section}].{k} in {path}")
                setattr(target, k, v)
        for k in ("log_level", "seed"):
            if k in raw:
                setattr(cfg, k, raw[k])
        cfg.validate()
        return cfg

    def validate(self) -> "Config":
        if not isinstance(self.search.depth, int) or self.search.depth < 1:
            raise ConfigError(f"search.depth must be a positive integer, got {self.search.depth!r}")
        if self.search.time_limit_ms is not None and self.search.time_limit_ms <= 0:
            raise ConfigError(f"search.time_limit_ms must be positive, got {self.search.time_limit_ms!r}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level {self.log_level!r}")
        names = {str(k).upper() for k in self.eval.piece_values}
        missing = set(PIECE_VALUES) - names
        if missing:
            raise ConfigError(f"eval.piece_values is missing {sorted(missing)}")
        unknown = names - set(PIECE_VALUES) - {"KING"}
        if unknown:
            raise ConfigError(f"eval.piece_values has unknown pieces {sorted(unknown)}")
        for name, value in self.eval.piece_values.items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"eval.piece_values.{name} must be an integer, got {value!r}")
        return self

    def reduced_strength(self) -> "Config":
        """Material-only, one-ply tier of the same engine."""
        return replace(
            self,
            search=replace(self.search, depth=1),
            eval=replace(self.eval, use_positional=False),
        )


def _env_depth_override(cfg: Config) -> Config:
    override_depth = os.environ.get("GAMBIT_SEARCH_DEPTH")
    if override_depth:
        try:
            cfg.search.depth = int(override_depth)
        except ValueError as e:
            raise ConfigError(f"GAMBIT_SEARCH_DEPTH must be an integer: {override_depth!r}") from e
        cfg.validate()
    return cfg


# single globally importable config instance
CONFIG = _env_depth_override(
    Config.load_from_toml(os.environ.get("GAMBIT_CONFIG_TOML", "gambit.toml"))
)
