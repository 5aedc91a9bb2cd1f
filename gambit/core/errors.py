"""Exceptions raised by the engine core."""


class GambitError(Exception):
    """Base class for every engine error."""


class IllegalMoveError(GambitError, ValueError):
    """The rules engine rejected a move token as malformed or illegal."""


class UnclassifiedPositionError(GambitError):
    """The rules engine could not classify a position's terminal status."""


class ConfigError(GambitError, ValueError):
    """A configuration value is invalid."""
