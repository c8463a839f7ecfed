"""
Exceptions raised at the boundaries of the application.

NOTE: Chess rule violations (illegal moves, moving out of turn, ...) are NOT exceptions.
The GameController reports those by returning False and leaving the state untouched.
"""


class GameError(Exception):
    """Base class for everything the application raises on purpose"""


class InvalidRequestError(GameError):
    """Input coming in through the service layer cannot be interpreted"""


class InvalidPositionError(GameError):
    """A FEN piece placement could not be turned into a Board"""


class ConfigurationError(GameError):
    """Settings supplied through the environment are not usable"""
