"""Canonical game identifiers shared by the client and the server."""
from enum import Enum


class GameId(str, Enum):
    SNAKE = 'snake'
    MEMORY = 'memory'
    TETRIS = 'tetris'
    CANDYCRUSH = 'candycrush'

    def __str__(self):
        return self.value


def normalize_game_id(value) -> GameId:
    """Map a client-supplied game name onto a :class:`GameId`.

    Legacy spellings such as ``candy-crush`` or ``Candy_Crush`` resolve to the
    same member. Raises ``ValueError`` for anything else.
    """
    if isinstance(value, GameId):
        return value
    if not isinstance(value, str):
        raise ValueError('game must be a string')
    key = value.strip().lower().replace('-', '').replace('_', '').replace(' ', '')
    try:
        return GameId(key)
    except ValueError:
        allowed = ', '.join(g.value for g in GameId)
        raise ValueError(f"unknown game '{value}' (expected one of: {allowed})") from None
