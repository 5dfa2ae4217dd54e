"""Game engines: the rule sets of the hub's arcade games.

Pure Python state machines with no I/O. A client (or a test) drives them
through ``start``/``pause``/``resume``/``reset`` and the game-specific
moves, then posts ``score_submission()`` to ``/api/scores``.
"""
from gamehub.games import GameId, normalize_game_id

from .base import BaseGame, GameState, InvalidTransition
from .snake import SnakeGame
from .memory import MemoryGame
from .tetris import TetrisGame
from .candycrush import CandyCrushGame

ENGINES = {
    GameId.SNAKE: SnakeGame,
    GameId.MEMORY: MemoryGame,
    GameId.TETRIS: TetrisGame,
    GameId.CANDYCRUSH: CandyCrushGame,
}


def new_game(game, **kwargs) -> BaseGame:
    """Build the engine for a game id (legacy spellings accepted)."""
    return ENGINES[normalize_game_id(game)](**kwargs)
