import random
from enum import Enum
from typing import Optional

from gamehub.games import GameId


class GameState(str, Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    PAUSED = 'paused'
    GAME_OVER = 'game_over'


class InvalidTransition(Exception):
    """Raised when a lifecycle call does not apply to the current state."""


class BaseGame:
    """Lifecycle shared by every engine.

    idle -> running -> (paused <-> running) -> game_over -> idle (reset).
    Subclasses implement ``_setup`` to build a fresh board; moves are
    ignored unless the game is running.
    """

    game_id: GameId = None

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.state = GameState.IDLE
        self.score = 0
        self._setup()

    def _setup(self):
        raise NotImplementedError

    @property
    def is_running(self) -> bool:
        return self.state == GameState.RUNNING

    @property
    def is_over(self) -> bool:
        return self.state == GameState.GAME_OVER

    def start(self):
        if self.state != GameState.IDLE:
            raise InvalidTransition(f"cannot start from {self.state.value}")
        self.state = GameState.RUNNING

    def pause(self):
        if self.state != GameState.RUNNING:
            raise InvalidTransition(f"cannot pause from {self.state.value}")
        self.state = GameState.PAUSED

    def resume(self):
        if self.state != GameState.PAUSED:
            raise InvalidTransition(f"cannot resume from {self.state.value}")
        self.state = GameState.RUNNING

    def toggle_pause(self):
        if self.state == GameState.RUNNING:
            self.pause()
        else:
            self.resume()

    def reset(self):
        self.state = GameState.IDLE
        self.score = 0
        self._setup()

    def _finish(self):
        self.state = GameState.GAME_OVER

    def score_submission(self) -> dict:
        """Payload for ``POST /api/scores`` once the game is over."""
        if not self.is_over:
            raise InvalidTransition('game is not over')
        return {'game': self.game_id.value, 'score': self.score}
