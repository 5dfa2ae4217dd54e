from collections import namedtuple

from gamehub.games import GameId
from .base import BaseGame

Point = namedtuple('Point', 'x y')

GRID_SIZE = 20
FOOD_POINTS = 10
START = Point(10, 10)
START_FOOD = Point(15, 15)

# Tick interval in milliseconds per difficulty
GAME_SPEEDS = {
    'low': 150,
    'medium': 100,
    'high': 60,
}

DIRECTIONS = {
    'up': Point(0, -1),
    'down': Point(0, 1),
    'left': Point(-1, 0),
    'right': Point(1, 0),
}


class SnakeGame(BaseGame):
    game_id = GameId.SNAKE

    def __init__(self, difficulty='medium', grid_size=GRID_SIZE, rng=None):
        if difficulty not in GAME_SPEEDS:
            raise ValueError(f"unknown difficulty {difficulty!r}")
        self.difficulty = difficulty
        self.grid_size = grid_size
        super().__init__(rng=rng)

    @property
    def tick_interval_ms(self) -> int:
        return GAME_SPEEDS[self.difficulty]

    def _setup(self):
        self.snake = [START]
        self.direction = DIRECTIONS['right']
        # direction of the last completed move
        self.heading = self.direction
        self.food = START_FOOD

    @property
    def head(self) -> Point:
        return self.snake[0]

    def turn(self, direction):
        """Change heading; a reversal straight into the neck is ignored."""
        if not self.is_running:
            return
        new = DIRECTIONS[direction] if isinstance(direction, str) else Point(*direction)
        if new.x == -self.heading.x and new.y == -self.heading.y:
            return
        self.direction = new

    def _in_bounds(self, p: Point) -> bool:
        return 0 <= p.x < self.grid_size and 0 <= p.y < self.grid_size

    def tick(self):
        """Advance one cell. Returns True if food was eaten."""
        if not self.is_running:
            return False
        new_head = Point(self.head.x + self.direction.x, self.head.y + self.direction.y)
        if not self._in_bounds(new_head) or new_head in self.snake:
            self._finish()
            return False

        self.snake.insert(0, new_head)
        self.heading = self.direction
        if new_head == self.food:
            self.score += FOOD_POINTS
            self.food = self._spawn_food()
            return True
        self.snake.pop()
        return False

    def _spawn_food(self) -> Point:
        occupied = set(self.snake)
        free = [
            Point(x, y)
            for y in range(self.grid_size)
            for x in range(self.grid_size)
            if Point(x, y) not in occupied
        ]
        if not free:
            # board is full
            self._finish()
            return self.food
        return self.rng.choice(free)
