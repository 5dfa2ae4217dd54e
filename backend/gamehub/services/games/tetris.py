from gamehub.games import GameId
from .base import BaseGame

BOARD_WIDTH = 10
BOARD_HEIGHT = 20
LINE_POINTS = 100
LINES_PER_LEVEL = 10

# Base drop interval in milliseconds; divided by the current level
DIFFICULTY_SPEEDS = {
    'easy': 800,
    'medium': 500,
    'hard': 200,
}

TETROMINOES = {
    'I': ((1, 1, 1, 1),),
    'L': ((1, 0), (1, 0), (1, 1)),
    'J': ((0, 1), (0, 1), (1, 1)),
    'O': ((1, 1), (1, 1)),
    'S': ((0, 1, 1), (1, 1, 0)),
    'Z': ((1, 1, 0), (0, 1, 1)),
    'T': ((1, 1, 1), (0, 1, 0)),
}


def rotate_clockwise(shape):
    return tuple(tuple(row[i] for row in reversed(shape)) for i in range(len(shape[0])))


class Piece:
    def __init__(self, kind, shape, x, y):
        self.kind = kind
        self.shape = shape
        self.x = x
        self.y = y

    def cells(self, dx=0, dy=0, shape=None):
        for row_idx, row in enumerate(shape or self.shape):
            for col_idx, filled in enumerate(row):
                if filled:
                    yield self.x + col_idx + dx, self.y + row_idx + dy


class TetrisGame(BaseGame):
    game_id = GameId.TETRIS

    def __init__(self, difficulty='medium', width=BOARD_WIDTH, height=BOARD_HEIGHT, rng=None):
        if difficulty not in DIFFICULTY_SPEEDS:
            raise ValueError(f"unknown difficulty {difficulty!r}")
        self.difficulty = difficulty
        self.width = width
        self.height = height
        super().__init__(rng=rng)

    def _setup(self):
        self.board = [[None] * self.width for _ in range(self.height)]
        self.level = 1
        self.lines_cleared = 0
        self.current = None
        self.next_kind = self._random_kind()

    @property
    def tick_interval_ms(self) -> float:
        return DIFFICULTY_SPEEDS[self.difficulty] / self.level

    def _random_kind(self):
        return self.rng.choice(sorted(TETROMINOES))

    def start(self):
        super().start()
        self._spawn()

    def _collides(self, piece, dx=0, dy=0, shape=None) -> bool:
        for x, y in piece.cells(dx, dy, shape):
            if x < 0 or x >= self.width or y >= self.height:
                return True
            if y >= 0 and self.board[y][x] is not None:
                return True
        return False

    def _spawn(self):
        kind = self.next_kind
        piece = Piece(kind, TETROMINOES[kind], self.width // 2 - 1, 0)
        if self._collides(piece):
            self.current = None
            self._finish()
            return
        self.current = piece
        self.next_kind = self._random_kind()

    def move(self, dx: int) -> bool:
        if not self.is_running or self.current is None:
            return False
        if self._collides(self.current, dx=dx):
            return False
        self.current.x += dx
        return True

    def rotate(self) -> bool:
        if not self.is_running or self.current is None:
            return False
        rotated = rotate_clockwise(self.current.shape)
        if self._collides(self.current, shape=rotated):
            return False
        self.current.shape = rotated
        return True

    def drop(self) -> bool:
        """Move down one row, locking the piece when it cannot fall.

        Returns True while the piece is still falling.
        """
        if not self.is_running or self.current is None:
            return False
        if not self._collides(self.current, dy=1):
            self.current.y += 1
            return True
        self._lock()
        return False

    tick = drop

    def hard_drop(self):
        while self.drop():
            pass

    def ghost_y(self):
        """Row the current piece would land on, or None with no piece in play."""
        if self.current is None:
            return None
        offset = 0
        while not self._collides(self.current, dy=offset + 1):
            offset += 1
        return self.current.y + offset

    def _lock(self):
        for x, y in self.current.cells():
            if y >= 0:
                self.board[y][x] = self.current.kind
        cleared = self._clear_lines()
        if cleared:
            self.score += cleared * LINE_POINTS * self.level
            self.lines_cleared += cleared
            self.level = self.lines_cleared // LINES_PER_LEVEL + 1
        self._spawn()

    def _clear_lines(self) -> int:
        kept = [row for row in self.board if any(cell is None for cell in row)]
        cleared = self.height - len(kept)
        self.board = [[None] * self.width for _ in range(cleared)] + kept
        return cleared
