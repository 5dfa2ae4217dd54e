from gamehub.games import GameId
from .base import BaseGame

CANDIES = ['drop', 'lollipop', 'chocolate', 'donut', 'cookie', 'pudding']
GRID_SIZE = 8
MATCH_MIN = 3
MAX_MOVES = 20


class CandyCrushGame(BaseGame):
    """Swap-to-match on a square board.

    A swap that lines up ``MATCH_MIN`` or more equal candies clears them (one
    point each), refills the cleared cells at random and keeps cascading
    until the board is stable. A swap that matches nothing is reverted but
    still counts as a move. The game ends on a stable board once
    ``max_moves`` moves have been played.
    """

    game_id = GameId.CANDYCRUSH

    def __init__(self, grid_size=GRID_SIZE, max_moves=MAX_MOVES, candies=None, board=None, rng=None):
        self.grid_size = grid_size
        self.max_moves = max_moves
        self.candies = list(candies or CANDIES)
        self._initial_board = board
        super().__init__(rng=rng)

    def _setup(self):
        if self._initial_board is not None:
            self.board = [list(row) for row in self._initial_board]
            self.grid_size = len(self.board)
        else:
            self.board = [
                [self.rng.choice(self.candies) for _ in range(self.grid_size)]
                for _ in range(self.grid_size)
            ]
        self.moves = 0

    def reset(self):
        self._initial_board = None
        super().reset()

    @staticmethod
    def _adjacent(a, b) -> bool:
        (r1, c1), (r2, c2) = a, b
        return abs(r1 - r2) + abs(c1 - c2) == 1

    def find_matches(self) -> set:
        """Cells that belong to a horizontal or vertical run of MATCH_MIN+."""
        n = self.grid_size
        matched = set()
        for r in range(n):
            for c in range(n - MATCH_MIN + 1):
                run = [self.board[r][c + k] for k in range(MATCH_MIN)]
                if len(set(run)) == 1:
                    matched.update((r, c + k) for k in range(MATCH_MIN))
        for r in range(n - MATCH_MIN + 1):
            for c in range(n):
                run = [self.board[r + k][c] for k in range(MATCH_MIN)]
                if len(set(run)) == 1:
                    matched.update((r + k, c) for k in range(MATCH_MIN))
        return matched

    def _exchange(self, a, b):
        (r1, c1), (r2, c2) = a, b
        self.board[r1][c1], self.board[r2][c2] = self.board[r2][c2], self.board[r1][c1]

    def _cascade(self) -> int:
        points = 0
        matched = self.find_matches()
        while matched:
            points += len(matched)
            for r, c in matched:
                self.board[r][c] = self.rng.choice(self.candies)
            matched = self.find_matches()
        return points

    def swap(self, a, b) -> int:
        """Swap two adjacent cells; returns the points scored by the move.

        Non-adjacent selections are ignored and do not count as a move.
        """
        if not self.is_running or not self._adjacent(a, b):
            return 0
        self.moves += 1
        self._exchange(a, b)
        if not self.find_matches():
            self._exchange(a, b)
            points = 0
        else:
            points = self._cascade()
            self.score += points
        if self.moves >= self.max_moves:
            self._finish()
        return points
