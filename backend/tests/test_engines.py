import random

import pytest

from gamehub.services.games import (
    CandyCrushGame, GameState, InvalidTransition, MemoryGame, SnakeGame, TetrisGame, new_game,
)
from gamehub.services.games.snake import Point
from gamehub.services.games.tetris import rotate_clockwise


def test_lifecycle_transitions():
    game = SnakeGame(rng=random.Random(1))
    assert game.state == GameState.IDLE
    with pytest.raises(InvalidTransition):
        game.pause()
    game.start()
    game.toggle_pause()
    assert game.state == GameState.PAUSED
    # moves are ignored while paused
    head = game.head
    game.tick()
    assert game.head == head
    game.toggle_pause()
    assert game.is_running
    with pytest.raises(InvalidTransition):
        game.start()
    with pytest.raises(InvalidTransition):
        game.score_submission()


def test_new_game_accepts_legacy_names():
    assert isinstance(new_game('candy-crush', rng=random.Random(0)), CandyCrushGame)
    assert isinstance(new_game('Tetris', rng=random.Random(0)), TetrisGame)
    with pytest.raises(ValueError):
        new_game('pong')


# Snake

def test_snake_eats_food_and_grows():
    game = SnakeGame(rng=random.Random(3))
    game.start()
    for _ in range(5):
        assert game.tick() is False
    assert game.head == Point(15, 10)
    game.turn('down')
    for _ in range(4):
        assert game.tick() is False
    assert game.head == Point(15, 14)
    assert game.tick() is True
    assert game.head == Point(15, 15)
    assert game.score == 10
    assert len(game.snake) == 2
    assert game.food not in game.snake


def test_snake_ignores_reversal():
    game = SnakeGame(rng=random.Random(0))
    game.start()
    game.turn('left')
    game.tick()
    assert game.head == Point(11, 10)


def test_snake_two_turns_between_ticks_cannot_reverse():
    game = SnakeGame(rng=random.Random(0))
    game.snake = [Point(12, 10), Point(11, 10), Point(10, 10)]
    game.start()
    game.turn('up')
    game.turn('left')
    game.tick()
    assert game.is_running
    assert game.head == Point(12, 9)


def test_snake_wall_ends_game():
    game = SnakeGame(rng=random.Random(0))
    game.start()
    for _ in range(9):
        game.tick()
    assert game.head == Point(19, 10)
    game.tick()
    assert game.is_over
    assert game.score_submission() == {'game': 'snake', 'score': 0}
    game.reset()
    assert game.state == GameState.IDLE
    assert game.snake == [Point(10, 10)]


def test_snake_self_collision_ends_game():
    game = SnakeGame(rng=random.Random(0))
    game.snake = [Point(5, 5), Point(4, 5), Point(4, 6), Point(5, 6), Point(6, 6)]
    game.start()
    game.turn('down')
    game.tick()
    assert game.is_over


def test_snake_speeds():
    assert SnakeGame(difficulty='high').tick_interval_ms == 60
    with pytest.raises(ValueError):
        SnakeGame(difficulty='insane')


# Memory

def test_memory_match_and_mismatch():
    game = MemoryGame(symbols=['a', 'b'], rng=random.Random(0))
    game.start()
    positions = {}
    for idx, card in enumerate(game.cards):
        positions.setdefault(card.symbol, []).append(idx)
    a1, a2 = positions['a']
    b1, _ = positions['b']

    assert game.flip(a1) == 'pending'
    assert game.flip(b1) == 'mismatch'
    # third card is ignored until the pair settles
    assert game.flip(a2) is None
    game.settle()
    assert not game.cards[a1].is_flipped

    assert game.flip(a1) == 'pending'
    assert game.flip(a1) is None
    assert game.flip(a2) == 'match'
    assert game.score == 10
    assert game.moves == 2
    assert not game.is_over


def test_memory_clearing_board_ends_game():
    game = MemoryGame(rng=random.Random(5))
    game.start()
    positions = {}
    for idx, card in enumerate(game.cards):
        positions.setdefault(card.symbol, []).append(idx)
    for first, second in positions.values():
        game.flip(first)
        game.flip(second)
    assert game.is_over
    assert game.score_submission() == {'game': 'memory', 'score': 80}
    assert len(game.cards) == 16


def test_memory_ignores_out_of_range_cards():
    game = MemoryGame(symbols=['a', 'b'], rng=random.Random(0))
    game.start()
    assert game.flip(-1) is None
    assert game.flip(len(game.cards)) is None
    assert not any(card.is_flipped for card in game.cards)
    assert game.selected == []


# Tetris

def test_rotate_clockwise():
    l_piece = ((1, 0), (1, 0), (1, 1))
    assert rotate_clockwise(l_piece) == ((1, 1, 1), (1, 0, 0))


def test_tetris_line_clear_scores_by_level():
    game = TetrisGame(rng=random.Random(0))
    game.next_kind = 'I'
    game.start()
    # fill the bottom row except where the I piece lands
    for x in range(game.width):
        if x not in range(4, 8):
            game.board[-1][x] = 'X'
    game.hard_drop()
    assert game.lines_cleared == 1
    assert game.score == 100
    assert game.level == 1
    assert all(cell is None for cell in game.board[-1])


def test_tetris_level_up_speeds_drop():
    game = TetrisGame(difficulty='easy', rng=random.Random(0))
    assert game.tick_interval_ms == 800
    game.lines_cleared = 9
    game.next_kind = 'I'
    game.start()
    for x in range(game.width):
        if x not in range(4, 8):
            game.board[-1][x] = 'X'
    game.hard_drop()
    assert game.lines_cleared == 10
    # points use the level the line was cleared on
    assert game.score == 100
    assert game.level == 2
    assert game.tick_interval_ms == 400


def test_tetris_move_blocked_by_wall():
    game = TetrisGame(rng=random.Random(0))
    game.next_kind = 'O'
    game.start()
    moves = 0
    while game.move(-1):
        moves += 1
    assert moves == 4
    assert game.current.x == 0
    assert game.move(-1) is False


def test_tetris_spawn_collision_ends_game():
    game = TetrisGame(rng=random.Random(0))
    game.next_kind = 'O'
    for x in range(game.width):
        game.board[1][x] = 'X'
    game.board[1][0] = None
    game.start()
    assert game.is_over
    assert game.score_submission() == {'game': 'tetris', 'score': 0}
    assert game.current is None
    assert game.ghost_y() is None


# Candy Crush

BOARD = [
    ['a', 'a', 'b', 'a'],
    ['c', 'd', 'a', 'c'],
    ['d', 'c', 'b', 'd'],
    ['b', 'd', 'c', 'b'],
]


def test_candy_swap_scores_match():
    game = CandyCrushGame(board=BOARD, candies=['x', 'y', 'z'], rng=random.Random(0))
    assert game.find_matches() == set()
    game.start()
    # pull the 'a' at (1, 2) up next to the two 'a's of row 0
    points = game.swap((0, 2), (1, 2))
    assert points >= 3
    assert game.score == points
    assert game.moves == 1


def test_candy_swap_without_match_is_reverted():
    game = CandyCrushGame(board=BOARD, rng=random.Random(0))
    game.start()
    assert game.swap((3, 0), (3, 1)) == 0
    assert game.board == BOARD
    assert game.moves == 1
    assert game.swap((0, 0), (2, 2)) == 0
    assert game.moves == 1


def test_candy_game_ends_after_max_moves():
    game = CandyCrushGame(board=BOARD, max_moves=2, rng=random.Random(0))
    game.start()
    game.swap((3, 0), (3, 1))
    assert game.is_running
    game.swap((3, 0), (3, 1))
    assert game.is_over
    assert game.score_submission()['game'] == 'candycrush'
