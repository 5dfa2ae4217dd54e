from gamehub import db
from gamehub.games import GameId
from gamehub.models import Achievement, GameScore

CRITERIA_TYPES = ('score', 'games_played', 'win_streak')

DEFAULT_ACHIEVEMENTS = [
    {'name': 'Snake Charmer', 'description': 'Score 100 points in Snake', 'game': GameId.SNAKE, 'type': 'score', 'value': 100},
    {'name': 'Serpent Lord', 'description': 'Score 500 points in Snake', 'game': GameId.SNAKE, 'type': 'score', 'value': 500},
    {'name': 'Total Recall', 'description': 'Clear a Memory board', 'game': GameId.MEMORY, 'type': 'score', 'value': 80},
    {'name': 'Line Breaker', 'description': 'Score 1000 points in Tetris', 'game': GameId.TETRIS, 'type': 'score', 'value': 1000},
    {'name': 'Sugar Rush', 'description': 'Score 50 points in Candy Crush', 'game': GameId.CANDYCRUSH, 'type': 'score', 'value': 50},
    {'name': 'Regular', 'description': 'Play 10 games of Snake', 'game': GameId.SNAKE, 'type': 'games_played', 'value': 10},
    {'name': 'Block Addict', 'description': 'Play 10 games of Tetris', 'game': GameId.TETRIS, 'type': 'games_played', 'value': 10},
]


def _criteria_met(achievement: Achievement, record: GameScore, games_played: int) -> bool:
    if achievement.criteria_type == 'score':
        return record.score >= achievement.criteria_value
    if achievement.criteria_type == 'games_played':
        return games_played >= achievement.criteria_value
    # win_streak has no meaning for single-player games
    return False


def award_achievements(user, game: GameId, record: GameScore) -> list:
    """Attach every not-yet-earned achievement for ``game`` that ``record`` unlocks.

    The caller owns the transaction; nothing is committed here.
    """
    held = {a.id for a in user.achievements}
    candidates = [a for a in Achievement.query.filter_by(game=game.value).all() if a.id not in held]
    if not candidates:
        return []
    games_played = GameScore.query.filter_by(user_id=user.id, game=game.value).count()
    awarded = [a for a in candidates if _criteria_met(a, record, games_played)]
    for achievement in awarded:
        user.achievements.append(achievement)
    if awarded:
        db.session.add(user)
    return awarded


def seed_achievements(catalog=None) -> int:
    """Insert the catalog entries that are missing (matched by name)."""
    created = 0
    for entry in catalog or DEFAULT_ACHIEVEMENTS:
        if entry['type'] not in CRITERIA_TYPES:
            raise ValueError(f"unknown criteria type {entry['type']!r}")
        if Achievement.query.filter_by(name=entry['name']).first():
            continue
        db.session.add(Achievement(
            name=entry['name'],
            description=entry['description'],
            game=GameId(entry['game']).value,
            criteria_type=entry['type'],
            criteria_value=int(entry['value']),
        ))
        created += 1
    db.session.commit()
    return created
