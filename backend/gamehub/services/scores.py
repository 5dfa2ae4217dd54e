from flask import current_app
from sqlalchemy.orm import joinedload

from gamehub import db
from gamehub.games import GameId
from gamehub.models import GameScore, User
from .achievements import award_achievements

DEFAULT_LEADERBOARD_LIMIT = 100


def create_score(user: User, game: GameId, score: int) -> GameScore:
    """Persist a score for ``user`` stamped with the current server time.

    Achievements unlocked by this score are awarded in the same commit.
    """
    record = GameScore(user_id=user.id, game=game.value, score=score)
    db.session.add(record)
    db.session.flush()
    awarded = award_achievements(user, game, record)
    db.session.commit()
    current_app.logger.info(
        f"[score] user={user.id} game={game.value} score={score} id={record.id} awarded={[a.name for a in awarded]}"
    )
    return record


def scores_by_game(game: GameId, limit=None) -> list:
    """Top scores for one game, highest first, joined with their owners."""
    if limit is None:
        limit = int(current_app.config.get('LEADERBOARD_LIMIT', DEFAULT_LEADERBOARD_LIMIT))
    return (
        GameScore.query.options(joinedload(GameScore.user))
        .filter(GameScore.game == game.value)
        .order_by(GameScore.score.desc(), GameScore.id.asc())
        .limit(limit)
        .all()
    )


def user_scores(user_id: int) -> list:
    """Every score of one user, newest first."""
    return (
        GameScore.query.filter(GameScore.user_id == user_id)
        .order_by(GameScore.played_at.desc(), GameScore.id.desc())
        .all()
    )
