from datetime import datetime, timezone
from gamehub import db
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash


def utcnow():
    """Naive UTC timestamp; every DateTime column stores UTC without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() + 'Z' if value else None


user_achievements = db.Table(
    'user_achievements',
    db.Column('user_id', db.Integer, db.ForeignKey('users.id'), primary_key=True),
    db.Column('achievement_id', db.Integer, db.ForeignKey('achievements.id'), primary_key=True),
)

user_friends = db.Table(
    'user_friends',
    db.Column('user_id', db.Integer, db.ForeignKey('users.id'), primary_key=True),
    db.Column('friend_id', db.Integer, db.ForeignKey('users.id'), primary_key=True),
)


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=True)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    achievements = db.relationship('Achievement', secondary=user_achievements, lazy='selectin')
    friends = db.relationship(
        'User',
        secondary=user_friends,
        primaryjoin=(user_friends.c.user_id == id),
        secondaryjoin=(user_friends.c.friend_id == id),
        lazy='selectin',
    )

    def set_password(self, password):
        self.password_hash = generate_password_hash(password, method='scrypt')

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'achievements': [a.id for a in self.achievements],
            'friends': [f.id for f in self.friends],
            'created_at': isoformat(self.created_at),
        }


class GameScore(db.Model):
    __tablename__ = 'game_scores'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    game = db.Column(db.String(32), nullable=False)
    score = db.Column(db.Integer, nullable=False)
    played_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    user = db.relationship('User')

    __table_args__ = (
        # leaderboard: WHERE game = ? ORDER BY score DESC
        db.Index('ix_game_scores_game_score', game, score.desc()),
        # history: WHERE user_id = ? ORDER BY played_at DESC
        db.Index('ix_game_scores_user_played_at', user_id, played_at.desc()),
    )

    def to_dict(self, include_username=False):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'game': self.game,
            'score': self.score,
            'played_at': isoformat(self.played_at),
        }
        if include_username:
            data['username'] = self.user.username if self.user else None
        return data


class Achievement(db.Model):
    __tablename__ = 'achievements'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), unique=True, nullable=False)
    description = db.Column(db.String(512), nullable=False)
    game = db.Column(db.String(32), nullable=False, index=True)
    # score | games_played | win_streak
    criteria_type = db.Column(db.String(32), nullable=False)
    criteria_value = db.Column(db.Integer, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'game': self.game,
            'criteria': {'type': self.criteria_type, 'value': self.criteria_value},
        }


class LoginSession(db.Model):
    """Server-side session row keyed by the (signed) cookie token."""
    __tablename__ = 'sessions'
    id = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    data = db.Column(db.Text, nullable=False, default='{}')
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    def is_expired(self, now=None):
        return self.expires_at <= (now or utcnow())
