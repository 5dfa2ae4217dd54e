from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from gamehub import socketio
from gamehub.auth import parse_json
from gamehub.models import Achievement
from gamehub.schemas import GamePath, ScorePayload
from gamehub.services.scores import create_score, scores_by_game, user_scores
from gamehub.socketio_events import NAMESPACE, leaderboard_room

scores = Blueprint('scores', __name__)


@scores.route('/health', methods=['GET'])
def health_check():
    return jsonify({'status': 'ok', 'service': 'gamehub'})


@scores.route('/scores', methods=['POST'])
@login_required
def submit_score():
    payload = parse_json(ScorePayload)
    record = create_score(current_user._get_current_object(), payload.game, payload.score)
    socketio.emit(
        'leaderboard_update',
        {'game': payload.game.value},
        to=leaderboard_room(payload.game),
        namespace=NAMESPACE,
    )
    return jsonify(record.to_dict())


@scores.route('/scores/<string:game>', methods=['GET'])
@login_required
def get_leaderboard(game):
    """Top scores for a game, highest first, each with its player's username."""
    path = GamePath.model_validate({'game': game})
    return jsonify([s.to_dict(include_username=True) for s in scores_by_game(path.game)])


@scores.route('/user/scores', methods=['GET'])
@login_required
def get_user_scores():
    return jsonify([s.to_dict() for s in user_scores(current_user.id)])


@scores.route('/user/achievements', methods=['GET'])
@login_required
def get_user_achievements():
    return jsonify([a.to_dict() for a in current_user.achievements])


@scores.route('/achievements', methods=['GET'])
@login_required
def list_achievements():
    return jsonify([a.to_dict() for a in Achievement.query.order_by(Achievement.id).all()])
