from flask import Blueprint, current_app, jsonify, request, session
from flask_login import current_user, login_required, login_user, logout_user
from sqlalchemy import or_

from gamehub import db
from gamehub.models import User
from gamehub.schemas import LoginPayload, RegisterPayload

auth = Blueprint('auth', __name__)


def parse_json(schema):
    """Validate the JSON body against a pydantic schema.

    A missing or non-JSON body validates as an empty object so the client
    gets field-level errors instead of a bare 415.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    return schema.model_validate(data)


def _start_session(user):
    current_app.session_interface.regenerate(session)
    session.permanent = True
    login_user(user)


@auth.route('/register', methods=['POST'])
def register():
    payload = parse_json(RegisterPayload)
    filters = [User.username == payload.username]
    if payload.email:
        filters.append(User.email == str(payload.email))
    existing = User.query.filter(or_(*filters)).first()
    if existing:
        message = 'Username already exists' if existing.username == payload.username else 'Email already exists'
        return jsonify({'message': message}), 400

    user = User(username=payload.username, email=str(payload.email) if payload.email else None)
    user.set_password(payload.password)
    db.session.add(user)
    db.session.commit()
    _start_session(user)
    current_app.logger.info(f"[register] user={user.id} username={user.username}")
    return jsonify(user.to_dict()), 201


@auth.route('/login', methods=['POST'])
def login():
    payload = parse_json(LoginPayload)
    user = User.query.filter_by(username=payload.username).first()
    if user and user.check_password(payload.password):
        _start_session(user)
        current_app.logger.info(f"[login] user={user.id}")
        return jsonify(user.to_dict())
    current_app.logger.info(f"[login] rejected username={payload.username}")
    return jsonify({'message': 'Invalid credentials'}), 401


@auth.route('/logout', methods=['POST'])
def logout():
    user_id = current_user.get_id()
    logout_user()
    session.clear()
    if user_id:
        current_app.logger.info(f"[logout] user={user_id}")
    return jsonify({'success': True})


@auth.route('/user', methods=['GET'])
@login_required
def get_user():
    return jsonify(current_user.to_dict())
