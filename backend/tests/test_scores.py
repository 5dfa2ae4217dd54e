from datetime import datetime

from gamehub import db
from gamehub.models import GameScore, utcnow
from conftest import register


def parse_ts(value):
    assert value.endswith('Z')
    return datetime.fromisoformat(value[:-1])


def test_submit_score_requires_login(client):
    res = client.post('/api/scores', json={'game': 'snake', 'score': 150})
    assert res.status_code == 401
    assert GameScore.query.count() == 0


def test_read_endpoints_require_login(client):
    assert client.get('/api/scores/snake').status_code == 401
    assert client.get('/api/user/scores').status_code == 401
    assert client.get('/api/user/achievements').status_code == 401


def test_submit_then_list_my_scores(auth_client):
    before = utcnow()
    res = auth_client.post('/api/scores', json={'game': 'snake', 'score': 150})
    assert res.status_code == 200
    stored = res.get_json()
    assert stored['game'] == 'snake'
    assert stored['score'] == 150

    mine = auth_client.get('/api/user/scores').get_json()
    assert len(mine) == 1
    assert mine[0]['id'] == stored['id']
    assert mine[0]['score'] == 150
    assert parse_ts(mine[0]['played_at']) >= before


def test_leaderboard_is_ordered_by_score(client):
    for username, score in (('u1', 100), ('u2', 300), ('u3', 200)):
        assert register(client, username).status_code == 201
        assert client.post('/api/scores', json={'game': 'snake', 'score': score}).status_code == 200

    board = client.get('/api/scores/snake').get_json()
    assert [e['score'] for e in board] == [300, 200, 100]
    assert [e['username'] for e in board] == ['u2', 'u3', 'u1']


def test_leaderboard_for_game_without_scores_is_empty(auth_client):
    auth_client.post('/api/scores', json={'game': 'snake', 'score': 10})
    res = auth_client.get('/api/scores/tetris')
    assert res.status_code == 200
    assert res.get_json() == []


def test_leaderboard_is_capped(flask_app, auth_client):
    flask_app.config['LEADERBOARD_LIMIT'] = 3
    for score in range(5):
        auth_client.post('/api/scores', json={'game': 'memory', 'score': score})
    board = auth_client.get('/api/scores/memory').get_json()
    assert [e['score'] for e in board] == [4, 3, 2]


def test_legacy_game_spellings_are_normalized(auth_client):
    res = auth_client.post('/api/scores', json={'game': 'candy-crush', 'score': 42})
    assert res.status_code == 200
    assert res.get_json()['game'] == 'candycrush'
    auth_client.post('/api/scores', json={'game': 'CandyCrush', 'score': 7})

    for spelling in ('candycrush', 'candy-crush', 'candy_crush'):
        board = auth_client.get(f'/api/scores/{spelling}').get_json()
        assert [e['score'] for e in board] == [42, 7]


def test_unknown_game_is_rejected(auth_client):
    res = auth_client.post('/api/scores', json={'game': 'pong', 'score': 1})
    assert res.status_code == 400
    assert res.get_json()['errors'][0]['loc'] == ['game']
    assert auth_client.get('/api/scores/pong').status_code == 400
    assert GameScore.query.count() == 0


def test_malformed_scores_are_rejected(auth_client):
    for body in (
        {'game': 'snake'},
        {'game': 'snake', 'score': -1},
        {'game': 'snake', 'score': '150'},
        {'game': 'snake', 'score': 1.5},
        {'score': 10},
    ):
        res = auth_client.post('/api/scores', json=body)
        assert res.status_code == 400, body
        assert res.get_json()['message'] == 'Invalid payload'
    assert GameScore.query.count() == 0


def test_my_scores_are_newest_first_and_private(flask_app, auth_client):
    for score in (5, 50, 500):
        auth_client.post('/api/scores', json={'game': 'tetris', 'score': score})

    other = flask_app.test_client()
    register(other, 'bob')
    other.post('/api/scores', json={'game': 'tetris', 'score': 9999})

    mine = auth_client.get('/api/user/scores').get_json()
    assert [s['score'] for s in mine] == [500, 50, 5]
    stamps = [parse_ts(s['played_at']) for s in mine]
    assert stamps == sorted(stamps, reverse=True)


def test_duplicate_submissions_create_duplicate_records(auth_client):
    for _ in range(2):
        auth_client.post('/api/scores', json={'game': 'snake', 'score': 30})
    assert GameScore.query.count() == 2


def test_health_check(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    assert res.get_json()['status'] == 'ok'


def test_unknown_route_returns_json(client):
    res = client.get('/api/nope')
    assert res.status_code == 404
    assert 'message' in res.get_json()


def test_score_beyond_column_range_is_rejected(auth_client):
    res = auth_client.post('/api/scores', json={'game': 'snake', 'score': 10**30})
    assert res.status_code == 400
    assert res.get_json()['errors'][0]['loc'] == ['score']
    res = auth_client.post('/api/scores', json={'game': 'snake', 'score': 2**31})
    assert res.status_code == 400
    assert GameScore.query.count() == 0

    res = auth_client.post('/api/scores', json={'game': 'snake', 'score': 2**31 - 1})
    assert res.status_code == 200


def test_unexpected_error_returns_500_and_keeps_serving(flask_app, client):
    @flask_app.route('/api/explode')
    def explode():
        db.session.add(GameScore(user_id=1, game='snake', score=1))
        raise RuntimeError('boom')

    res = client.get('/api/explode')
    assert res.status_code == 500
    assert res.get_json() == {'message': 'Internal Server Error'}
    # the pending row was rolled back
    assert GameScore.query.count() == 0

    assert client.get('/api/health').status_code == 200
