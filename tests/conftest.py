import pytest
from cricket_backend.app import create_app, db


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(client):
    """Register an organizer and return auth headers."""
    res = client.post('/api/auth/register', json={
        'username': 'organizer', 'email': 'organizer@example.com',
        'password': 'password123', 'full_name': 'Org Anizer',
    })
    token = res.get_json()['token']
    return {'Authorization': f'Bearer {token}', 'Content-Type': 'application/json'}


@pytest.fixture
def make_user(client):
    """Factory registering extra users; returns (headers, user_id)."""
    def _make_user(username, mobile='', registered=False):
        res = client.post('/api/auth/register', json={
            'username': username,
            'email': f'{username}@example.com',
            'password': 'password123',
            'full_name': username.title(),
            'mobile': mobile,
            'is_player_registered': registered,
        })
        data = res.get_json()
        return {'Authorization': f'Bearer {data["token"]}'}, data['user']['id']
    return _make_user


@pytest.fixture
def tournament(client, auth_headers):
    res = client.post('/api/tournaments', json={
        'name': 'Premier Cup',
        'number_of_teams': 8,
        'team_budget': 100000,
        'captain_voting_enabled': True,
    }, headers=auth_headers)
    return res.get_json()['tournament']
