"""Tests for store failures on write routes."""
import json

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from cricket_backend.app import db
from cricket_backend.models import AuctionTimer, Profile, Tournament


def _fail_commits(monkeypatch):
    def _fail(self):
        raise OperationalError('COMMIT', {}, Exception('database is locked'))
    monkeypatch.setattr(Session, 'commit', _fail)


def test_bid_timer_insert_failure_returns_json_500(client, auth_headers, tournament, monkeypatch):
    _fail_commits(monkeypatch)
    res = client.put(
        f'/api/tournaments/{tournament["id"]}/bid-timer',
        json={'bid_time': 30}, headers=auth_headers,
    )
    assert res.status_code == 500
    assert json.loads(res.data) == {'error': 'Failed to save timer config.'}
    assert AuctionTimer.query.count() == 0


def test_bid_timer_update_failure_keeps_stored_value(client, auth_headers, tournament, monkeypatch):
    url = f'/api/tournaments/{tournament["id"]}/bid-timer'
    assert client.put(url, json={'bid_time': 15}, headers=auth_headers).status_code == 201

    _fail_commits(monkeypatch)
    res = client.put(url, json={'bid_time': 90}, headers=auth_headers)
    assert res.status_code == 500
    assert json.loads(res.data)['error'] == 'Failed to save timer config.'
    db.session.expire_all()
    assert AuctionTimer.query.filter_by(tournament_id=tournament['id']).one().bid_time == 15


def test_bid_timer_insert_race_falls_back_to_update(client, auth_headers, tournament, monkeypatch):
    tournament_id = tournament['id']
    original_commit = Session.commit
    calls = []

    def _lose_race(self):
        calls.append(1)
        if len(calls) > 1:
            return original_commit(self)
        # A concurrent request stores its row before this insert lands.
        self.rollback()
        self.add(AuctionTimer(tournament_id=tournament_id, bid_time=60))
        original_commit(self)
        raise IntegrityError('INSERT', {}, Exception('UNIQUE constraint failed'))

    monkeypatch.setattr(Session, 'commit', _lose_race)
    res = client.put(
        f'/api/tournaments/{tournament_id}/bid-timer',
        json={'bid_time': 20}, headers=auth_headers,
    )
    assert res.status_code == 200
    assert json.loads(res.data)['bid_timer']['bid_time'] == 20
    monkeypatch.undo()

    db.session.expire_all()
    timers = AuctionTimer.query.filter_by(tournament_id=tournament_id).all()
    assert [timer.bid_time for timer in timers] == [20]


def test_voting_toggle_failure_rolls_back(client, auth_headers, tournament, monkeypatch):
    _fail_commits(monkeypatch)
    res = client.post(f'/api/tournaments/{tournament["id"]}/voting/toggle', headers=auth_headers)
    assert res.status_code == 500
    assert json.loads(res.data) == {'error': 'Failed to toggle voting.'}
    db.session.expire_all()
    assert db.session.get(Tournament, tournament['id']).is_voting_live is False


def test_profile_update_failure_returns_json_500(client, make_user, monkeypatch):
    headers, user_id = make_user('steady', mobile='9800000000')
    _fail_commits(monkeypatch)
    res = client.put('/api/players/me', json={'full_name': 'Changed'}, headers=headers)
    assert res.status_code == 500
    assert json.loads(res.data) == {'error': 'Failed to update profile.'}
    db.session.expire_all()
    assert Profile.query.filter_by(user_id=user_id).one().full_name == 'Steady'


def test_application_failure_returns_json_500(client, make_user, tournament, monkeypatch):
    headers, _ = make_user('eager', mobile='9800000001', registered=True)
    _fail_commits(monkeypatch)
    res = client.post(f'/api/tournaments/{tournament["id"]}/applications', json={}, headers=headers)
    assert res.status_code == 500
    assert json.loads(res.data) == {'error': 'Failed to submit application.'}


def test_register_failure_returns_json_500(client, monkeypatch):
    _fail_commits(monkeypatch)
    res = client.post('/api/auth/register', json={
        'username': 'unlucky', 'email': 'unlucky@test.com', 'password': 'password123',
    })
    assert res.status_code == 500
    assert json.loads(res.data) == {'error': 'Failed to register user.'}
