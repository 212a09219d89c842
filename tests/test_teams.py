"""Tests for team formation and captain lookup."""
import json

from cricket_backend.models import Team


def _teams_url(tournament_id):
    return f'/api/tournaments/{tournament_id}/teams'


def test_team_formation_fills_to_capacity(client, auth_headers, tournament):
    url = _teams_url(tournament['id'])
    formation = json.loads(client.get(url).data)['formation']
    assert formation['can_create_more'] is True
    assert formation['banner'] is None

    for index in range(8):
        res = client.post(url, json={
            'name': f'Team {index + 1}', 'budget': '100000',
        }, headers=auth_headers)
        assert res.status_code == 201

    data = json.loads(client.get(url).data)
    assert [team['name'] for team in data['teams']] == [f'Team {i}' for i in range(1, 9)]
    assert data['formation']['can_create_more'] is False
    assert data['formation']['banner'] == 'All 8 teams have been created!'

    detail = json.loads(client.get(f'/api/tournaments/{tournament["id"]}').data)['tournament']
    assert detail['team_formation']['team_count'] == 8


def test_team_creation_refused_once_full(client, auth_headers):
    created = client.post('/api/tournaments', json={
        'name': 'Duel', 'number_of_teams': 1,
    }, headers=auth_headers)
    tournament_id = json.loads(created.data)['tournament']['id']
    url = _teams_url(tournament_id)
    assert client.post(url, json={'name': 'A', 'budget': 10}, headers=auth_headers).status_code == 201

    res = client.post(url, json={'name': 'B', 'budget': 10}, headers=auth_headers)
    assert res.status_code == 409
    assert json.loads(res.data)['error'] == 'All 1 teams have been created!'
    assert Team.query.filter_by(tournament_id=tournament_id).count() == 1


def test_team_requires_name_and_positive_budget(client, auth_headers, tournament):
    url = _teams_url(tournament['id'])
    res = client.post(url, json={'name': '   ', 'budget': 100}, headers=auth_headers)
    assert res.status_code == 400
    assert json.loads(res.data)['error'] == 'Team name is required.'

    for bad in (0, -5, '', 'lots'):
        res = client.post(url, json={'name': 'Titans', 'budget': bad}, headers=auth_headers)
        assert res.status_code == 400
        assert json.loads(res.data)['error'] == 'Please enter a valid team budget.'
    assert Team.query.count() == 0


def test_team_name_is_trimmed(client, auth_headers, tournament):
    res = client.post(_teams_url(tournament['id']), json={
        'name': '  Royal Chargers ', 'budget': 5000,
    }, headers=auth_headers)
    data = json.loads(res.data)
    assert data['message'] == 'Team "Royal Chargers" created successfully.'
    assert data['team']['budget_remaining'] == 5000


def test_captain_assigned_by_registered_mobile(client, auth_headers, make_user, tournament):
    _, player_id = make_user('star', mobile='9123456780', registered=True)
    res = client.post(_teams_url(tournament['id']), json={
        'name': 'Warriors', 'budget': 80000, 'captain_mobile': '9123456780',
    }, headers=auth_headers)
    assert res.status_code == 201
    team = json.loads(res.data)['team']
    assert team['captain_id'] == player_id
    assert team['captain']['mobile'] == '9123456780'


def test_captain_mobile_must_match_registered_player(client, auth_headers, make_user, tournament):
    make_user('casual', mobile='9555555555', registered=False)
    res = client.post(_teams_url(tournament['id']), json={
        'name': 'Warriors', 'budget': 80000, 'captain_mobile': '9555555555',
    }, headers=auth_headers)
    assert res.status_code == 404
    assert json.loads(res.data)['error'] == 'No registered player found with this mobile number.'
    assert Team.query.count() == 0


def test_teams_require_organizer(client, make_user, tournament):
    outsider_headers, _ = make_user('gatecrasher')
    res = client.post(_teams_url(tournament['id']), json={
        'name': 'Sneaky XI', 'budget': 100,
    }, headers=outsider_headers)
    assert res.status_code == 403
    assert json.loads(res.data)['error'] == 'Only the organizer can manage teams.'


def test_team_budget_defaults_to_tournament_purse(client, auth_headers, tournament):
    res = client.post(_teams_url(tournament['id']), json={'name': 'Strikers'}, headers=auth_headers)
    assert res.status_code == 201
    assert json.loads(res.data)['team']['budget_remaining'] == 100000


def test_team_budget_required_without_tournament_purse(client, auth_headers):
    created = client.post('/api/tournaments', json={
        'name': 'Street League', 'number_of_teams': 4,
    }, headers=auth_headers)
    tournament_id = json.loads(created.data)['tournament']['id']
    res = client.post(_teams_url(tournament_id), json={'name': 'Strikers'}, headers=auth_headers)
    assert res.status_code == 400
    assert json.loads(res.data)['error'] == 'Please enter a valid team budget.'
