"""Tests for auction category configuration and the bid timer."""
import json

from cricket_backend.models import AuctionConfig, AuctionTimer


def _categories_url(tournament_id):
    return f'/api/tournaments/{tournament_id}/categories'


def test_category_options(client):
    res = client.get('/api/tournaments/categories/options')
    assert json.loads(res.data)['categories'] == [
        'Diamond A', 'Diamond B', 'Platinum A', 'Platinum', 'Gold', 'Silver',
    ]


def test_create_category_parses_text_fields(client, auth_headers, tournament):
    res = client.post(_categories_url(tournament['id']), json={
        'category': 'Diamond A', 'max_players': '3', 'base_price': '2500.50',
    }, headers=auth_headers)
    assert res.status_code == 201
    data = json.loads(res.data)
    assert data['message'] == 'Category added.'
    assert data['category']['max_players'] == 3
    assert data['category']['base_price'] == 2500.5
    assert data['category']['is_active'] is True


def test_create_category_requires_all_fields(client, auth_headers, tournament):
    res = client.post(_categories_url(tournament['id']), json={
        'category': 'Gold', 'max_players': '', 'base_price': '100',
    }, headers=auth_headers)
    assert res.status_code == 400
    assert json.loads(res.data)['error'] == 'All fields are required.'
    assert AuctionConfig.query.count() == 0


def test_create_category_rejects_bad_values(client, auth_headers, tournament):
    url = _categories_url(tournament['id'])
    for payload in (
        {'category': 'Bronze', 'max_players': '2', 'base_price': '10'},
        {'category': 'Gold', 'max_players': '0', 'base_price': '10'},
        {'category': 'Gold', 'max_players': '2', 'base_price': '-1'},
        {'category': 'Gold', 'max_players': 'two', 'base_price': '10'},
    ):
        assert client.post(url, json=payload, headers=auth_headers).status_code == 400
    assert AuctionConfig.query.count() == 0


def test_duplicate_categories_are_allowed(client, auth_headers, tournament):
    url = _categories_url(tournament['id'])
    for _ in range(2):
        res = client.post(url, json={
            'category': 'Silver', 'max_players': 5, 'base_price': 0,
        }, headers=auth_headers)
        assert res.status_code == 201
    listed = json.loads(client.get(url).data)['categories']
    assert [c['category'] for c in listed] == ['Silver', 'Silver']


def test_list_categories_in_creation_order(client, auth_headers, tournament):
    url = _categories_url(tournament['id'])
    for category in ('Gold', 'Diamond B', 'Platinum'):
        client.post(url, json={
            'category': category, 'max_players': 2, 'base_price': 100,
        }, headers=auth_headers)
    listed = json.loads(client.get(url).data)['categories']
    assert [c['category'] for c in listed] == ['Gold', 'Diamond B', 'Platinum']


def test_update_category(client, auth_headers, tournament):
    url = _categories_url(tournament['id'])
    created = json.loads(client.post(url, json={
        'category': 'Gold', 'max_players': 2, 'base_price': 100,
    }, headers=auth_headers).data)['category']

    res = client.patch(f'{url}/{created["id"]}', json={
        'max_players': '6',
    }, headers=auth_headers)
    assert res.status_code == 200
    data = json.loads(res.data)
    assert data['message'] == 'Category updated.'
    assert data['category']['max_players'] == 6
    assert data['category']['category'] == 'Gold'


def test_soft_deleted_category_leaves_listing_but_stays_retrievable(
    client, auth_headers, tournament,
):
    url = _categories_url(tournament['id'])
    created = json.loads(client.post(url, json={
        'category': 'Platinum A', 'max_players': 2, 'base_price': 100,
    }, headers=auth_headers).data)['category']

    res = client.delete(f'{url}/{created["id"]}', headers=auth_headers)
    assert res.status_code == 200
    assert json.loads(res.data)['message'] == 'Category deleted.'

    assert json.loads(client.get(url).data)['categories'] == []
    fetched = client.get(f'{url}/{created["id"]}')
    assert fetched.status_code == 200
    assert json.loads(fetched.data)['category']['is_active'] is False
    assert AuctionConfig.query.count() == 1


def test_category_writes_require_organizer(client, make_user, tournament):
    outsider_headers, _ = make_user('meddler')
    res = client.post(_categories_url(tournament['id']), json={
        'category': 'Gold', 'max_players': 2, 'base_price': 100,
    }, headers=outsider_headers)
    assert res.status_code == 403
    assert 'organizer' in json.loads(res.data)['error']


def test_bid_timer_defaults_when_unset(client, tournament):
    res = client.get(f'/api/tournaments/{tournament["id"]}/bid-timer')
    data = json.loads(res.data)['bid_timer']
    assert data['id'] is None
    assert data['bid_time'] == 10


def test_bid_timer_rejects_out_of_range_without_writing(client, auth_headers, tournament):
    url = f'/api/tournaments/{tournament["id"]}/bid-timer'
    for bad in (4, 121, 0, -10, 'ten', None, 7.5):
        res = client.put(url, json={'bid_time': bad}, headers=auth_headers)
        assert res.status_code == 400
        assert json.loads(res.data)['error'] == 'Bid time must be between 5 and 120 seconds.'
    assert AuctionTimer.query.count() == 0


def test_bid_timer_accepts_bounds(client, auth_headers, tournament):
    url = f'/api/tournaments/{tournament["id"]}/bid-timer'
    assert client.put(url, json={'bid_time': 5}, headers=auth_headers).status_code == 201
    assert client.put(url, json={'bid_time': '120'}, headers=auth_headers).status_code == 200
    assert json.loads(client.get(url).data)['bid_timer']['bid_time'] == 120


def test_bid_timer_second_save_updates_same_row(client, auth_headers, tournament):
    url = f'/api/tournaments/{tournament["id"]}/bid-timer'
    first = client.put(url, json={'bid_time': 15}, headers=auth_headers)
    assert first.status_code == 201
    first_id = json.loads(first.data)['bid_timer']['id']

    second = client.put(url, json={'bid_time': 45}, headers=auth_headers)
    assert second.status_code == 200
    data = json.loads(second.data)
    assert data['message'] == 'Bid timer configuration saved.'
    assert data['bid_timer']['id'] == first_id
    assert data['bid_timer']['bid_time'] == 45
    assert AuctionTimer.query.filter_by(tournament_id=tournament['id']).count() == 1


def test_bid_timer_requires_organizer(client, make_user, tournament):
    outsider_headers, _ = make_user('timer_thief')
    res = client.put(
        f'/api/tournaments/{tournament["id"]}/bid-timer',
        json={'bid_time': 20}, headers=outsider_headers,
    )
    assert res.status_code == 403
    assert AuctionTimer.query.count() == 0
