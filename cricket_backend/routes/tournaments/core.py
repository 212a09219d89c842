"""Tournament CRUD and lifecycle flag toggles."""
from flask import request, jsonify, current_app
from cricket_backend.app import db
from cricket_backend.models import Tournament, Team
from cricket_backend.auth_utils import login_required, optional_current_user
from cricket_backend.routes.tournaments import tournaments_bp
from cricket_backend.routes.tournaments.helpers import (
    _commit,
    _emit_tournament_update,
    _is_organizer,
    _load_organizer_tournament,
    _load_tournament,
    team_formation_state,
)
from cricket_backend.services.validation import (
    clean_text, coerce_bool, is_blank, parse_int, parse_number,
)

_MAX_LIMIT = 100
_MIN_LIMIT = 1

# flag column -> (started title, started text, stopped title, stopped text)
_FLAG_NOTIFICATIONS = {
    'is_voting_live': (
        'Voting Started', 'Captain voting is now live!',
        'Voting Stopped', 'Captain voting has been stopped.',
    ),
    'is_auction_live': (
        'Auction Started', 'The auction is now live!',
        'Auction Stopped', 'The auction has been stopped.',
    ),
}


def _team_count(tournament_id):
    return Team.query.filter_by(tournament_id=tournament_id).count()


def serialize_tournament(tournament, viewer=None):
    data = tournament.to_dict()
    data['team_formation'] = team_formation_state(tournament, _team_count(tournament.id))
    data['is_organizer'] = _is_organizer(tournament, viewer.id) if viewer else False
    return data


def _validate_tournament_fields(data, partial=False):
    """Return (fields, error_message) for create/update payloads."""
    fields = {}
    if not partial or 'name' in data:
        name = clean_text(data.get('name'), 200)
        if not name:
            return None, 'Tournament name is required.'
        fields['name'] = name
    if 'description' in data:
        fields['description'] = clean_text(data.get('description'), 4000)
    if not partial or 'number_of_teams' in data:
        number_of_teams = parse_int(data.get('number_of_teams'))
        if number_of_teams is None or number_of_teams <= 0:
            return None, 'number_of_teams must be a positive whole number.'
        fields['number_of_teams'] = number_of_teams
    if not partial or 'team_budget' in data:
        raw_budget = data.get('team_budget')
        team_budget = 0.0 if (not partial and is_blank(raw_budget)) else parse_number(raw_budget)
        if team_budget is None or team_budget < 0:
            return None, 'team_budget must be zero or a positive number.'
        fields['team_budget'] = team_budget
    if not partial or 'captain_voting_enabled' in data:
        fields['captain_voting_enabled'] = coerce_bool(data.get('captain_voting_enabled'))
    return fields, None


@tournaments_bp.route('', methods=['GET'])
def list_tournaments():
    organizer_id = request.args.get('organizer_id', type=int)
    limit = request.args.get('limit', 25, type=int)
    limit = max(_MIN_LIMIT, min(limit or 25, _MAX_LIMIT))

    query = Tournament.query
    if organizer_id:
        query = query.filter(Tournament.organizer_id == organizer_id)
    tournaments = query.order_by(
        Tournament.created_at.desc(),
        Tournament.id.desc(),
    ).limit(limit).all()
    return jsonify({'tournaments': [t.to_dict() for t in tournaments]})


@tournaments_bp.route('', methods=['POST'])
@login_required
def create_tournament():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload'}), 400

    fields, error = _validate_tournament_fields(data)
    if error:
        return jsonify({'error': error}), 400

    tournament = Tournament(organizer_id=request.current_user.id, **fields)
    db.session.add(tournament)
    store_error = _commit('Failed to create tournament.')
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    current_app.logger.info(
        'Tournament %s created by user %s', tournament.id, request.current_user.id,
    )
    _emit_tournament_update(tournament_id=tournament.id, reason='tournament_created')
    return jsonify({'tournament': serialize_tournament(tournament, request.current_user)}), 201


@tournaments_bp.route('/<int:tournament_id>', methods=['GET'])
def get_tournament(tournament_id):
    tournament, error = _load_tournament(tournament_id)
    if error:
        message, status = error
        return jsonify({'error': message}), status
    return jsonify({'tournament': serialize_tournament(tournament, optional_current_user())})


@tournaments_bp.route('/<int:tournament_id>', methods=['PATCH'])
@login_required
def update_tournament(tournament_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'this tournament',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload'}), 400
    fields, validation_error = _validate_tournament_fields(data, partial=True)
    if validation_error:
        return jsonify({'error': validation_error}), 400

    for key, value in fields.items():
        setattr(tournament, key, value)
    store_error = _commit('Failed to update tournament.')
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    _emit_tournament_update(tournament_id=tournament.id, reason='tournament_updated')
    return jsonify({'tournament': serialize_tournament(tournament, request.current_user)})


@tournaments_bp.route('/<int:tournament_id>', methods=['DELETE'])
@login_required
def delete_tournament(tournament_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'this tournament',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status

    db.session.delete(tournament)
    store_error = _commit('Failed to delete tournament.')
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    current_app.logger.info('Tournament %s deleted', tournament_id)
    _emit_tournament_update(tournament_id=tournament_id, reason='tournament_deleted')
    return jsonify({'message': 'Tournament deleted.'})


def _toggle_flag(tournament, flag, fallback_message):
    """Flip one lifecycle flag and commit. Returns (payload, error)."""
    was_live = bool(getattr(tournament, flag))
    setattr(tournament, flag, not was_live)
    store_error = _commit(fallback_message)
    if store_error:
        return None, store_error

    started_title, started_text, stopped_title, stopped_text = _FLAG_NOTIFICATIONS[flag]
    payload = {
        'title': stopped_title if was_live else started_title,
        'description': stopped_text if was_live else started_text,
        'tournament': tournament.to_dict(),
    }
    current_app.logger.info('Tournament %s %s -> %s', tournament.id, flag, not was_live)
    _emit_tournament_update(tournament_id=tournament.id, reason=f'{flag}_toggled')
    return payload, None


@tournaments_bp.route('/<int:tournament_id>/voting/toggle', methods=['POST'])
@login_required
def toggle_voting(tournament_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'captain voting',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status
    if not tournament.captain_voting_enabled:
        return jsonify({'error': 'Captain voting is not enabled for this tournament.'}), 400

    payload, toggle_error = _toggle_flag(tournament, 'is_voting_live', 'Failed to toggle voting.')
    if toggle_error:
        message, status = toggle_error
        return jsonify({'error': message}), status
    return jsonify(payload)


@tournaments_bp.route('/<int:tournament_id>/auction/toggle', methods=['POST'])
@login_required
def toggle_auction(tournament_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'the auction',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status

    payload, toggle_error = _toggle_flag(tournament, 'is_auction_live', 'Failed to toggle auction.')
    if toggle_error:
        message, status = toggle_error
        return jsonify({'error': message}), status
    return jsonify(payload)
