"""Team formation routes."""
from flask import request, jsonify, current_app
from cricket_backend.app import db
from cricket_backend.models import Team, Profile
from cricket_backend.auth_utils import login_required
from cricket_backend.routes.players import find_registered_players_by_mobile
from cricket_backend.routes.tournaments import tournaments_bp
from cricket_backend.routes.tournaments.helpers import (
    _commit,
    _emit_tournament_update,
    _load_organizer_tournament,
    _load_tournament,
    team_formation_state,
)
from cricket_backend.services.validation import (
    clean_text, is_blank, is_valid_mobile, parse_int, parse_number,
)


def _resolve_captain(data):
    """Return (user_id_or_None, error) from captain_id or captain_mobile."""
    raw_captain_id = data.get('captain_id')
    if not is_blank(raw_captain_id):
        captain_id = parse_int(raw_captain_id)
        profile = Profile.query.filter_by(
            user_id=captain_id, is_player_registered=True,
        ).first() if captain_id else None
        if not profile:
            return None, ('Captain must be a registered player.', 400)
        return profile.user_id, None

    mobile = str(data.get('captain_mobile') or '').strip()
    if not mobile:
        return None, None
    if not is_valid_mobile(mobile):
        return None, ('Please enter a valid mobile number.', 400)
    players = find_registered_players_by_mobile(mobile)
    if not players:
        return None, ('No registered player found with this mobile number.', 404)
    return players[0].user_id, None


def _ordered_teams(tournament_id):
    return Team.query.filter_by(tournament_id=tournament_id).order_by(
        Team.created_at.asc(),
        Team.id.asc(),
    ).all()


@tournaments_bp.route('/<int:tournament_id>/teams', methods=['GET'])
def list_teams(tournament_id):
    tournament, error = _load_tournament(tournament_id)
    if error:
        message, status = error
        return jsonify({'error': message}), status
    teams = _ordered_teams(tournament.id)
    return jsonify({
        'teams': [team.to_dict() for team in teams],
        'formation': team_formation_state(tournament, len(teams)),
    })


@tournaments_bp.route('/<int:tournament_id>/teams', methods=['POST'])
@login_required
def create_team(tournament_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'teams',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload'}), 400

    name = clean_text(data.get('name'), 200)
    if not name:
        return jsonify({'error': 'Team name is required.'}), 400
    if 'budget' in data or 'budget_remaining' in data:
        budget = parse_number(data.get('budget', data.get('budget_remaining')))
    else:
        # Teams start with the tournament's purse unless one is given.
        budget = tournament.team_budget if (tournament.team_budget or 0) > 0 else None
    if budget is None or budget <= 0:
        return jsonify({'error': 'Please enter a valid team budget.'}), 400

    formation = team_formation_state(tournament, Team.query.filter_by(tournament_id=tournament.id).count())
    if not formation['can_create_more']:
        return jsonify({'error': formation['banner']}), 409

    captain_id, captain_error = _resolve_captain(data)
    if captain_error:
        message, status = captain_error
        return jsonify({'error': message}), status

    team = Team(
        tournament_id=tournament.id,
        name=name,
        captain_id=captain_id,
        owner_id=request.current_user.id,
        budget_remaining=budget,
        logo_url=str(data.get('logo_url') or '').strip(),
    )
    db.session.add(team)
    store_error = _commit('Failed to create team.')
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    current_app.logger.info('Team %s created in tournament %s', team.id, tournament.id)
    _emit_tournament_update(tournament_id=tournament.id, reason='team_created')
    teams = _ordered_teams(tournament.id)
    return jsonify({
        'message': f'Team "{name}" created successfully.',
        'team': team.to_dict(),
        'formation': team_formation_state(tournament, len(teams)),
    }), 201
