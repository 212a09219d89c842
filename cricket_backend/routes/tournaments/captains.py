"""Captain directory and voting results."""
from flask import request, jsonify, current_app
from cricket_backend.app import db
from cricket_backend.models import TournamentCaptain
from cricket_backend.auth_utils import login_required
from cricket_backend.routes.tournaments import tournaments_bp
from cricket_backend.routes.tournaments.helpers import (
    _commit,
    _emit_tournament_update,
    _load_organizer_tournament,
    _load_tournament,
)
from cricket_backend.services.validation import clean_text, is_valid_mobile
from cricket_backend.services.voting import summarize_results


def _active_captains(tournament_id):
    return TournamentCaptain.query.filter_by(tournament_id=tournament_id, is_active=True)


@tournaments_bp.route('/<int:tournament_id>/captains', methods=['GET'])
def list_captains(tournament_id):
    tournament, error = _load_tournament(tournament_id)
    if error:
        message, status = error
        return jsonify({'error': message}), status
    captains = _active_captains(tournament.id).order_by(
        TournamentCaptain.created_at.desc(),
        TournamentCaptain.id.desc(),
    ).all()
    return jsonify({'captains': [captain.to_dict() for captain in captains]})


@tournaments_bp.route('/<int:tournament_id>/captains', methods=['POST'])
@login_required
def create_captain(tournament_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'captains',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status
    if not tournament.captain_voting_enabled:
        return jsonify({'error': 'Captain voting is not enabled for this tournament.'}), 400

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload'}), 400
    name = clean_text(data.get('name'), 120)
    mobile = str(data.get('mobile') or '').strip()
    if not name or not mobile:
        return jsonify({'error': 'Name and mobile number are required.'}), 400
    if not is_valid_mobile(mobile):
        return jsonify({'error': 'Please enter a valid mobile number.'}), 400

    # Photos arrive as data URLs straight from the client; stored verbatim.
    captain = TournamentCaptain(
        tournament_id=tournament.id,
        name=name,
        mobile=mobile[:20],
        photo_url=str(data.get('photo_url') or ''),
        created_by=request.current_user.id,
    )
    db.session.add(captain)
    store_error = _commit('Failed to add captain.')
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    current_app.logger.info('Captain %s added to tournament %s', captain.id, tournament.id)
    _emit_tournament_update(tournament_id=tournament.id, reason='captain_added')
    return jsonify({
        'message': f'Captain "{name}" added successfully.',
        'captain': captain.to_dict(),
    }), 201


@tournaments_bp.route('/<int:tournament_id>/captains/<int:captain_id>', methods=['DELETE'])
@login_required
def delete_captain(tournament_id, captain_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'captains',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status
    captain = TournamentCaptain.query.filter_by(id=captain_id, tournament_id=tournament.id).first()
    if not captain:
        return jsonify({'error': 'Captain not found'}), 404

    captain.is_active = False
    store_error = _commit('Failed to remove captain.')
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    _emit_tournament_update(tournament_id=tournament.id, reason='captain_removed')
    return jsonify({'message': 'Captain removed.', 'captain': captain.to_dict()})


@tournaments_bp.route('/<int:tournament_id>/captains/results', methods=['GET'])
def captain_results(tournament_id):
    tournament, error = _load_tournament(tournament_id)
    if error:
        message, status = error
        return jsonify({'error': message}), status
    captains = _active_captains(tournament.id).order_by(TournamentCaptain.votes.desc()).all()
    payload = summarize_results(captains)
    payload['tournament'] = {
        'id': tournament.id,
        'name': tournament.name,
        'is_voting_live': tournament.is_voting_live,
    }
    return jsonify(payload)
