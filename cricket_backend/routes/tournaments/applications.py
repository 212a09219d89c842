"""Player applications to tournaments."""
from flask import request, jsonify, current_app
from cricket_backend.app import db
from cricket_backend.models import TournamentApplication
from cricket_backend.auth_utils import login_required
from cricket_backend.routes.tournaments import tournaments_bp
from cricket_backend.routes.tournaments.helpers import (
    _commit,
    _emit_tournament_update,
    _is_organizer,
    _load_organizer_tournament,
    _load_tournament,
)
from cricket_backend.services.validation import clean_text

_REVIEW_ACTIONS = {'approve': 'approved', 'reject': 'rejected'}


@tournaments_bp.route('/<int:tournament_id>/applications', methods=['POST'])
@login_required
def apply_to_tournament(tournament_id):
    tournament, error = _load_tournament(tournament_id)
    if error:
        message, status = error
        return jsonify({'error': message}), status

    user = request.current_user
    if _is_organizer(tournament, user.id):
        return jsonify({'error': 'Organizers cannot apply to their own tournament.'}), 400
    if not user.profile or not user.profile.is_player_registered:
        return jsonify({'error': 'Register as a player before applying.'}), 403
    existing = TournamentApplication.query.filter_by(
        tournament_id=tournament.id, user_id=user.id,
    ).first()
    if existing:
        return jsonify({'error': 'You have already applied to this tournament.'}), 409

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload'}), 400
    application = TournamentApplication(
        tournament_id=tournament.id,
        user_id=user.id,
        status='pending',
        message=clean_text(data.get('message'), 1000),
    )
    db.session.add(application)
    store_error = _commit(
        'Failed to submit application.',
        conflict_message='You have already applied to this tournament.',
    )
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    current_app.logger.info('User %s applied to tournament %s', user.id, tournament_id)
    _emit_tournament_update(tournament_id=tournament_id, reason='application_submitted')
    return jsonify({'application': application.to_dict()}), 201


@tournaments_bp.route('/<int:tournament_id>/applications', methods=['GET'])
@login_required
def list_applications(tournament_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'applications',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status
    status_filter = (request.args.get('status') or '').strip().lower()
    query = TournamentApplication.query.filter_by(tournament_id=tournament.id)
    if status_filter:
        query = query.filter(TournamentApplication.status == status_filter)
    applications = query.order_by(
        TournamentApplication.created_at.asc(),
        TournamentApplication.id.asc(),
    ).all()
    return jsonify({'applications': [a.to_dict() for a in applications]})


@tournaments_bp.route(
    '/<int:tournament_id>/applications/<int:application_id>/review', methods=['POST'],
)
@login_required
def review_application(tournament_id, application_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'applications',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status
    application = TournamentApplication.query.filter_by(
        id=application_id, tournament_id=tournament.id,
    ).first()
    if not application:
        return jsonify({'error': 'Application not found'}), 404

    data = request.get_json(silent=True) or {}
    action = str(data.get('action') or '').strip().lower()
    if action not in _REVIEW_ACTIONS:
        return jsonify({'error': 'action must be approve or reject'}), 400

    application.status = _REVIEW_ACTIONS[action]
    store_error = _commit('Failed to review application.')
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    _emit_tournament_update(tournament_id=tournament.id, reason=f'application_{application.status}')
    return jsonify({'application': application.to_dict()})
