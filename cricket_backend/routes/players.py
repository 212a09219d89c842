"""Player profile routes: self-registration and lookup by mobile number."""
from flask import Blueprint, request, jsonify, current_app
from cricket_backend.app import db
from cricket_backend.models import Profile
from cricket_backend.auth_utils import login_required
from cricket_backend.services.validation import coerce_bool, is_valid_mobile
from cricket_backend.store import commit_session

players_bp = Blueprint('players', __name__)


def find_registered_players_by_mobile(mobile):
    """Exact-match lookup restricted to registered players."""
    return Profile.query.filter_by(
        mobile=str(mobile or '').strip(),
        is_player_registered=True,
    ).order_by(Profile.id.asc()).all()


@players_bp.route('/me', methods=['GET'])
@login_required
def get_my_profile():
    profile = request.current_user.profile
    return jsonify({'profile': profile.to_dict() if profile else None})


@players_bp.route('/me', methods=['PUT'])
@login_required
def update_my_profile():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload'}), 400

    user = request.current_user
    profile = user.profile

    full_name = (profile.full_name or '') if profile else ''
    mobile = (profile.mobile or '') if profile else ''
    registered = bool(profile and profile.is_player_registered)
    if 'full_name' in data:
        full_name = str(data.get('full_name') or '').strip()[:120]
    if 'mobile' in data:
        mobile = str(data.get('mobile') or '').strip()
        if mobile and not is_valid_mobile(mobile):
            return jsonify({'error': 'Please enter a valid mobile number.'}), 400
        mobile = mobile[:20]
    if 'is_player_registered' in data:
        registered = coerce_bool(data.get('is_player_registered'))
    # Registered players stay reachable by mobile search.
    if registered and not mobile:
        return jsonify({'error': 'A mobile number is required to register as a player.'}), 400

    if profile is None:
        profile = Profile(user_id=user.id)
        db.session.add(profile)
    profile.full_name = full_name
    profile.mobile = mobile
    profile.is_player_registered = registered

    store_error = commit_session('Failed to update profile.')
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status
    current_app.logger.info('Profile %s updated by user %s', profile.id, user.id)
    return jsonify({'profile': profile.to_dict()})


@players_bp.route('/search', methods=['GET'])
@login_required
def search_players():
    mobile = str(request.args.get('mobile') or '').strip()
    if not is_valid_mobile(mobile):
        return jsonify({'error': 'Please enter a valid mobile number.'}), 400
    players = find_registered_players_by_mobile(mobile)
    payload = {'players': [player.to_dict() for player in players]}
    if not players:
        payload['message'] = 'No registered player found with this mobile number.'
    return jsonify(payload)
