import re

from flask import Blueprint, request, jsonify, current_app
from werkzeug.security import generate_password_hash, check_password_hash
from cricket_backend.app import db
from cricket_backend.models import User, Profile
from cricket_backend.auth_utils import generate_token, login_required, csrf_token_for_bearer
from cricket_backend.services.validation import coerce_bool, is_valid_mobile
from cricket_backend.store import commit_session

auth_bp = Blueprint('auth', __name__)


def _password_complexity_error(raw_password):
    password = str(raw_password or '')
    if len(password) < 8:
        return 'Password must be at least 8 characters long'
    if not re.search(r'[A-Za-z]', password) or not re.search(r'\d', password):
        return 'Password must include at least one letter and one number'
    return None


def _auth_payload(user):
    token = generate_token(user.id)
    return {
        'token': token,
        'csrf_token': csrf_token_for_bearer(token),
        'user': user.to_dict(),
    }


@auth_bp.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True)
    if not data or not data.get('username') or not data.get('email') or not data.get('password'):
        return jsonify({'error': 'Username, email, and password are required'}), 400

    username = str(data['username']).strip()
    email = str(data['email']).strip().lower()
    password_error = _password_complexity_error(data.get('password'))
    if password_error:
        return jsonify({'error': password_error}), 400

    if User.query.filter_by(username=username).first():
        return jsonify({'error': 'Username already taken'}), 409
    if User.query.filter_by(email=email).first():
        return jsonify({'error': 'Email already registered'}), 409

    mobile = str(data.get('mobile') or '').strip()
    if mobile and not is_valid_mobile(mobile):
        return jsonify({'error': 'Please enter a valid mobile number.'}), 400
    registering = coerce_bool(data.get('is_player_registered'))
    if registering and not mobile:
        return jsonify({'error': 'A mobile number is required to register as a player.'}), 400

    user = User(
        username=username,
        email=email,
        password_hash=generate_password_hash(data['password']),
    )
    user.profile = Profile(
        full_name=str(data.get('full_name') or '').strip()[:120],
        mobile=mobile[:20],
        is_player_registered=registering,
    )
    db.session.add(user)
    store_error = commit_session(
        'Failed to register user.',
        conflict_message='Username or email already registered',
    )
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    current_app.logger.info('Registered user %s', user.id)
    return jsonify(_auth_payload(user)), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True)
    if not data or not data.get('email') or not data.get('password'):
        return jsonify({'error': 'Email and password are required'}), 400

    email = str(data['email']).strip().lower()
    user = User.query.filter_by(email=email).first()
    if not user or not check_password_hash(user.password_hash, data['password']):
        current_app.logger.info('Failed login for %s', email)
        return jsonify({'error': 'Invalid email or password'}), 401
    return jsonify(_auth_payload(user))


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'user': request.current_user.to_dict()})
