"""Auction configuration: category tiers and the bid timer."""
from flask import request, jsonify, current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from cricket_backend.app import db
from cricket_backend.models import AuctionConfig, AuctionTimer
from cricket_backend.auth_utils import login_required
from cricket_backend.routes.tournaments import tournaments_bp
from cricket_backend.routes.tournaments.helpers import (
    BID_TIME_MAX,
    BID_TIME_MIN,
    CATEGORY_OPTIONS,
    DEFAULT_BID_TIME,
    _commit,
    _emit_tournament_update,
    _load_organizer_tournament,
    _load_tournament,
)
from cricket_backend.services.validation import is_blank, parse_int, parse_number

_BID_TIME_ERROR = f'Bid time must be between {BID_TIME_MIN} and {BID_TIME_MAX} seconds.'


def _category_fields(data, partial=False):
    """Return (fields, error_message). Numeric fields arrive as text from forms."""
    keys = ('category', 'max_players', 'base_price')
    if not partial and any(is_blank(data.get(key)) for key in keys):
        return None, 'All fields are required.'

    fields = {}
    if 'category' in data:
        category = str(data.get('category') or '').strip()
        if category not in CATEGORY_OPTIONS:
            return None, 'Unknown category. Choose one of: ' + ', '.join(CATEGORY_OPTIONS) + '.'
        fields['category'] = category
    if 'max_players' in data:
        max_players = parse_int(data.get('max_players'))
        if max_players is None or max_players < 1:
            return None, 'Max players must be at least 1.'
        fields['max_players'] = max_players
    if 'base_price' in data:
        base_price = parse_number(data.get('base_price'))
        if base_price is None or base_price < 0:
            return None, 'Base price must be zero or more.'
        fields['base_price'] = base_price
    return fields, None


def _config_for_tournament(tournament_id, config_id):
    return AuctionConfig.query.filter_by(id=config_id, tournament_id=tournament_id).first()


@tournaments_bp.route('/categories/options', methods=['GET'])
def category_options():
    return jsonify({'categories': list(CATEGORY_OPTIONS)})


@tournaments_bp.route('/<int:tournament_id>/categories', methods=['GET'])
def list_categories(tournament_id):
    tournament, error = _load_tournament(tournament_id)
    if error:
        message, status = error
        return jsonify({'error': message}), status
    configs = AuctionConfig.query.filter_by(
        tournament_id=tournament.id,
        is_active=True,
    ).order_by(
        AuctionConfig.created_at.asc(),
        AuctionConfig.id.asc(),
    ).all()
    return jsonify({'categories': [config.to_dict() for config in configs]})


@tournaments_bp.route('/<int:tournament_id>/categories/<int:config_id>', methods=['GET'])
def get_category(tournament_id, config_id):
    config = _config_for_tournament(tournament_id, config_id)
    if not config:
        return jsonify({'error': 'Category not found'}), 404
    return jsonify({'category': config.to_dict()})


@tournaments_bp.route('/<int:tournament_id>/categories', methods=['POST'])
@login_required
def create_category(tournament_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'auction categories',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload'}), 400
    fields, validation_error = _category_fields(data)
    if validation_error:
        return jsonify({'error': validation_error}), 400

    config = AuctionConfig(
        tournament_id=tournament.id,
        created_by=request.current_user.id,
        **fields,
    )
    db.session.add(config)
    store_error = _commit('Failed to save category.')
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    current_app.logger.info('Category %s added to tournament %s', config.id, tournament.id)
    _emit_tournament_update(tournament_id=tournament.id, reason='category_added')
    return jsonify({'message': 'Category added.', 'category': config.to_dict()}), 201


@tournaments_bp.route('/<int:tournament_id>/categories/<int:config_id>', methods=['PATCH', 'PUT'])
@login_required
def update_category(tournament_id, config_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'auction categories',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status
    config = _config_for_tournament(tournament.id, config_id)
    if not config:
        return jsonify({'error': 'Category not found'}), 404

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload'}), 400
    fields, validation_error = _category_fields(data, partial=request.method == 'PATCH')
    if validation_error:
        return jsonify({'error': validation_error}), 400

    for key, value in fields.items():
        setattr(config, key, value)
    store_error = _commit('Failed to save category.')
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    _emit_tournament_update(tournament_id=tournament.id, reason='category_updated')
    return jsonify({'message': 'Category updated.', 'category': config.to_dict()})


@tournaments_bp.route('/<int:tournament_id>/categories/<int:config_id>', methods=['DELETE'])
@login_required
def delete_category(tournament_id, config_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'auction categories',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status
    config = _config_for_tournament(tournament.id, config_id)
    if not config:
        return jsonify({'error': 'Category not found'}), 404

    config.is_active = False
    store_error = _commit('Failed to delete category.')
    if store_error:
        message, status = store_error
        return jsonify({'error': message}), status

    current_app.logger.info('Category %s retired on tournament %s', config.id, tournament.id)
    _emit_tournament_update(tournament_id=tournament.id, reason='category_deleted')
    return jsonify({'message': 'Category deleted.', 'category': config.to_dict()})


# ── Bid timer ─────────────────────────────────────────────────────────

@tournaments_bp.route('/<int:tournament_id>/bid-timer', methods=['GET'])
def get_bid_timer(tournament_id):
    tournament, error = _load_tournament(tournament_id)
    if error:
        message, status = error
        return jsonify({'error': message}), status
    timer = AuctionTimer.query.filter_by(tournament_id=tournament.id).first()
    if not timer:
        return jsonify({'bid_timer': {
            'id': None,
            'tournament_id': tournament.id,
            'bid_time': DEFAULT_BID_TIME,
        }})
    return jsonify({'bid_timer': timer.to_dict()})


@tournaments_bp.route('/<int:tournament_id>/bid-timer', methods=['PUT', 'POST'])
@login_required
def save_bid_timer(tournament_id):
    tournament, error = _load_organizer_tournament(
        tournament_id, request.current_user, 'the bid timer',
    )
    if error:
        message, status = error
        return jsonify({'error': message}), status

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON payload'}), 400
    bid_time = parse_int(data.get('bid_time'))
    if bid_time is None or bid_time < BID_TIME_MIN or bid_time > BID_TIME_MAX:
        return jsonify({'error': _BID_TIME_ERROR}), 400

    created = False
    timer = AuctionTimer.query.filter_by(tournament_id=tournament.id).first()
    if timer:
        timer.bid_time = bid_time
    else:
        timer = AuctionTimer(
            tournament_id=tournament.id,
            bid_time=bid_time,
            created_by=request.current_user.id,
        )
        db.session.add(timer)
        try:
            db.session.commit()
            created = True
        except IntegrityError:
            # Another request inserted the row first; fall through to an update.
            db.session.rollback()
            timer = AuctionTimer.query.filter_by(tournament_id=tournament_id).first()
            if not timer:
                current_app.logger.error('Bid timer upsert lost row for tournament %s', tournament_id)
                return jsonify({'error': 'Failed to save timer config.'}), 500
            timer.bid_time = bid_time
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception('Bid timer insert failed for tournament %s', tournament_id)
            return jsonify({'error': 'Failed to save timer config.'}), 500

    if not created:
        store_error = _commit('Failed to save timer config.')
        if store_error:
            message, status = store_error
            return jsonify({'error': message}), status

    current_app.logger.info('Bid timer for tournament %s set to %ss', tournament.id, bid_time)
    _emit_tournament_update(tournament_id=tournament.id, reason='bid_timer_saved')
    return jsonify({
        'message': 'Bid timer configuration saved.',
        'bid_timer': timer.to_dict(),
    }), 201 if created else 200
