"""Tournament management — shared helpers and constants."""
from flask import current_app
from cricket_backend.app import db, socketio
from cricket_backend.models import Tournament
from cricket_backend.store import commit_session
from cricket_backend.time_utils import utcnow_naive

CATEGORY_OPTIONS = (
    'Diamond A',
    'Diamond B',
    'Platinum A',
    'Platinum',
    'Gold',
    'Silver',
)
BID_TIME_MIN = 5
BID_TIME_MAX = 120
DEFAULT_BID_TIME = 10
APPLICATION_STATUSES = {'pending', 'approved', 'rejected'}


def _is_organizer(tournament, user_id):
    return bool(tournament and user_id is not None and int(tournament.organizer_id) == int(user_id))


def _load_tournament(tournament_id):
    """Return (tournament, error) where error is a (message, status) pair."""
    tournament = db.session.get(Tournament, tournament_id)
    if not tournament:
        return None, ('Tournament not found', 404)
    return tournament, None


def _load_organizer_tournament(tournament_id, user, subject):
    """Like _load_tournament, but also requires the caller to be the organizer."""
    tournament, error = _load_tournament(tournament_id)
    if error:
        return None, error
    if not _is_organizer(tournament, user.id):
        return None, (f'Only the organizer can manage {subject}.', 403)
    return tournament, None


def _commit(fallback_message, conflict_message=None):
    return commit_session(fallback_message, conflict_message)


def team_formation_state(tournament, team_count):
    can_create_more = team_count < tournament.number_of_teams
    return {
        'team_count': team_count,
        'number_of_teams': tournament.number_of_teams,
        'can_create_more': can_create_more,
        'banner': None if can_create_more else (
            f'All {tournament.number_of_teams} teams have been created!'
        ),
    }


def _emit_tournament_update(tournament_id=None, reason=''):
    if not current_app.config.get('LIVE_UPDATES_ENABLED', True):
        return
    socketio.emit('tournament_update', {
        'tournament_id': tournament_id,
        'reason': reason,
        'updated_at': utcnow_naive().isoformat(),
    })
