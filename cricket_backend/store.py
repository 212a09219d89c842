"""Commit seam shared by every write route."""
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from cricket_backend.app import db


def commit_session(fallback_message, conflict_message=None):
    """Commit the session. Returns None on success, else (message, status).

    Store failures roll back, are logged, and map to 500 with ``fallback_message``.
    When ``conflict_message`` is given, an IntegrityError maps to 409 instead.
    """
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        if conflict_message:
            return conflict_message, 409
        current_app.logger.exception('Store write failed: %s', fallback_message)
        return fallback_message, 500
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception('Store write failed: %s', fallback_message)
        message = fallback_message
        if current_app.config.get('DEBUG') and getattr(exc, 'orig', None):
            message = str(exc.orig)
        return message, 500
    return None
