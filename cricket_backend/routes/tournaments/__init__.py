"""Tournament management — blueprint registration."""
from flask import Blueprint

tournaments_bp = Blueprint('tournaments', __name__)

# Route modules register their routes by importing tournaments_bp.
# These imports MUST come after tournaments_bp is defined.
from cricket_backend.routes.tournaments import core, auction, teams, captains, applications  # noqa: E402, F401
