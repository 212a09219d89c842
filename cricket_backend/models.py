from cricket_backend.app import db
from cricket_backend.time_utils import utcnow_naive


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    profile = db.relationship(
        'Profile', backref='user', uselist=False, cascade='all, delete-orphan',
    )

    def to_dict(self):
        return {
            'id': self.id, 'username': self.username, 'email': self.email,
            'created_at': _iso(self.created_at),
            'profile': self.profile.to_dict() if self.profile else None,
        }


class Profile(db.Model):
    """Player-facing profile; captains are looked up here by mobile number."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), unique=True, nullable=False)
    full_name = db.Column(db.String(120), default='')
    mobile = db.Column(db.String(20), default='')
    is_player_registered = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    __table_args__ = (
        db.Index('ix_profile_mobile_registered', 'mobile', 'is_player_registered'),
    )

    def to_dict(self):
        return {
            'id': self.id, 'user_id': self.user_id,
            'full_name': self.full_name, 'mobile': self.mobile,
            'is_player_registered': self.is_player_registered,
        }


# ── Tournaments ───────────────────────────────────────────────────────

class Tournament(db.Model):
    """Organizer-owned tournament; the boolean flags gate voting and auction workflows."""
    id = db.Column(db.Integer, primary_key=True)
    organizer_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default='')
    number_of_teams = db.Column(db.Integer, nullable=False)
    team_budget = db.Column(db.Float, default=0.0, nullable=False)
    captain_voting_enabled = db.Column(db.Boolean, default=False, nullable=False)
    is_voting_live = db.Column(db.Boolean, default=False, nullable=False)
    is_auction_live = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())
    updated_at = db.Column(
        db.DateTime, default=lambda: utcnow_naive(), onupdate=lambda: utcnow_naive(),
    )

    __table_args__ = (
        db.CheckConstraint('number_of_teams > 0', name='ck_tournament_number_of_teams'),
    )

    organizer = db.relationship('User', backref='organized_tournaments')
    auction_configs = db.relationship(
        'AuctionConfig', backref='tournament', cascade='all, delete-orphan',
    )
    auction_timer = db.relationship(
        'AuctionTimer', backref='tournament', uselist=False, cascade='all, delete-orphan',
    )
    teams = db.relationship(
        'Team', backref='tournament', cascade='all, delete-orphan',
    )
    captains = db.relationship(
        'TournamentCaptain', backref='tournament', cascade='all, delete-orphan',
    )
    applications = db.relationship(
        'TournamentApplication', backref='tournament', cascade='all, delete-orphan',
    )

    def to_dict(self):
        return {
            'id': self.id,
            'organizer_id': self.organizer_id,
            'name': self.name,
            'description': self.description,
            'number_of_teams': self.number_of_teams,
            'team_budget': self.team_budget,
            'captain_voting_enabled': self.captain_voting_enabled,
            'is_voting_live': self.is_voting_live,
            'is_auction_live': self.is_auction_live,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class AuctionConfig(db.Model):
    """Auction category tier for a tournament. Retired rows keep is_active=False."""
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False)
    category = db.Column(db.String(40), nullable=False)
    max_players = db.Column(db.Integer, default=1, nullable=False)
    base_price = db.Column(db.Float, default=0.0, nullable=False)
    created_by = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())
    updated_at = db.Column(
        db.DateTime, default=lambda: utcnow_naive(), onupdate=lambda: utcnow_naive(),
    )

    __table_args__ = (
        db.Index('ix_auction_config_tournament_active', 'tournament_id', 'is_active'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'category': self.category,
            'max_players': self.max_players,
            'base_price': self.base_price,
            'created_by': self.created_by,
            'is_active': self.is_active,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class AuctionTimer(db.Model):
    """Stored bid duration in seconds; not a running clock."""
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(
        db.Integer, db.ForeignKey('tournament.id'), nullable=False, unique=True,
    )
    bid_time = db.Column(db.Integer, default=10, nullable=False)
    created_by = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())
    updated_at = db.Column(
        db.DateTime, default=lambda: utcnow_naive(), onupdate=lambda: utcnow_naive(),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'bid_time': self.bid_time,
            'is_active': self.is_active,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Team(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    captain_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    budget_remaining = db.Column(db.Float, nullable=False)
    logo_url = db.Column(db.Text, default='')
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    captain = db.relationship('User', foreign_keys=[captain_id], backref='captained_teams')

    def to_dict(self):
        captain_profile = self.captain.profile if self.captain else None
        return {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'name': self.name,
            'captain_id': self.captain_id,
            'captain': captain_profile.to_dict() if captain_profile else None,
            'owner_id': self.owner_id,
            'budget_remaining': self.budget_remaining,
            'logo_url': self.logo_url,
            'created_at': _iso(self.created_at),
        }


class TournamentCaptain(db.Model):
    """Captain candidate for voting. Votes are only ever read here."""
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    mobile = db.Column(db.String(20), nullable=False)
    photo_url = db.Column(db.Text, default='')
    votes = db.Column(db.Integer, default=0, nullable=False)
    created_by = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    __table_args__ = (
        db.CheckConstraint('votes >= 0', name='ck_tournament_captain_votes'),
        db.Index('ix_tournament_captain_tournament_active', 'tournament_id', 'is_active'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'name': self.name,
            'mobile': self.mobile,
            'photo_url': self.photo_url,
            'votes': self.votes,
            'is_active': self.is_active,
            'created_at': _iso(self.created_at),
        }


class TournamentApplication(db.Model):
    """A registered player's request to take part in a tournament."""
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    status = db.Column(db.String(20), default='pending')  # pending, approved, rejected
    message = db.Column(db.Text, default='')
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())
    updated_at = db.Column(
        db.DateTime, default=lambda: utcnow_naive(), onupdate=lambda: utcnow_naive(),
    )

    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'user_id', name='uq_tournament_application_unique'),
    )

    user = db.relationship('User', backref='tournament_applications')

    def to_dict(self):
        profile = self.user.profile if self.user else None
        return {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'user_id': self.user_id,
            'status': self.status,
            'message': self.message,
            'player': profile.to_dict() if profile else None,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
