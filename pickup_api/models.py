from flask_sqlalchemy import SQLAlchemy

from pickup_shared.game import Game, from_epoch_seconds, to_epoch_seconds

db = SQLAlchemy()


class GameRecord(db.Model):
    __tablename__ = 'games'

    game_id = db.Column(db.String(64), primary_key=True)
    category = db.Column(db.String(100), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(200), nullable=False)
    start_time = db.Column(db.BigInteger, nullable=False)  # Unix seconds, UTC
    duration_mins = db.Column(db.Integer, nullable=False)
    num_teams = db.Column(db.Integer, nullable=False)
    team_size = db.Column(db.Integer, nullable=False)
    signup_fee_cents = db.Column(db.Integer, nullable=False, default=0)
    split_fee_cents = db.Column(db.Integer, nullable=False, default=0)
    owner = db.Column(db.String(320), nullable=False)

    roster = db.Column(db.JSON, nullable=False, default=list)
    waitlist = db.Column(db.JSON, nullable=False, default=list)

    # Precondition columns for conditional roster writes
    roster_size = db.Column(db.Integer, nullable=False, default=0)
    waitlist_size = db.Column(db.Integer, nullable=False, default=0)
    version = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.Index('ix_games_category_start_time', 'category', 'start_time'),
    )

    @classmethod
    def from_game(cls, game: Game) -> 'GameRecord':
        return cls(
            game_id=game.game_id,
            category=game.category,
            name=game.name,
            location=game.location,
            start_time=to_epoch_seconds(game.start_time),
            duration_mins=game.duration_mins,
            num_teams=game.num_teams,
            team_size=game.team_size,
            signup_fee_cents=game.signup_fee_cents,
            split_fee_cents=game.split_fee_cents,
            owner=game.owner,
            roster=list(game.roster),
            waitlist=list(game.waitlist),
            roster_size=len(game.roster),
            waitlist_size=len(game.waitlist),
            version=game.version,
        )

    def to_game(self) -> Game:
        return Game(
            game_id=self.game_id,
            category=self.category,
            name=self.name,
            location=self.location,
            start_time=from_epoch_seconds(self.start_time),
            duration_mins=self.duration_mins,
            num_teams=self.num_teams,
            team_size=self.team_size,
            signup_fee_cents=self.signup_fee_cents,
            split_fee_cents=self.split_fee_cents,
            owner=self.owner,
            roster=list(self.roster or []),
            waitlist=list(self.waitlist or []),
            version=self.version or 0,
        )
