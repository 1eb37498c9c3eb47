import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from pickup_shared.events import game_created_event
from pickup_shared.game import Game, format_instant
from pickup_shared.roster import RosterChange
from .errors import ConditionFailed, ConflictError, ValidationError
from .event_publisher import EventPublisher
from .game_store import GameStore, Precondition
from .validation import NewGameRequest

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GameRegistry:
    """
    Read/query access to game records and creation of new games.
    Also owns the conditional roster write-back used by RosterEngine.
    """

    def __init__(
        self,
        store: GameStore = None,
        publisher: EventPublisher = None,
        window_days: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.store = store or GameStore()
        self.publisher = publisher or EventPublisher()
        self.window_days = window_days
        self.clock = clock

    def create(self, request: NewGameRequest, requester: str) -> Game:
        """Create a new game owned by `requester` with empty roster and waitlist."""
        if not requester:
            raise ValidationError("An authenticated requester is required", fields=['requester'])

        start_time = request.start_time
        if start_time.tzinfo is None:
            start_time = start_time.replace(tzinfo=timezone.utc)

        game = Game(
            game_id=str(uuid.uuid4()),
            category=request.category,
            name=request.name,
            location=request.location,
            start_time=start_time.astimezone(timezone.utc).replace(microsecond=0),
            duration_mins=request.duration_mins,
            num_teams=request.num_teams,
            team_size=request.team_size,
            signup_fee_cents=request.signup_fee_cents,
            split_fee_cents=request.split_fee_cents,
            owner=requester,
            roster=[],
            waitlist=[],
            version=0
        )
        logger.info(f"Creating game {game.game_id} in {game.category} for {requester}")

        self.store.put(game, overwrite=False)

        self.publisher.publish(game_created_event(
            game.game_id, game.category, game.owner, format_instant(game.start_time)
        ))
        return game

    def get(self, game_id: str) -> Game:
        """Get a game by id. Raises NotFoundError if it does not exist."""
        return self.store.get(game_id)

    def list(self, category: str, limit: Optional[int] = None) -> List[Game]:
        """List games in a category that start now or later, soonest first."""
        now = self.clock()
        until = now + timedelta(days=self.window_days) if self.window_days else None
        games = self.store.query(category, start_from=now, start_until=until, limit=limit)
        logger.debug(f"Found {len(games)} upcoming games in {category}")
        return games

    def update_roster(self, game: Game, change: RosterChange) -> Game:
        """Commit `change` iff the stored game still matches the observed `game`."""
        precondition = Precondition.observed(game)
        try:
            return self.store.conditional_update(
                game.game_id,
                roster=change.roster,
                waitlist=change.waitlist,
                precondition=precondition
            )
        except ConditionFailed as e:
            raise ConflictError(change.action.value, game.game_id) from e
