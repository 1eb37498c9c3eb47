import logging

from pickup_shared.events import (
    player_dropped_event,
    player_joined_event,
    player_promoted_event,
)
from pickup_shared.game import Game
from pickup_shared.roster import (
    ListName,
    RosterChange,
    check_invariants,
    plan_drop,
    plan_register,
)
from .errors import ConflictError
from .event_publisher import EventPublisher
from .game_registry import GameRegistry
from .validation import require_participant

logger = logging.getLogger(__name__)


class RosterEngine:
    """
    Register/drop participants on a single game using optimistic concurrency.

    Every call reads the game fresh, computes the next roster and waitlist,
    and commits through a conditional write. A lost race surfaces as
    ConflictError; the engine never retries on its own, callers re-issue
    the request to get a new read-write cycle.
    """

    def __init__(self, registry: GameRegistry, publisher: EventPublisher = None):
        self.registry = registry
        self.publisher = publisher or registry.publisher

    def register(self, game_id: str, participant: str) -> Game:
        require_participant(participant)
        game = self.registry.get(game_id)

        change = plan_register(game, participant)
        if change is None:
            logger.debug(f"{participant} already registered for game {game_id}")
            return game

        updated = self._commit(game, change)
        logger.info(f"{participant} added to {change.target.value} of game {game_id}")

        waitlisted = change.target == ListName.WAITLIST
        target_list = updated.waitlist if waitlisted else updated.roster
        self.publisher.publish(player_joined_event(
            game_id,
            participant,
            waitlisted=waitlisted,
            position=target_list.index(participant)
        ))
        return updated

    def drop(self, game_id: str, participant: str) -> Game:
        require_participant(participant)
        game = self.registry.get(game_id)

        change = plan_drop(game, participant)
        if change is None:
            logger.debug(f"{participant} not on game {game_id}, nothing to drop")
            return game

        updated = self._commit(game, change)
        logger.info(f"{participant} dropped from {change.target.value} of game {game_id}")

        self.publisher.publish(player_dropped_event(game_id, participant, change.target.value))
        if change.promoted:
            logger.info(f"{change.promoted} promoted from waitlist of game {game_id}")
            self.publisher.publish(player_promoted_event(game_id, change.promoted))
        return updated

    def _commit(self, game: Game, change: RosterChange) -> Game:
        check_invariants(game.game_id, game.capacity, change.roster, change.waitlist)
        logger.debug(
            f"Game {game.game_id} observed roster={len(game.roster)} "
            f"waitlist={len(game.waitlist)} version={game.version}"
        )
        try:
            return self.registry.update_roster(game, change)
        except ConflictError:
            logger.warning(
                f"Conflict on {change.action.value} for {change.participant} in game {game.game_id}"
            )
            raise
