import logging
from typing import Optional

import redis

from pickup_shared.events import Event, EventType

logger = logging.getLogger(__name__)

GLOBAL_CHANNEL = 'global:announcements'


def game_channel(game_id: str) -> str:
    return f'game:{game_id}:events'


class EventPublisher:
    """
    Fans roster events out over Redis pub/sub.
    Game creation goes to the global channel; roster changes go to the
    game's own channel.
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None):
        self.redis = redis_client

    @classmethod
    def from_url(cls, redis_url: str) -> "EventPublisher":
        if not redis_url:
            logger.info("EventPublisher running without Redis (events are not published)")
            return cls(None)
        return cls(redis.from_url(redis_url, decode_responses=True))

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    def publish(self, event: Event) -> bool:
        """Publish after the write has committed; failures are logged, never raised."""
        if not self.enabled:
            return False

        channel = GLOBAL_CHANNEL if event.type == EventType.GAME_CREATED else game_channel(event.game_id)
        try:
            self.redis.publish(channel, event.to_json())
            logger.debug(f"Published {event.type.value} to {channel}")
            return True
        except redis.RedisError as e:
            logger.error(f"Failed to publish {event.type.value} for game {event.game_id}: {e}")
            return False
