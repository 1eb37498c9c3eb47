from enum import Enum
from dataclasses import dataclass
from datetime import datetime, timezone
import json


class EventType(str, Enum):
    # Game lifecycle
    GAME_CREATED = "game.created"

    # Roster changes
    PLAYER_REGISTERED = "player.registered"
    PLAYER_WAITLISTED = "player.waitlisted"
    PLAYER_DROPPED = "player.dropped"
    PLAYER_PROMOTED = "player.promoted"


@dataclass
class Event:
    type: EventType
    game_id: str
    timestamp: str = None
    data: dict = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ')
        if self.data is None:
            self.data = {}

    def to_dict(self) -> dict:
        return {
            "type": self.type.value if isinstance(self.type, EventType) else self.type,
            "game_id": self.game_id,
            "timestamp": self.timestamp,
            "data": self.data
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        return cls(
            type=EventType(data["type"]) if data["type"] in [e.value for e in EventType] else data["type"],
            game_id=data["game_id"],
            timestamp=data.get("timestamp"),
            data=data.get("data", {})
        )

    @classmethod
    def from_json(cls, json_str: str) -> "Event":
        return cls.from_dict(json.loads(json_str))


def game_created_event(game_id: str, category: str, owner: str, start_time: str) -> Event:
    return Event(
        type=EventType.GAME_CREATED,
        game_id=game_id,
        data={
            "category": category,
            "owner": owner,
            "start_time": start_time
        }
    )


def player_joined_event(game_id: str, participant: str, waitlisted: bool, position: int) -> Event:
    return Event(
        type=EventType.PLAYER_WAITLISTED if waitlisted else EventType.PLAYER_REGISTERED,
        game_id=game_id,
        data={
            "participant": participant,
            "position": position
        }
    )


def player_dropped_event(game_id: str, participant: str, from_list: str) -> Event:
    return Event(
        type=EventType.PLAYER_DROPPED,
        game_id=game_id,
        data={
            "participant": participant,
            "from": from_list
        }
    )


def player_promoted_event(game_id: str, participant: str) -> Event:
    return Event(
        type=EventType.PLAYER_PROMOTED,
        game_id=game_id,
        data={
            "participant": participant
        }
    )
