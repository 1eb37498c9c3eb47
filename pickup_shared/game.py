from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List


def to_epoch_seconds(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def from_epoch_seconds(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def format_instant(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')


@dataclass
class Game:
    """
    Snapshot of a pickup game as read from the store.

    roster holds at most `capacity` participants in sign-up order; waitlist
    is FIFO with the longest-waiting participant at index 0. `version`
    counts committed roster writes.
    """
    game_id: str
    category: str
    name: str
    location: str
    start_time: datetime
    duration_mins: int
    num_teams: int
    team_size: int
    signup_fee_cents: int
    split_fee_cents: int
    owner: str
    roster: List[str] = field(default_factory=list)
    waitlist: List[str] = field(default_factory=list)
    version: int = 0

    @property
    def capacity(self) -> int:
        return self.num_teams * self.team_size

    @property
    def is_full(self) -> bool:
        return len(self.roster) >= self.capacity

    def has_participant(self, participant: str) -> bool:
        return participant in self.roster or participant in self.waitlist

    def to_dict(self) -> dict:
        return {
            'game_id': self.game_id,
            'category': self.category,
            'name': self.name,
            'location': self.location,
            'start_time': format_instant(self.start_time),
            'duration_mins': self.duration_mins,
            'num_teams': self.num_teams,
            'team_size': self.team_size,
            'capacity': self.capacity,
            'signup_fee_cents': self.signup_fee_cents,
            'split_fee_cents': self.split_fee_cents,
            'owner': self.owner,
            'roster': list(self.roster),
            'waitlist': list(self.waitlist),
        }
