from enum import Enum
from typing import Optional, List
from dataclasses import dataclass

from .game import Game


class RosterAction(str, Enum):
    REGISTER = "register"
    DROP = "drop"


class ListName(str, Enum):
    ROSTER = "roster"
    WAITLIST = "waitlist"


class RosterInvariantError(Exception):
    def __init__(self, game_id: str, reason: str):
        self.game_id = game_id
        self.reason = reason
        super().__init__(f"Game {game_id}: {reason}")


@dataclass(frozen=True)
class RosterChange:
    action: RosterAction
    participant: str
    target: ListName
    roster: tuple
    waitlist: tuple
    promoted: Optional[str] = None


def plan_register(game: Game, participant: str) -> Optional[RosterChange]:
    """Place a new participant on the roster if a slot is open, else the waitlist.

    Returns None when the participant is already on either list.
    """
    if game.has_participant(participant):
        return None

    if len(game.roster) < game.capacity:
        return RosterChange(
            action=RosterAction.REGISTER,
            participant=participant,
            target=ListName.ROSTER,
            roster=tuple(game.roster) + (participant,),
            waitlist=tuple(game.waitlist),
        )

    return RosterChange(
        action=RosterAction.REGISTER,
        participant=participant,
        target=ListName.WAITLIST,
        roster=tuple(game.roster),
        waitlist=tuple(game.waitlist) + (participant,),
    )


def plan_drop(game: Game, participant: str) -> Optional[RosterChange]:
    """Remove a participant, promoting the head of the waitlist into a vacated roster slot.

    Returns None when the participant is on neither list.
    """
    roster: List[str] = list(game.roster)
    waitlist: List[str] = list(game.waitlist)

    if participant in waitlist:
        waitlist.remove(participant)
        return RosterChange(
            action=RosterAction.DROP,
            participant=participant,
            target=ListName.WAITLIST,
            roster=tuple(roster),
            waitlist=tuple(waitlist),
        )

    if participant in roster:
        roster.remove(participant)
        promoted = None
        if waitlist:
            promoted = waitlist.pop(0)
            roster.append(promoted)
        return RosterChange(
            action=RosterAction.DROP,
            participant=participant,
            target=ListName.ROSTER,
            roster=tuple(roster),
            waitlist=tuple(waitlist),
            promoted=promoted,
        )

    return None


def check_invariants(game_id: str, capacity: int, roster, waitlist):
    if len(roster) > capacity:
        raise RosterInvariantError(
            game_id, f"roster holds {len(roster)} participants, capacity is {capacity}"
        )

    if len(set(roster)) != len(roster) or len(set(waitlist)) != len(waitlist):
        raise RosterInvariantError(game_id, "duplicate participant within a list")

    overlap = set(roster) & set(waitlist)
    if overlap:
        raise RosterInvariantError(
            game_id, f"participants on both roster and waitlist: {sorted(overlap)}"
        )
