import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from pickup_shared.game import Game, to_epoch_seconds
from .errors import ConditionFailed, NotFoundError, StoreError
from .models import db, GameRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Precondition:
    """Record state a conditional write expects to find at commit time."""
    version: int
    roster_size: int
    waitlist_size: int

    @classmethod
    def observed(cls, game: Game) -> "Precondition":
        return cls(
            version=game.version,
            roster_size=len(game.roster),
            waitlist_size=len(game.waitlist),
        )


class GameStore:
    """
    Persistence contract for game records:
    - put: first write of a record, optionally refusing to overwrite
    - get: fetch by key
    - query: category index scan ordered by start time
    - conditional_update: atomic roster/waitlist write guarded by a Precondition
    """

    def _store_error(self, operation: str, game_id: Optional[str], exc: SQLAlchemyError) -> StoreError:
        db.session.rollback()
        transient = isinstance(exc, OperationalError)
        reason = str(getattr(exc, 'orig', None) or exc)
        logger.error(f"{operation} failed for game {game_id}: {reason}")
        return StoreError(operation, game_id, reason, transient=transient)

    def put(self, game: Game, overwrite: bool = False) -> Game:
        record = GameRecord.from_game(game)
        try:
            if overwrite:
                db.session.merge(record)
            else:
                db.session.add(record)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            if db.session.get(GameRecord, game.game_id) is not None:
                raise StoreError('put', game.game_id, 'record already exists') from e
            raise self._store_error('put', game.game_id, e) from e
        except SQLAlchemyError as e:
            raise self._store_error('put', game.game_id, e) from e
        return game

    def get(self, game_id: str) -> Game:
        try:
            record = db.session.get(GameRecord, game_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise self._store_error('get', game_id, e) from e

        if record is None:
            raise NotFoundError(game_id)
        return record.to_game()

    def query(
        self,
        category: str,
        start_from: datetime,
        start_until: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[Game]:
        query = GameRecord.query.filter(
            GameRecord.category == category,
            GameRecord.start_time >= to_epoch_seconds(start_from)
        )
        if start_until is not None:
            query = query.filter(GameRecord.start_time <= to_epoch_seconds(start_until))

        query = query.order_by(GameRecord.start_time.asc(), GameRecord.game_id.asc())
        if limit:
            query = query.limit(limit)

        try:
            return [record.to_game() for record in query.all()]
        except SQLAlchemyError as e:
            raise self._store_error('query', None, e) from e

    def conditional_update(
        self,
        game_id: str,
        roster: Sequence[str],
        waitlist: Sequence[str],
        precondition: Precondition
    ) -> Game:
        """
        Write both lists iff the stored version and list sizes still match
        `precondition`. The check and the write are a single UPDATE statement,
        so exactly one of several racing writers can match.
        """
        try:
            matched = GameRecord.query.filter_by(
                game_id=game_id,
                version=precondition.version,
                roster_size=precondition.roster_size,
                waitlist_size=precondition.waitlist_size
            ).update({
                'roster': list(roster),
                'waitlist': list(waitlist),
                'roster_size': len(roster),
                'waitlist_size': len(waitlist),
                'version': GameRecord.version + 1,
            }, synchronize_session=False)

            if matched != 1:
                db.session.rollback()
                if db.session.get(GameRecord, game_id) is None:
                    raise NotFoundError(game_id)
                raise ConditionFailed(game_id)

            # Read back inside the same transaction so the result is our write
            record = db.session.get(GameRecord, game_id, populate_existing=True)
            updated = record.to_game()
            db.session.commit()
        except SQLAlchemyError as e:
            raise self._store_error('conditional_update', game_id, e) from e

        return updated
