"""
Unit tests for GameRegistry.
Tests: create, get, list, update_roster
"""
from datetime import datetime, timedelta, timezone

import pytest

from pickup_api.errors import ConflictError, NotFoundError, StoreError, ValidationError
from pickup_api.game_registry import GameRegistry
from pickup_shared.events import EventType
from pickup_shared.roster import plan_register


class TestCreate:
    """Tests for create."""

    def test_create_game(self, registry, new_game_request):
        game = registry.create(new_game_request(), 'owner@example.com')

        assert game.game_id
        assert game.owner == 'owner@example.com'
        assert game.capacity == 10
        assert game.roster == []
        assert game.waitlist == []
        assert game.version == 0

    def test_created_game_is_persisted(self, registry, new_game_request):
        game = registry.create(new_game_request(name='Tuesday Futsal'), 'owner@example.com')

        found = registry.get(game.game_id)
        assert found.name == 'Tuesday Futsal'
        assert found.owner == 'owner@example.com'

    def test_unique_ids(self, registry, new_game_request):
        ids = {registry.create(new_game_request(), 'owner@example.com').game_id for _ in range(10)}
        assert len(ids) == 10

    def test_naive_start_time_is_utc(self, registry, new_game_request):
        naive = datetime(2031, 3, 1, 18, 30, 15, 999)

        game = registry.create(new_game_request(start_time=naive), 'owner@example.com')

        assert game.start_time == datetime(2031, 3, 1, 18, 30, 15, tzinfo=timezone.utc)
        assert registry.get(game.game_id).start_time == game.start_time

    def test_requester_required(self, registry, new_game_request):
        with pytest.raises(ValidationError):
            registry.create(new_game_request(), '')

    def test_publishes_created_event(self, registry, publisher, new_game_request):
        game = registry.create(new_game_request(), 'owner@example.com')

        event = publisher.publish.call_args[0][0]
        assert event.type == EventType.GAME_CREATED
        assert event.game_id == game.game_id
        assert event.data['owner'] == 'owner@example.com'

    def test_write_failure_is_store_error(self, registry, new_game_request, mocker):
        mocker.patch.object(
            registry.store, 'put',
            side_effect=StoreError('put', 'g-1', 'connection reset', transient=True)
        )

        with pytest.raises(StoreError):
            registry.create(new_game_request(), 'owner@example.com')

        registry.publisher.publish.assert_not_called()


class TestGet:
    """Tests for get."""

    def test_get_existing(self, registry, sample_game):
        assert registry.get(sample_game.game_id) == sample_game

    def test_get_missing(self, registry):
        with pytest.raises(NotFoundError):
            registry.get('does-not-exist')


class TestList:
    """Tests for list."""

    def test_only_future_games(self, registry, new_game_request):
        now = datetime.now(timezone.utc)
        registry.create(new_game_request(name='Yesterday', start_time=now - timedelta(days=1)), 'o@example.com')
        registry.create(new_game_request(name='Tomorrow', start_time=now + timedelta(days=1)), 'o@example.com')

        games = registry.list('soccer')

        assert [g.name for g in games] == ['Tomorrow']

    def test_ordered_by_start_time(self, registry, new_game_request):
        now = datetime.now(timezone.utc)
        for days in (5, 1, 3):
            registry.create(
                new_game_request(name=f'In {days}', start_time=now + timedelta(days=days)),
                'o@example.com'
            )

        games = registry.list('soccer')

        assert [g.name for g in games] == ['In 1', 'In 3', 'In 5']

    def test_unbounded_future_by_default(self, registry, new_game_request):
        far = datetime.now(timezone.utc) + timedelta(days=120)
        registry.create(new_game_request(start_time=far), 'o@example.com')

        assert len(registry.list('soccer')) == 1

    def test_window_days_bounds_listing(self, store, publisher, new_game_request):
        registry = GameRegistry(store=store, publisher=publisher, window_days=30)
        now = datetime.now(timezone.utc)
        registry.create(new_game_request(name='Soon', start_time=now + timedelta(days=10)), 'o@example.com')
        registry.create(new_game_request(name='Later', start_time=now + timedelta(days=40)), 'o@example.com')

        assert [g.name for g in registry.list('soccer')] == ['Soon']

    def test_uses_clock(self, store, publisher, new_game_request):
        registry = GameRegistry(store=store, publisher=publisher)
        start = datetime.now(timezone.utc) + timedelta(days=1)
        registry.create(new_game_request(start_time=start), 'o@example.com')

        registry.clock = lambda: start + timedelta(hours=1)

        assert registry.list('soccer') == []

    def test_empty_category(self, registry):
        assert registry.list('lacrosse') == []

    def test_limit(self, registry, new_game_request):
        for _ in range(4):
            registry.create(new_game_request(), 'o@example.com')

        assert len(registry.list('soccer', limit=3)) == 3


class TestUpdateRoster:
    """Tests for update_roster."""

    def test_commits_change(self, registry, sample_game):
        updated = registry.update_roster(sample_game, plan_register(sample_game, 'alice'))

        assert updated.roster == ['alice']
        assert updated.version == sample_game.version + 1

    def test_racing_writers_one_wins(self, registry, sample_game):
        """Two writers from the same observed state: exactly one commits."""
        observed = registry.get(sample_game.game_id)

        winner = registry.update_roster(observed, plan_register(observed, 'alice'))

        with pytest.raises(ConflictError) as exc:
            registry.update_roster(observed, plan_register(observed, 'bob'))

        assert exc.value.operation == 'register'
        assert exc.value.game_id == sample_game.game_id
        assert registry.get(sample_game.game_id).roster == winner.roster == ['alice']
