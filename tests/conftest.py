"""
Pytest configuration and fixtures for pickup games API tests.
"""
import os
import sys
from datetime import datetime, timedelta, timezone

import pytest
from flask import g

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Set testing environment before importing app
os.environ['FLASK_ENV'] = 'testing'

from pickup_api.app import create_app
from pickup_api.game_registry import GameRegistry
from pickup_api.game_store import GameStore
from pickup_api.models import db
from pickup_api.roster_engine import RosterEngine
from pickup_api.validation import NewGameRequest


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')

    # The long-lived app context below is reused by every test-client request,
    # so drop Flask-Login's per-request user cache to avoid leaking identities.
    @app.before_request
    def _reset_login_user():
        g.pop('_login_user', None)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create database session for testing."""
    with app.app_context():
        # Clear all tables before each test
        db.session.remove()

        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        db.session.rollback()


@pytest.fixture
def store(app, db_session):
    return GameStore()


@pytest.fixture
def publisher(mocker):
    """Publisher double that records published events."""
    mock = mocker.MagicMock()
    mock.enabled = True
    return mock


@pytest.fixture
def registry(store, publisher):
    return GameRegistry(store=store, publisher=publisher)


@pytest.fixture
def engine(registry, publisher):
    return RosterEngine(registry, publisher)


@pytest.fixture
def new_game_request():
    """Factory for create-game requests; defaults to a 2x5 game tomorrow."""
    def build(**overrides):
        fields = dict(
            category='soccer',
            location='Central Park Field 3',
            name='Sunday Pickup',
            start_time=datetime.now(timezone.utc) + timedelta(days=1),
            duration_mins=90,
            num_teams=2,
            team_size=5,
            signup_fee_cents=500,
            split_fee_cents=0,
        )
        fields.update(overrides)
        return NewGameRequest(**fields)
    return build


@pytest.fixture
def sample_game(registry, new_game_request):
    """A persisted 2x5 game with an empty roster."""
    return registry.create(new_game_request(), 'owner@example.com')


@pytest.fixture
def small_game(registry, new_game_request):
    """A persisted 1x2 game, capacity 2."""
    return registry.create(new_game_request(num_teams=1, team_size=2), 'owner@example.com')


@pytest.fixture
def auth_headers():
    def build(email='player@example.com'):
        return {'X-Auth-Email': email}
    return build


@pytest.fixture
def game_payload():
    def build(**overrides):
        payload = {
            'category': 'soccer',
            'location': 'Central Park Field 3',
            'name': 'Sunday Pickup',
            'start_time': (datetime.now(timezone.utc) + timedelta(days=2)).strftime('%Y-%m-%dT%H:%M:%SZ'),
            'duration_mins': 90,
            'num_teams': 2,
            'team_size': 5,
            'signup_fee_cents': 500,
            'split_fee_cents': 0,
        }
        payload.update(overrides)
        return payload
    return build
