import os
import logging
from flask import Flask, request, jsonify, Response
from flask_login import current_user, login_required
from werkzeug.exceptions import HTTPException
import redis

from pickup_shared.roster import RosterInvariantError
from .auth import init_auth
from .config import config
from .errors import PickupError, ValidationError
from .event_publisher import EventPublisher, game_channel
from .game_registry import GameRegistry
from .game_store import GameStore
from .models import db
from .roster_engine import RosterEngine
from .validation import parse_new_game_request

logger = logging.getLogger(__name__)


def create_app(config_name: str = None) -> Flask:
    """Application factory for the pickup games API."""
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize extensions
    db.init_app(app)
    init_auth(app)

    # Initialize services
    publisher = EventPublisher.from_url(app.config.get('REDIS_URL'))
    registry = GameRegistry(
        store=GameStore(),
        publisher=publisher,
        window_days=app.config.get('LIST_WINDOW_DAYS')
    )
    roster_engine = RosterEngine(registry, publisher)

    # Create tables
    with app.app_context():
        db.create_all()

    # Store services on app for access in routes
    app.publisher = publisher
    app.registry = registry
    app.roster_engine = roster_engine

    register_error_handlers(app)
    register_api_routes(app)
    register_event_routes(app)

    return app


def register_error_handlers(app: Flask):
    """Render the error taxonomy as JSON responses."""

    @app.errorhandler(PickupError)
    def handle_pickup_error(error: PickupError):
        if error.status_code >= 500:
            logger.error(f"{type(error).__name__}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(RosterInvariantError)
    def handle_invariant_error(error: RosterInvariantError):
        logger.error(f"Refusing roster write: {error}")
        return jsonify({'error': 'Internal error', 'code': 'INTERNAL_ERROR'}), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            return error
        logger.exception("Unhandled exception")
        return jsonify({'error': 'Internal error', 'code': 'INTERNAL_ERROR'}), 500


def register_api_routes(app: Flask):
    """Register API routes."""

    # ==================== Games ====================

    @app.route('/api/v1/games', methods=['POST'])
    @login_required
    def api_create_game():
        """Create a new game owned by the caller."""
        new_game = parse_new_game_request(request.get_json(silent=True))
        game = app.registry.create(new_game, current_user.get_id())
        return jsonify(game.to_dict()), 201

    @app.route('/api/v1/games', methods=['GET'])
    def api_list_games():
        """List upcoming games in a category, soonest first."""
        category = (request.args.get('category') or '').strip()
        if not category:
            raise ValidationError('category is required', fields=['category'])

        max_results = app.config.get('LIST_MAX_RESULTS', 50)
        limit = request.args.get('limit', max_results, type=int)
        if limit is None or limit < 1:
            raise ValidationError('limit must be a positive integer', fields=['limit'])

        games = app.registry.list(category, limit=min(limit, max_results))
        return jsonify({
            'games': [g.to_dict() for g in games],
            'count': len(games),
            'category': category
        })

    @app.route('/api/v1/games/<game_id>', methods=['GET'])
    def api_get_game(game_id: str):
        """Get game details."""
        game = app.registry.get(game_id)
        return jsonify(game.to_dict())

    # ==================== Roster ====================

    @app.route('/api/v1/games/<game_id>/register', methods=['POST'])
    @login_required
    def api_register(game_id: str):
        """Register the caller on the roster, or the waitlist when full."""
        game = app.roster_engine.register(game_id, current_user.get_id())
        return jsonify(game.to_dict())

    @app.route('/api/v1/games/<game_id>/drop', methods=['POST'])
    @login_required
    def api_drop(game_id: str):
        """Drop the caller from the game."""
        game = app.roster_engine.drop(game_id, current_user.get_id())
        return jsonify(game.to_dict())

    # ==================== Health Check ====================

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        try:
            db.session.execute(db.text('SELECT 1'))
            db_ok = True
        except Exception:
            db_ok = False

        redis_status = 'disabled'
        if app.publisher.enabled:
            try:
                app.publisher.redis.ping()
                redis_status = 'connected'
            except redis.RedisError:
                redis_status = 'disconnected'

        healthy = db_ok and redis_status != 'disconnected'
        return jsonify({
            'status': 'healthy' if healthy else 'unhealthy',
            'database': 'connected' if db_ok else 'disconnected',
            'redis': redis_status
        }), 200 if healthy else 503


def register_event_routes(app: Flask):
    """Register real-time roster event streams."""

    @app.route('/api/v1/events/games/<game_id>')
    def api_game_events(game_id: str):
        """SSE endpoint for a game's roster changes."""
        if not app.publisher.enabled:
            return jsonify({'error': 'Event streaming is not configured'}), 503

        app.registry.get(game_id)

        def generate():
            # Dedicated connection with no read timeout for the long-lived stream
            sse_redis = redis.from_url(
                app.config['REDIS_URL'],
                decode_responses=True,
                socket_timeout=None,
                socket_connect_timeout=5
            )
            pubsub = sse_redis.pubsub(ignore_subscribe_messages=True)
            pubsub.subscribe(game_channel(game_id))

            yield f"data: {{\"type\":\"connected\",\"game_id\":\"{game_id}\"}}\n\n"

            try:
                while True:
                    message = pubsub.get_message(timeout=30)
                    if message and message['type'] == 'message':
                        yield f"data: {message['data']}\n\n"
                    else:
                        yield ": keepalive\n\n"
            finally:
                pubsub.close()
                sse_redis.close()

        return Response(generate(), mimetype='text/event-stream', headers={
            'Cache-Control': 'no-cache',
            'X-Accel-Buffering': 'no'
        })
