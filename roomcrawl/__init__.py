"""
project: Roomcrawl
module: __init__.py
License: MIT

Flask application and core extensions setup.

Wires together the Flask app and Flask-SocketIO and exposes the shared
``GameLogic`` through ``get_game()``. Configuration is sourced from
environment variables (optionally loaded from a local .env) with defaults
suitable for development.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_socketio import SocketIO

# Load .env if present so SECRET_KEY, ROOMCRAWL_* etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)


def _env_int(name):
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else None


app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    ROOMCRAWL_GENERATION_ATTEMPTS=_env_int("ROOMCRAWL_GENERATION_ATTEMPTS"),
    ROOMCRAWL_FORCED_ATTEMPTS=_env_int("ROOMCRAWL_FORCED_ATTEMPTS"),
    ROOMCRAWL_SEED=_env_int("ROOMCRAWL_SEED"),
    ROOMCRAWL_TICK_RATE=float(os.getenv("ROOMCRAWL_TICK_RATE", "30")),
    ROOMCRAWL_START_DEPTH=int(os.getenv("ROOMCRAWL_START_DEPTH", "0")),
)

# Let Flask-SocketIO select best async_mode based on installed deps (eventlet/gevent/threading)
socketio = SocketIO(
    app,
    async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
    cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
    ping_interval=20,
    ping_timeout=10,
)

GAME_EXTENSION_KEY = "roomcrawl_game"


def get_game():
    """Return the process-wide GameLogic, generating the first level on first use."""
    game = app.extensions.get(GAME_EXTENSION_KEY)
    if game is None:
        from roomcrawl.game import GameLogic
        from roomcrawl.level.config import GeneratorSettings

        with app.app_context():
            settings = GeneratorSettings()
        game = GameLogic(settings=settings)
        game.initialize(depth=app.config.get("ROOMCRAWL_START_DEPTH", 0), seed=settings.seed)
        app.extensions[GAME_EXTENSION_KEY] = game
    return game


def reset_game():
    """Forget the shared GameLogic so the next get_game() builds a fresh one."""
    return app.extensions.pop(GAME_EXTENSION_KEY, None)


# Register HTTP blueprints and Socket.IO handlers after app/socketio exist
from roomcrawl.routes.level_api import bp_level  # noqa: E402

app.register_blueprint(bp_level)

from roomcrawl.websockets import game as _ws_game  # noqa: F401,E402


def create_app(overrides=None):
    """Return the Flask app instance with optional config overrides applied."""
    if overrides:
        app.config.update(overrides)
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal server error", "error_id": error_id}), 500
