"""
project: Roomcrawl
module: server.py
License: MIT

Server bootstrap.

Configures process logging, generates the first level, starts the game
loop thread plus the Socket.IO notification pump, then runs the Socket.IO
server.
"""

import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler

from roomcrawl import app, get_game, socketio
from roomcrawl.game import GameLoop
from roomcrawl.level.errors import LevelGenerationError
from roomcrawl.logging_utils import get_logger

log = get_logger("roomcrawl.server")


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (integration / runtime only)
    """Start the game loop and the Socket.IO server.

    Refuses to start (exit code 1) when the first level cannot be generated.
    """
    _configure_logging()
    try:
        game = get_game()
    except LevelGenerationError as exc:
        log.error(event="startup_generation_failed", seed=exc.seed, attempts=exc.attempts, reason=exc.last_reason)
        sys.exit(1)
    loop = GameLoop(game, tick_rate=app.config.get("ROOMCRAWL_TICK_RATE", 30.0))
    loop.start()
    stop_pump = threading.Event()
    from roomcrawl.websockets.game import pump_notifications

    socketio.start_background_task(pump_notifications, loop.interval, stop_pump)
    try:
        print(f"[INFO] Starting Socket.IO server on {host}:{port} (async_mode={socketio.async_mode})")
        socketio.run(app, host=host, port=port, debug=debug, use_reloader=False)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
    finally:
        stop_pump.set()
        loop.stop()


def _configure_logging(log_dir=None):
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/roomcrawl.log. Retains a few backups to avoid growth.
    """
    log_dir = log_dir or app.instance_path
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "roomcrawl.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(fmt)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(fmt)

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
