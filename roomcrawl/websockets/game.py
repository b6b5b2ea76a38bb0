"""Socket.IO level handlers.

Events:
    - request_state: Ask for the latest snapshot; no payload
    - level_command: Queue a debug command; payload { command }

Emits:
    - level_state: Snapshot reply to request_state
    - command_queued: Acknowledgement of a queued command
    - level_changed: Broadcast once per pump cycle when the notification
      channel had anything in it
    - error: Validation failures { message, field, code }
"""

from flask_socketio import emit

from roomcrawl import get_game, socketio
from roomcrawl.logging_utils import get_logger

from .validation import LEVEL_COMMAND, validate

_log = get_logger("roomcrawl.ws")


@socketio.on('request_state')
def handle_request_state(data=None):
    state = get_game().get_state()
    emit('level_state', state.to_dict())


@socketio.on('level_command')
def handle_level_command(data):
    ok, result = validate(data or {}, LEVEL_COMMAND)
    if not ok:
        emit('error', {'message': f"Invalid level_command: {result['error']}", 'field': result['field'], 'code': result['code']})
        return
    if not get_game().submit_command(result['command']):
        emit('error', {'message': 'Level generation failed; commands are no longer accepted', 'field': 'command', 'code': 'halted'})
        return
    emit('command_queued', {'command': result['command']})
    _log.info(event="command_queued", command=result['command'], source="socketio")


def flush_notifications(game=None):
    """Drain the notification channel; broadcast one level_changed if non-empty.

    Returns the number of drained signals.
    """
    game = game or get_game()
    signals = game.channel.drain()
    if signals:
        state = game.get_state()
        socketio.emit('level_changed', {'signals': len(signals), 'state': state.to_dict()})
    return len(signals)


def pump_notifications(interval: float = 1 / 30, stop_event=None):  # pragma: no cover - runtime loop
    """Background task: flush notifications once per frame until stopped."""
    while stop_event is None or not stop_event.is_set():
        flush_notifications()
        socketio.sleep(interval)
