"""Level HTTP API.

Read-only views over the latest game snapshot plus a command endpoint that
queues debug commands for the logic thread:

    GET  /api/level/state     latest GameState snapshot
    GET  /api/level/metrics   seed / depth / attempts / generation metrics
    POST /api/level/command   {"command": "r"|"d"|"h"} -> 202 (503 once generation failed)
"""
from flask import Blueprint, jsonify, request

from roomcrawl.logging_utils import get_logger
from roomcrawl.websockets.validation import LEVEL_COMMAND, validate

bp_level = Blueprint('level_api', __name__)
log = get_logger("roomcrawl.api")


def _game():
    from roomcrawl import get_game

    return get_game()


@bp_level.route('/api/level/state', methods=['GET'])
def level_state():
    state = _game().get_state()
    return jsonify(state.to_dict())


@bp_level.route('/api/level/metrics', methods=['GET'])
def level_metrics():
    state = _game().get_state()
    return jsonify(dict(state.generation, tick=state.tick))


@bp_level.route('/api/level/command', methods=['POST'])
def level_command():
    data = request.get_json(silent=True)
    ok, result = validate(data if data is not None else {}, LEVEL_COMMAND)
    if not ok:
        return jsonify(result), 400
    if not _game().submit_command(result['command']):
        return jsonify({'error': 'level generation failed', 'code': 'halted'}), 503
    log.info(event="command_queued", command=result['command'], source="http")
    return jsonify({'queued': result['command']}), 202
