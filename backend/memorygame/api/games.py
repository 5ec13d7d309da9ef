from flask import Blueprint, jsonify, request, current_app
from memorygame import get_registry
from memorygame.socketio_events import make_room_broadcaster
import time


games = Blueprint('games', __name__)

_last_controller_action: dict[str, float] = {}


def _debounced(action: str, game_code: str) -> bool:
    try:
        debounce_ms = int(current_app.config.get('CONTROLLER_DEBOUNCE_MS', 0))
    except Exception:
        debounce_ms = 0
    if debounce_ms <= 0:
        return False
    key = f"{action}:{game_code.upper()}"
    now = time.time() * 1000.0
    last = _last_controller_action.get(key, 0)
    if now - last < debounce_ms:
        return True
    _last_controller_action[key] = now
    return False


def forget_controller_actions(game_code: str) -> None:
    code = game_code.upper()
    for action in ('start', 'reset'):
        _last_controller_action.pop(f"{action}:{code}", None)


def _game_payload(game_code, engine):
    payload = engine.to_dict()
    payload['game_code'] = game_code.upper()
    return payload


def _not_found():
    return jsonify({'error': 'Game not found'}), 404


@games.route('/create', methods=['POST'])
def create_game():
    game_code, engine = get_registry(current_app).create()
    engine.subscribe(make_room_broadcaster(game_code))
    current_app.logger.info(f"[create] game={game_code} pairs={engine.total_pairs}")
    return jsonify({
        'message': 'New game created!',
        'game_code': game_code,
        'state': _game_payload(game_code, engine),
    }), 201


@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    engine = get_registry(current_app).get(game_code)
    if engine is None:
        return _not_found()
    payload = _game_payload(game_code, engine)
    # Include delays so clients can time their animations
    payload['durations'] = engine.settings.durations()
    return jsonify(payload)


@games.route('/<string:game_code>/start', methods=['POST'])
def start_game(game_code):
    engine = get_registry(current_app).get(game_code)
    if engine is None:
        return _not_found()
    if _debounced('start', game_code):
        return jsonify({'message': 'debounced'}), 202
    engine.start_new_game()
    return jsonify(_game_payload(game_code, engine))


@games.route('/<string:game_code>/reset', methods=['POST'])
def reset_game(game_code):
    engine = get_registry(current_app).get(game_code)
    if engine is None:
        return _not_found()
    if _debounced('reset', game_code):
        return jsonify({'message': 'debounced'}), 202
    engine.reset()
    return jsonify(_game_payload(game_code, engine))


@games.route('/<string:game_code>/select', methods=['POST'])
def select_tile(game_code):
    engine = get_registry(current_app).get(game_code)
    if engine is None:
        return _not_found()
    data = request.get_json(silent=True) or {}
    position = data.get('position')
    if isinstance(position, bool) or not isinstance(position, int):
        return jsonify({'error': 'position must be an integer'}), 400
    accepted = engine.select_tile(position)
    return jsonify({'accepted': accepted, 'state': _game_payload(game_code, engine)})


@games.route('/<string:game_code>/leave', methods=['POST'])
def leave_game(game_code):
    """Drops the session. The reset invalidates any timers still pending for it."""
    engine = get_registry(current_app).discard(game_code)
    if engine is None:
        return _not_found()
    engine.reset()
    forget_controller_actions(game_code)
    current_app.logger.info(f"[session-end] game={game_code.upper()} reason=leave")
    return jsonify({'message': 'You have left the game.'}), 200
