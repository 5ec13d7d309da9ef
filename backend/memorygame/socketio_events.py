from flask_socketio import join_room, leave_room, emit
from memorygame import socketio, get_registry
from flask import current_app, request
from typing import Dict, Any
import time


def make_room_broadcaster(game_code: str):
    """Engine listener that forwards engine events to the game's room."""
    code = game_code.upper()
    room = f"game:{code}"

    def _broadcast(event: str, payload: Dict[str, Any]) -> None:
        socketio.emit(event, dict(payload, game_code=code), to=room, namespace='/ws')

    return _broadcast


def _game_code_from(data):
    """Upper-cased game code from an event payload, or None when missing or not a string."""
    game_code = data.get('game_code') if isinstance(data, dict) else None
    if not isinstance(game_code, str) or not game_code:
        return None
    return game_code.upper()


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    # If this socket owned a game and no other owner remains, end that session
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx:
        return
    game_code = ctx.get('game_code')
    if ctx.get('is_session_owner') and game_code:
        _owner_count[game_code] = max(0, _owner_count.get(game_code, 0) - 1)
        app = current_app._get_current_object()
        # In tests, end immediately for determinism; in prod, allow grace period
        if app.config.get('TESTING'):
            if _owner_count.get(game_code, 0) == 0:
                _end_session(app, game_code)
            return
        _schedule_end_if_no_owner(app, game_code, float(app.config.get('OWNER_GRACE_SEC', 2.0)))


def handle_join_game(data):
    code = _game_code_from(data)
    if code is None:
        emit('error', {'message': 'game_code is required'})
        return
    is_session_owner = bool(data.get('is_session_owner'))
    engine = get_registry(current_app).get(code)
    if engine is None:
        emit('error', {'message': 'Game not found'})
        return
    room = f"game:{code}"
    join_room(room)
    # Track session owner presence and socket context
    _sid_to_ctx[_get_sid()] = {'game_code': code, 'is_session_owner': is_session_owner}
    if is_session_owner:
        _owner_count[code] = _owner_count.get(code, 0) + 1
        _cancel_scheduled_end(code)
    emit('joined', {'room': room})
    emit('state_update', dict(engine.to_dict(), game_code=code))


def handle_leave_game(data):
    code = _game_code_from(data)
    if code is None:
        emit('error', {'message': 'game_code is required'})
        return
    room = f"game:{code}"
    leave_room(room)
    emit('left', {'room': room})
    # Explicit quit by an owner ends the session immediately
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('is_session_owner') and ctx.get('game_code') == code:
        _end_session(current_app._get_current_object(), code)


def handle_select_tile(data):
    code = _game_code_from(data)
    if code is None:
        emit('error', {'message': 'game_code is required'})
        return
    position = data.get('position')
    if isinstance(position, bool) or not isinstance(position, int):
        emit('error', {'message': 'position must be an integer'})
        return
    engine = get_registry(current_app).get(code)
    if engine is None:
        emit('error', {'message': 'Game not found'})
        return
    emit('selected', {'position': position, 'accepted': engine.select_tile(position)})


def handle_ping(data):
    emit('pong', data or {})

# ---- Session owner lifecycle helpers ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_owner_count: Dict[str, int] = {}
_end_deadline: Dict[str, float] = {}

def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def _end_session(app, game_code: str) -> None:
    """End the session: notify clients and drop the engine."""
    # Use socketio.emit since this may be called from a background task
    socketio.emit('session_ended', {'game_code': game_code}, to=f"game:{game_code}", namespace='/ws')
    try:
        engine = get_registry(app).discard(game_code)
        if engine is not None:
            # Invalidates pending evaluation and timer callbacks
            engine.reset()
        app.logger.info(f"[session-end] game={game_code} reason=owner-gone")
    finally:
        from memorygame.api.games import forget_controller_actions
        forget_controller_actions(game_code)
        _owner_count.pop(game_code, None)
        _end_deadline.pop(game_code, None)

def _schedule_end_if_no_owner(app, game_code: str, delay_sec: float = 2.0) -> None:
    if _owner_count.get(game_code, 0) > 0:
        return
    _end_deadline[game_code] = time.time() + delay_sec

    def _runner(code: str, deadline: float):
        sleep_for = max(0.0, deadline - time.time())
        if sleep_for:
            socketio.sleep(sleep_for)
        if _owner_count.get(code, 0) == 0 and _end_deadline.get(code) == deadline:
            _end_session(app, code)

    socketio.start_background_task(_runner, game_code, _end_deadline[game_code])

def _cancel_scheduled_end(game_code: str) -> None:
    _end_deadline.pop(game_code, None)



def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = [
        ('connect', handle_connect),
        ('disconnect', handle_disconnect),
        ('join_game', handle_join_game),
        ('leave_game', handle_leave_game),
        ('select_tile', handle_select_tile),
        ('ping', handle_ping),
    ]
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for name, handler in handlers:
            socketio.on_event(name, handler, namespace=namespace)
