# ur_game/sockets/connection_handlers.py

import logging

from flask import request, current_app

from ..extensions import socketio
from ..globals import log_event

logger = logging.getLogger(__name__)


@socketio.on('connect')
def handle_connect(auth=None):
    """
    Клиент подключился: заводим для него сессию.
    Партия начнется только после 'new_game' или 'restore_game'.
    """
    game_service = current_app.game_service
    sid = request.sid

    game_session = game_service.open_session(sid)
    log_event("SESSION_START", "Client connected.", sid=sid, game_id=game_session.id)


@socketio.on('disconnect')
def handle_disconnect(reason=None):
    game_service = current_app.game_service
    sid = request.sid

    game_id = game_service.handle_disconnect(sid)
    log_event("SESSION_END", f"Client disconnected (reason: {reason}).", sid=sid, game_id=game_id)
