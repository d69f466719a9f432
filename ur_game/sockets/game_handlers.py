# ur_game/sockets/game_handlers.py

import json
import logging

from flask import request, current_app
from flask_socketio import emit

from ..extensions import socketio

logger = logging.getLogger(__name__)


@socketio.on('message')
def handle_message(data):
    """
    Единый вход для всех конвертов клиента ({type: ..., ...}).
    Ответы уходят тем же событием 'message', JSON-текстом.
    """
    game_service = current_app.game_service
    sid = request.sid

    notifications = game_service.handle_raw_message(sid, data)

    for msg in notifications:
        emit(msg['event'], json.dumps(msg['payload']), room=msg['room'])
