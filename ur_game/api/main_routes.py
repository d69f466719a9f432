# ur_game/api/main_routes.py

from flask import Blueprint, current_app, jsonify

from ..extensions import limiter
from ur_game.game_core import DecodeError, decode_state, format_state_binary, parse_state_word, piece_layout
from ur_game.services.game_state import build_game_state_payload

bp = Blueprint('main', __name__)


@bp.route('/health')
@limiter.limit("60 per minute")
def health():
    return jsonify({
        "status": "ok",
        "games": current_app.game_service.active_games(),
    })


@bp.route('/api/state/<word>')
@limiter.limit("60 per minute")
def describe_state(word):
    """
    Отладочный разбор слова состояния (то же, что сервер шлет в 'game_state').
    """
    try:
        state_word = parse_state_word(word)
        state = decode_state(state_word)
    except DecodeError as e:
        current_app.logger.info(f"Отклонено слово состояния {word!r}: {e.message}")
        return jsonify({"status": "error", **e.to_payload()}), 400

    payload = build_game_state_payload(state)
    payload.update({
        "board": list(state.board),
        "off_board": {"A": state.off_board[0], "B": state.off_board[1]},
        "completed": {"A": state.completed[0], "B": state.completed[1]},
        "pieces": piece_layout(state),
        "binary": format_state_binary(state_word),
    })
    return jsonify(payload)
