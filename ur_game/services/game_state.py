# ur_game/services/game_state.py

from typing import Any, Dict

from ur_game.game_core import encode_state, get_legal_moves, get_winner

# --- Типы конвертов: клиент -> сервер ---
MSG_NEW_GAME = "new_game"
MSG_ROLL_DICE = "roll_dice"
MSG_MAKE_MOVE = "make_move"
MSG_END_TURN = "end_turn"
MSG_AI_MOVE = "ai_move"
MSG_RESTORE_GAME = "restore_game"
MSG_PING = "ping"

CLIENT_MESSAGE_TYPES = (
    MSG_NEW_GAME, MSG_ROLL_DICE, MSG_MAKE_MOVE, MSG_END_TURN,
    MSG_AI_MOVE, MSG_RESTORE_GAME, MSG_PING,
)

# --- Типы конвертов: сервер -> клиент ---
MSG_GAME_STATE = "game_state"
MSG_MOVE_REJECTION = "move_rejection"
MSG_PONG = "pong"

# Все конверты ходят одним событием Socket.IO
CHANNEL_EVENT = "message"

# Коды отказов
REJECT_BAD_ENVELOPE = "BAD_ENVELOPE"
REJECT_NO_GAME = "NO_GAME"

Notification = Dict[str, Any]


def build_game_state_payload(state) -> Dict[str, Any]:
    """
    Конверт 'game_state' для клиента.

    Слово состояния уходит десятичной строкой: 64-битные значения
    не переживают JSON-числа во всех клиентах.
    """
    return {
        'type': MSG_GAME_STATE,
        'state': str(encode_state(state)),
        'current_player': state.current_player,
        'dice_roll': state.dice_roll,
        'moves': get_legal_moves(state),
        'game_over': state.game_over,
        'winner': get_winner(state),
    }


def build_rejection_payload(message: str, code: str) -> Dict[str, Any]:
    return {'type': MSG_MOVE_REJECTION, 'message': message, 'code': code}


def build_pong_payload() -> Dict[str, Any]:
    return {'type': MSG_PONG}


def notify(payload: Dict[str, Any], room: str) -> Notification:
    return {'event': CHANNEL_EVENT, 'payload': payload, 'room': room}
