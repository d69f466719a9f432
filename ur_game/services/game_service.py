# ur_game/services/game_service.py

import json
import logging
import uuid
from typing import Callable, List, Optional

from marshmallow import ValidationError

from ur_game.api.schemas import load_envelope
from ur_game.game_core.ai_controller import AIController

from .game_registry import GameRegistry
from .game_session import GameSession
from .game_state import (
    MSG_AI_MOVE,
    MSG_END_TURN,
    MSG_MAKE_MOVE,
    MSG_NEW_GAME,
    MSG_PING,
    MSG_RESTORE_GAME,
    MSG_ROLL_DICE,
    Notification,
    REJECT_BAD_ENVELOPE,
    build_pong_payload,
    build_rejection_payload,
    notify,
)

logger = logging.getLogger(__name__)


class GameService:
    """
    Фасад, координирующий высокоуровневые игровые действия.
    Разбирает конверты, находит сессию клиента и делегирует ей действие.
    """

    def __init__(self,
                 registry: GameRegistry,
                 ai_controller: AIController,
                 log_event: Callable,
                 config: dict,
                 session_factory: Optional[Callable[..., GameSession]] = None):
        self.registry = registry
        self.ai_controller = ai_controller
        self.log_event = log_event or (lambda *args, **kwargs: None)
        self.session_factory = session_factory or GameSession

        self.human_player = config.get('LOCAL_PLAYER', 'A')
        self.ai_player = config.get('AI_PLAYER', 'B')

    ### Управление подключением ###

    def open_session(self, sid: str) -> GameSession:
        """Создает (или возвращает существующую) сессию для SID."""
        existing = self.registry.get_by_sid(sid)
        if existing:
            return existing

        game_session = self.session_factory(
            game_id=uuid.uuid4().hex[:12],
            sid=sid,
            ai_controller=self.ai_controller,
            log_event=self.log_event,
            human_player=self.human_player,
            ai_player=self.ai_player,
        )
        self.registry.add_game(game_session)
        return game_session

    def handle_disconnect(self, sid: str) -> Optional[str]:
        """Забывает сессию клиента. Возвращает ID удаленной игры."""
        game_session = self.registry.remove_by_sid(sid)
        return game_session.id if game_session else None

    def active_games(self) -> int:
        return self.registry.count()

    ### Обработка сообщений ###

    def handle_raw_message(self, sid: str, raw) -> List[Notification]:
        """
        Точка входа для события 'message'.
        raw - JSON-текст (один конверт на кадр) или уже разобранный dict.
        """
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except ValueError as e:
                self.log_event("BAD_ENVELOPE", f"Не JSON: {e}", sid=sid)
                return [notify(build_rejection_payload('Сообщение не является JSON.', REJECT_BAD_ENVELOPE), sid)]

        try:
            envelope = load_envelope(raw)
        except ValidationError as err:
            self.log_event("BAD_ENVELOPE", f"Validation failed: {err.messages}", sid=sid)
            return [notify(build_rejection_payload(_first_error(err), REJECT_BAD_ENVELOPE), sid)]

        return self.handle_envelope(sid, envelope)

    def handle_envelope(self, sid: str, envelope: dict) -> List[Notification]:
        msg_type = envelope['type']

        if msg_type == MSG_PING:
            return [notify(build_pong_payload(), sid)]

        game_session = self.open_session(sid)

        if msg_type == MSG_NEW_GAME:
            return game_session.new_game()
        if msg_type == MSG_RESTORE_GAME:
            return game_session.restore_game(envelope['state'])
        if msg_type == MSG_ROLL_DICE:
            return game_session.roll_dice()
        if msg_type == MSG_MAKE_MOVE:
            return game_session.make_move(envelope['move'])
        if msg_type == MSG_END_TURN:
            return game_session.end_turn()
        if msg_type == MSG_AI_MOVE:
            return game_session.ai_move()

        logger.warning(f"[GameService] Необработанный тип сообщения: {msg_type}")
        return []


def _first_error(err: ValidationError) -> str:
    messages = err.messages
    if isinstance(messages, dict) and messages:
        field_name = next(iter(messages))
        field_errors = messages[field_name]
        first = field_errors[0] if isinstance(field_errors, list) and field_errors else field_errors
        return f"Validation failed on '{field_name}': {first}"
    if isinstance(messages, list) and messages:
        return str(messages[0])
    return "Unknown validation error"
