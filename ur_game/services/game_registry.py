# ur_game/services/game_registry.py

import threading
from typing import Dict, Optional

from .game_session import GameSession


class GameRegistry:
    """
    Отвечает ИСКЛЮЧИТЕЛЬНО за хранение и поиск активных игровых сессий.
    Потокобезопасен.
    """
    def __init__(self, log_event_func):
        self.games: Dict[str, GameSession] = {}  # game_id -> GameSession
        self.sid_to_game_id: Dict[str, str] = {}

        self.lock = threading.RLock()
        self.log_event = log_event_func or (lambda *args, **kwargs: None)

    def add_game(self, game_session: GameSession):
        """Регистрирует новую сессию."""
        game_id = game_session.id
        with self.lock:
            if game_id in self.games:
                self.log_event("REGISTRY_WARN", f"Игра {game_id} уже существует при добавлении.", game_id=game_id)
                return

            self.games[game_id] = game_session
            self.sid_to_game_id[game_session.sid] = game_id

            self.log_event("REGISTRY_ADD", f"Игра {game_id} добавлена. Всего игр: {len(self.games)}", game_id=game_id)

    def remove_by_sid(self, sid: str) -> Optional[GameSession]:
        """Удаляет сессию клиента (вызывается при disconnect)."""
        with self.lock:
            game_id = self.sid_to_game_id.pop(sid, None)
            if not game_id:
                return None

            game_session = self.games.pop(game_id, None)
            self.log_event("REGISTRY_REMOVE", f"Игра {game_id} удалена. Осталось игр: {len(self.games)}", sid=sid, game_id=game_id)
            return game_session

    def get_by_game_id(self, game_id: str) -> Optional[GameSession]:
        with self.lock:
            return self.games.get(game_id)

    def get_by_sid(self, sid: str) -> Optional[GameSession]:
        """Получить сессию игры по SID'у игрока."""
        with self.lock:
            game_id = self.sid_to_game_id.get(sid)
            if not game_id:
                return None
            return self.games.get(game_id)

    def count(self) -> int:
        with self.lock:
            return len(self.games)
