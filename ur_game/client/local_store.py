# ur_game/client/local_store.py
"""Локальное состояние клиента, переживающее перезапуск: JSON-файл."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

LOGGER = logging.getLogger(__name__)

GAME_STATE_KEY = "gameState"
CAMERA_POSITION_KEY = "cameraPosition"


class LocalStore:
    """
    {gameState: <последний payload game_state>, cameraPosition: {...}}

    cameraPosition - чисто презентационные данные, хранятся как есть.
    """

    def __init__(self, path) -> None:
        self._path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.error("Failed to read client state from %s: %s", self._path, exc)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _dump(self, payload: Dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
            tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            LOGGER.error("Failed to persist client state to %s: %s", self._path, exc)

    # --- gameState ---

    def load_game_state(self) -> Optional[Dict[str, Any]]:
        state = self._load().get(GAME_STATE_KEY)
        return state if isinstance(state, dict) else None

    def save_game_state(self, game_state: Dict[str, Any]) -> None:
        payload = self._load()
        payload[GAME_STATE_KEY] = game_state
        self._dump(payload)

    def clear_game_state(self) -> None:
        payload = self._load()
        if payload.pop(GAME_STATE_KEY, None) is not None:
            self._dump(payload)

    # --- cameraPosition ---

    def load_camera_position(self) -> Optional[Dict[str, Any]]:
        return self._load().get(CAMERA_POSITION_KEY)

    def save_camera_position(self, camera_position: Dict[str, Any]) -> None:
        payload = self._load()
        payload[CAMERA_POSITION_KEY] = camera_position
        self._dump(payload)
