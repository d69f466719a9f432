# ur_game/config.py

import os

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


class Config:
    """Базовый класс конфигурации (безопасные значения)."""

    SECRET_KEY = os.environ.get('SECRET_KEY') or 'ur-game-default-key-SHOULD-BE-CHANGED'

    LOG_FILE = os.environ.get('UR_LOG_FILE', 'application.log')
    EVENT_LOG_FILE = os.environ.get('UR_EVENT_LOG_FILE', 'game_events.log')

    # --- Rate limiting (HTTP) ---
    RATELIMIT_STORAGE_URI = "memory://"
    RATELIMIT_DEFAULT = "200 per minute"

    # --- Стороны ---
    LOCAL_PLAYER = 'A'
    AI_PLAYER = 'B'

    # --- Бот ---
    AI_THINK_DELAY_SEC = float(os.environ.get('AI_THINK_DELAY_SEC', '0.0'))

    # --- Клиент: живость канала и локальное состояние ---
    PING_INTERVAL_SEC = 20
    # Нет ни одного входящего кадра дольше этого срока - соединение мертво. 0 отключает.
    PONG_TIMEOUT_SEC = 60
    # Пауза между попытками переподключения (при auto_reconnect)
    RECONNECT_DELAY_SEC = 5
    CLIENT_STATE_FILE = os.path.join(BASE_DIR, 'instance', 'client_state.json')
    SERVER_URL = os.environ.get('UR_SERVER_URL', 'http://127.0.0.1:4999')
