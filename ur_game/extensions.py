# ur_game/extensions.py
"""
Инициализация расширений Flask.

Экземпляры расширений создаются здесь, а привязываются к приложению
в фабрике (create_app), чтобы избежать циклических импортов.
"""

from flask_socketio import SocketIO
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# --- Расширения Flask ---

# SocketIO: канал конвертов (событие 'message', один JSON на кадр)
# cors_allowed_origins="*" - для production указать конкретные домены.
socketio = SocketIO(cors_allowed_origins="*")

# Limiter: ограничение частоты HTTP-запросов по IP клиента
limiter = Limiter(key_func=get_remote_address)
