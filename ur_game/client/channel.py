# ur_game/client/channel.py

import logging
import threading
from typing import Callable, Optional

import socketio
from socketio import exceptions as sio_exceptions

from ur_game.game_core import TransportFailure

logger = logging.getLogger(__name__)


class Channel:
    """
    Двунаправленный канал сообщений (один JSON-конверт на кадр).

    Владелец подписывается на колбэки:
        on_ready()         - канал открыт, можно отправлять
        on_message(data)   - пришел кадр (str или dict)
        on_close()         - канал закрыт (любая причина)
    """

    def __init__(self):
        self.on_ready: Optional[Callable[[], None]] = None
        self.on_message: Optional[Callable[[object], None]] = None
        self.on_close: Optional[Callable[[], None]] = None

    @property
    def is_open(self) -> bool:
        raise NotImplementedError

    def open(self) -> None:
        raise NotImplementedError

    def send(self, text: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def start_background_task(self, target, *args, **kwargs):
        """Запускает фоновую задачу (по умолчанию - daemon-поток)."""
        thread = threading.Thread(target=target, args=args, kwargs=kwargs, daemon=True)
        thread.start()
        return thread

    # --- Хелперы для реализаций ---

    def _fire_ready(self):
        if self.on_ready:
            self.on_ready()

    def _fire_message(self, data):
        if self.on_message:
            self.on_message(data)

    def _fire_close(self):
        if self.on_close:
            self.on_close()


class SocketIOChannel(Channel):
    """Канал поверх python-socketio клиента: конверты ходят событием 'message'."""

    def __init__(self, url: str, client: Optional[socketio.Client] = None, transports=None):
        super().__init__()
        self.url = url
        self.transports = transports
        # Переподключением управляет SyncSession, а не библиотека
        self.client = client or socketio.Client(reconnection=False)

        self.client.on('connect', self._handle_connect)
        self.client.on('disconnect', self._handle_disconnect)
        self.client.on('message', self._handle_message)

    @property
    def is_open(self) -> bool:
        return self.client.connected

    def open(self) -> None:
        logger.info(f"Подключение к {self.url}...")
        try:
            self.client.connect(self.url, transports=self.transports)
        except sio_exceptions.ConnectionError as e:
            logger.error(f"Не удалось подключиться к {self.url}: {e}")
            raise TransportFailure(f"connect failed: {e}") from e

    def send(self, text: str) -> None:
        if not self.client.connected:
            raise TransportFailure("send on closed channel")
        try:
            self.client.send(text)
        except (sio_exceptions.SocketIOError, OSError) as e:
            raise TransportFailure(f"send failed: {e}") from e

    def close(self) -> None:
        if self.client.connected:
            self.client.disconnect()

    def start_background_task(self, target, *args, **kwargs):
        return self.client.start_background_task(target, *args, **kwargs)

    # --- Колбэки socketio ---

    def _handle_connect(self):
        logger.info("Соединение установлено.")
        self._fire_ready()

    def _handle_disconnect(self, *args):
        logger.info(f"Соединение закрыто {args}.")
        self._fire_close()

    def _handle_message(self, data):
        self._fire_message(data)
