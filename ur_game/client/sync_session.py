# ur_game/client/sync_session.py

import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from ur_game.game_core import (
    DecodeError,
    InvalidMove,
    TransportFailure,
    decode_state,
    format_state_binary,
    parse_state_word,
)
from ur_game.game_core.constants import PLAYER_A
from ur_game.services.game_state import (
    MSG_AI_MOVE,
    MSG_END_TURN,
    MSG_GAME_STATE,
    MSG_MAKE_MOVE,
    MSG_MOVE_REJECTION,
    MSG_NEW_GAME,
    MSG_PING,
    MSG_PONG,
    MSG_RESTORE_GAME,
    MSG_ROLL_DICE,
)

from .channel import Channel, SocketIOChannel
from .liveness import LivenessMonitor
from .local_store import LocalStore

logger = logging.getLogger(__name__)

DEFAULT_PING_INTERVAL_SEC = 20
DEFAULT_PONG_TIMEOUT_SEC = 60
DEFAULT_RECONNECT_DELAY_SEC = 5


class SessionView:
    """
    Адаптер презентации (внешний коллаборатор). По умолчанию ничего не делает.
    """

    def render(self, snapshot: Dict[str, Any], state) -> None:
        pass

    def notify_error(self, message: str) -> None:
        pass

    def set_interaction_enabled(self, enabled: bool) -> None:
        pass


class SyncSession:
    """
    Одна логическая сессия клиента поверх ненадежного канала.

    Клиент ничего не вычисляет в игре: он хранит последний присланный
    'game_state', рендерит его и шлет намерения пользователя.
    Все исходящие действия - fire-and-forget; при ошибке транспорта
    действие логируется и TransportFailure пробрасывается вызывающему.
    """

    def __init__(
        self,
        channel: Channel,
        store: LocalStore,
        view: Optional[SessionView] = None,
        local_player: str = PLAYER_A,
        ping_interval: float = DEFAULT_PING_INTERVAL_SEC,
        pong_timeout: float = DEFAULT_PONG_TIMEOUT_SEC,
        auto_reconnect: bool = False,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY_SEC,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.channel = channel
        self.store = store
        self.view = view or SessionView()
        self.local_player = local_player
        self.pong_timeout = pong_timeout
        self.auto_reconnect = auto_reconnect
        self.reconnect_delay = reconnect_delay
        self.clock = clock

        self._close_requested = False
        self._reconnect_stop = threading.Event()

        self.snapshot: Optional[Dict[str, Any]] = None  # последний payload game_state
        self.state = None  # его декодированная копия (только для чтения)
        self.last_seen: Optional[float] = None

        self.liveness = LivenessMonitor(
            ping_interval,
            self._on_liveness_tick,
            start_task=channel.start_background_task,
        )

        channel.on_ready = self._on_ready
        channel.on_message = self._on_message
        channel.on_close = self._on_close

    @classmethod
    def from_config(cls, config: Dict[str, Any], channel: Optional[Channel] = None, view: Optional[SessionView] = None, **kwargs):
        """
        Собирает сессию по ключам Config (SERVER_URL, PING_INTERVAL_SEC, PONG_TIMEOUT_SEC, ...).
        Без channel подключается к SERVER_URL через Socket.IO.
        """
        if channel is None:
            channel = SocketIOChannel(config['SERVER_URL'])
        return cls(
            channel=channel,
            store=LocalStore(config['CLIENT_STATE_FILE']),
            view=view,
            local_player=config.get('LOCAL_PLAYER', PLAYER_A),
            ping_interval=config.get('PING_INTERVAL_SEC', DEFAULT_PING_INTERVAL_SEC),
            pong_timeout=config.get('PONG_TIMEOUT_SEC', DEFAULT_PONG_TIMEOUT_SEC),
            reconnect_delay=config.get('RECONNECT_DELAY_SEC', DEFAULT_RECONNECT_DELAY_SEC),
            **kwargs,
        )

    # --- Жизненный цикл канала ---

    def connect(self) -> None:
        """Открывает канал. Отправка начнется только после сигнала готовности."""
        self._close_requested = False
        self._reconnect_stop.clear()
        self.channel.open()

    def close(self) -> None:
        """Закрытие по запросу владельца: переподключения после него нет."""
        self._close_requested = True
        self._reconnect_stop.set()
        self.liveness.stop()
        self.channel.close()

    def _on_ready(self) -> None:
        self.last_seen = self.clock()
        self.liveness.start()
        self.view.set_interaction_enabled(True)

        saved = self.store.load_game_state()
        try:
            if saved and saved.get('state') is not None:
                logger.info("Найдено сохраненное состояние, восстанавливаем партию.")
                self.restore_game(saved['state'])
            else:
                self.new_game()
        except TransportFailure as e:
            self._report_transport_failure(e)

    def _on_close(self) -> None:
        # Таймер живости не должен пережить канал
        self.liveness.stop()
        self.view.set_interaction_enabled(False)
        logger.info("Канал закрыт.")

        if self.auto_reconnect and not self._close_requested:
            self.channel.start_background_task(self._reconnect)

    def _reconnect(self) -> None:
        """Пытается открыть канал заново, пока не выйдет или пока не вызван close()."""
        while not self._close_requested and not self.channel.is_open:
            logger.info("Переподключение...")
            try:
                self.channel.open()
                return
            except TransportFailure as e:
                logger.warning(f"Переподключение не удалось: {e.message}. Повтор через {self.reconnect_delay} сек.")
                self._report_transport_failure(e)
            if self._reconnect_stop.wait(self.reconnect_delay):
                return

    # --- Входящие ---

    def _on_message(self, data) -> None:
        self.last_seen = self.clock()

        if isinstance(data, (str, bytes)):
            try:
                message = json.loads(data)
            except ValueError:
                logger.warning(f"Получен не-JSON кадр: {data!r}")
                return
        else:
            message = data

        if not isinstance(message, dict):
            logger.warning(f"Получен кадр неизвестного вида: {message!r}")
            return

        msg_type = message.get('type')
        if msg_type == MSG_GAME_STATE:
            self._handle_game_state(message)
        elif msg_type == MSG_MOVE_REJECTION:
            logger.warning(f"Действие отклонено: {message.get('code')}: {message.get('message')}")
            self.view.notify_error(message.get('message') or 'Действие отклонено.')
        elif msg_type == MSG_PONG:
            logger.debug("pong")
        else:
            logger.debug(f"Пропущено сообщение типа {msg_type!r}")

    def _handle_game_state(self, message: Dict[str, Any]) -> None:
        try:
            word = parse_state_word(message.get('state'))
            state = decode_state(word)
        except DecodeError as e:
            logger.error(f"Не удалось декодировать game_state: {e.message}")
            self.view.notify_error(e.message)
            return

        logger.debug(format_state_binary(word))

        # Полная замена локальной копии
        self.state = state
        self.snapshot = dict(message, state=str(word))
        self.store.save_game_state(self.snapshot)

        self.view.set_interaction_enabled(True)
        self.view.render(self.snapshot, state)

        try:
            self._follow_up()
        except TransportFailure as e:
            self._report_transport_failure(e)

    def _follow_up(self) -> None:
        """Следующее автоматическое действие после нового состояния."""
        snapshot, state = self.snapshot, self.state

        if snapshot.get('game_over') or state.game_over:
            logger.info(f"Партия окончена. Победитель: {state.winner}")
            return

        if state.current_player != self.local_player:
            self.ai_move()
            return

        if state.dice_roll == 0:
            self.roll_dice()
        elif not snapshot.get('moves'):
            # Сервер, который не пропускает ход сам
            self.end_turn()

    # --- Исходящие ---

    def new_game(self) -> None:
        self._send({'type': MSG_NEW_GAME})

    def restore_game(self, state_word) -> None:
        self._send({'type': MSG_RESTORE_GAME, 'state': str(state_word)})

    def roll_dice(self) -> None:
        self._send({'type': MSG_ROLL_DICE})

    def make_move(self, move_from: int, move_to: int) -> None:
        """
        Отправляет ход, если он есть среди последних присланных 'moves'.
        Иначе InvalidMove без отправки.
        """
        move = {'from': int(move_from), 'to': int(move_to)}
        known_moves = (self.snapshot or {}).get('moves') or []
        if move not in [{'from': m['from'], 'to': m['to']} for m in known_moves]:
            raise InvalidMove(f"Ход {move['from']}->{move['to']} отсутствует среди доступных")
        self._send({'type': MSG_MAKE_MOVE, **move})

    def end_turn(self) -> None:
        self._send({'type': MSG_END_TURN})

    def ai_move(self) -> None:
        self._send({'type': MSG_AI_MOVE})

    def ping(self) -> None:
        self._send({'type': MSG_PING})

    def restart(self) -> None:
        """Забывает сохраненную партию и начинает новую."""
        self.store.clear_game_state()
        self.snapshot = None
        self.state = None
        self.new_game()

    def _send(self, envelope: Dict[str, Any]) -> None:
        try:
            self.channel.send(json.dumps(envelope))
        except TransportFailure as e:
            logger.error(f"Ошибка отправки '{envelope['type']}': {e.message}")
            raise

    def _report_transport_failure(self, error: TransportFailure) -> None:
        self.view.notify_error(error.message)
        self.view.set_interaction_enabled(False)

    # --- Живость ---

    def _on_liveness_tick(self) -> None:
        if self.pong_timeout and self.last_seen is not None:
            silence = self.clock() - self.last_seen
            if silence > self.pong_timeout:
                logger.warning(f"Нет входящих кадров {silence:.1f} сек (лимит {self.pong_timeout}). Соединение считается мертвым.")
                self._handle_dead_connection()
                return
        self.ping()

    def _handle_dead_connection(self) -> None:
        self.liveness.stop()
        self.view.set_interaction_enabled(False)
        # Переподключение (если включено) планирует _on_close
        self.channel.close()
