# ur_game/client/liveness.py

import logging
import threading
from typing import Callable, Optional

from ur_game.game_core import UrGameError

logger = logging.getLogger(__name__)


class LivenessMonitor:
    """
    Периодический тик пока канал открыт (по умолчанию - ping раз в 20 сек).

    stop() обязан вызываться из обработчика закрытия канала, иначе
    повторяющаяся задача переживет сам канал.
    """

    def __init__(self, interval: float, on_tick: Callable[[], None], start_task: Optional[Callable] = None):
        self.interval = interval
        self.on_tick = on_tick
        self.start_task = start_task or _start_daemon_thread
        self._stop_event: Optional[threading.Event] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._stop_event is not None

    def start(self) -> None:
        with self._lock:
            if self._stop_event is not None:
                return
            # У каждого запуска свой Event: старый цикл выходит сам
            self._stop_event = threading.Event()
            self.start_task(self._run, self._stop_event)
        logger.debug(f"Liveness timer started ({self.interval} sec).")

    def stop(self) -> None:
        with self._lock:
            if self._stop_event is None:
                return
            self._stop_event.set()
            self._stop_event = None
        logger.debug("Liveness timer stopped.")

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            try:
                self.on_tick()
            except UrGameError as e:
                # Следующий тик - и есть точка повтора
                logger.error(f"Liveness tick failed: {e.code}: {e.message}")


def _start_daemon_thread(target, *args):
    thread = threading.Thread(target=target, args=args, daemon=True, name="ur-liveness")
    thread.start()
    return thread
