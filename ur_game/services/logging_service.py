# ur_game/services/logging_service.py

import logging
import threading

from flask import current_app

logger = logging.getLogger(__name__)

file_lock = threading.RLock()


def log_event_to_file(log_entry):
    """Записывает общее событие в лог-файл (путь из app.config)."""
    log_path = current_app.config['EVENT_LOG_FILE']

    with file_lock:
        try:
            with open(log_path, 'a', encoding='utf-8') as f:
                f.write(log_entry)
        except OSError as e:
            logger.error(f"Failed to write to event log file {log_path}: {e}")
