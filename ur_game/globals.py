# ur_game/globals.py

import datetime
import logging

from flask import has_app_context

from ur_game.services.logging_service import log_event_to_file

logger = logging.getLogger("ur_game.events")


def log_event(event_type, message, sid=None, game_id=None, extra_data=None):
    """
    Единая строка аудита: пишется в EVENT_LOG_FILE и в логгер 'ur_game.events'.
    Вне контекста приложения (юнит-тесты ядра) - только в логгер.
    """
    timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    log_entry = f"[{timestamp}] [TYPE: {event_type}]"

    if sid:
        log_entry += f" [SID: {sid}]"
    if game_id:
        log_entry += f" [GameID: {game_id}]"
    if extra_data:
        log_entry += f" [Data: {extra_data}]"

    log_entry += f" | {message}\n"

    logger.info(log_entry.rstrip())
    if has_app_context():
        log_event_to_file(log_entry)
