# ur_game/game_core/errors.py
"""
Иерархия исключений игрового ядра.

Все исключения наследуются от UrGameError и несут машинно-читаемый
код (code), который уходит клиенту в 'move_rejection'.
"""

from typing import Any, Optional


class UrGameError(Exception):
    """Базовое исключение проекта."""
    code: str = "UR_GAME_ERROR"

    def __init__(self, message: str = "", context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_payload(self) -> dict[str, Any]:
        return {'message': self.message, 'code': self.code}


class CodecError(UrGameError):
    code = "CODEC_ERROR"


class DecodeError(CodecError):
    """Слово состояния повреждено или вне допустимого диапазона."""
    code = "DECODE_ERROR"


class EncodeError(CodecError):
    """Поле состояния не помещается в свою ширину битов."""
    code = "ENCODE_ERROR"


class InvalidMove(UrGameError):
    """Ход не входит в множество легальных ходов."""
    code = "INVALID_MOVE"


class IllegalTransition(UrGameError):
    """Действие не в свою очередь или не в той фазе хода."""
    code = "ILLEGAL_TRANSITION"


class TransportFailure(UrGameError):
    """Ошибка отправки/приема в канале."""
    code = "TRANSPORT_FAILURE"
