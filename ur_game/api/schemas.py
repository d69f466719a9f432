# ur_game/api/schemas.py

from marshmallow import EXCLUDE, Schema, ValidationError, fields
from marshmallow.validate import OneOf, Range

from ur_game.game_core import DecodeError, parse_state_word
from ur_game.game_core.constants import BOARD_SIZE
from ur_game.services.game_state import CLIENT_MESSAGE_TYPES, MSG_MAKE_MOVE, MSG_RESTORE_GAME

# --- Наше собственное поле для слова состояния ---

class StateWordField(fields.Field):
    """Слово состояния: int или десятичная строка."""

    def _deserialize(self, value, attr, data, **kwargs):
        try:
            return parse_state_word(value)
        except DecodeError as e:
            raise ValidationError(e.message) from e

# --- Базовая схема конверта ---

class EnvelopeSchema(Schema):
    """
    Общая часть всех входящих конвертов: поле 'type'.
    Лишние поля отбрасываются.
    """
    class Meta:
        unknown = EXCLUDE

    type = fields.Str(
        required=True,
        validate=OneOf(CLIENT_MESSAGE_TYPES, error="Неизвестный тип сообщения."),
        error_messages={"required": "Поле 'type' обязательно."}
    )

# --- make_move ---

class MakeMoveSchema(EnvelopeSchema):
    move_from = fields.Int(
        required=True,
        strict=True,
        data_key="from",
        validate=Range(min=0, max=BOARD_SIZE),
        error_messages={"required": "Поле 'from' обязательно."}
    )
    move_to = fields.Int(
        required=True,
        strict=True,
        data_key="to",
        validate=Range(min=0, max=BOARD_SIZE),
        error_messages={"required": "Поле 'to' обязательно."}
    )

# --- restore_game ---

class RestoreGameSchema(EnvelopeSchema):
    state = StateWordField(
        required=True,
        error_messages={"required": "Поле 'state' обязательно."}
    )


ENVELOPE_SCHEMAS = {
    MSG_MAKE_MOVE: MakeMoveSchema,
    MSG_RESTORE_GAME: RestoreGameSchema,
}


def load_envelope(data) -> dict:
    """
    Валидирует входящий конверт. Поднимает ValidationError.
    Для make_move возвращает ход под ключом 'move'.
    """
    if not isinstance(data, dict):
        raise ValidationError("Конверт должен быть JSON-объектом.")

    envelope = EnvelopeSchema().load(data)
    schema_cls = ENVELOPE_SCHEMAS.get(envelope['type'])
    if schema_cls is None:
        return envelope

    envelope = schema_cls().load(data)
    if envelope['type'] == MSG_MAKE_MOVE:
        envelope['move'] = {'from': envelope.pop('move_from'), 'to': envelope.pop('move_to')}
    return envelope
