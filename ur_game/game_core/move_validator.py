# ur_game/game_core/move_validator.py

from . import move_generator
from .board_state import GameState
from .errors import InvalidMove


def normalize_move(move) -> dict:
    """Приводит присланный клиентом ход к виду {'from': int, 'to': int}."""
    try:
        return {'from': int(move['from']), 'to': int(move['to'])}
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidMove(f"Некорректный формат хода: {move!r}") from e


def validate_move(state: GameState, move) -> dict:
    """
    Проверяет ход по множеству легальных ходов и возвращает совпавший элемент.

    Вызывается для каждого make_move, даже если клиент уже отфильтровал
    ходы. Поднимает InvalidMove, если совпадения нет.
    """
    step = normalize_move(move)
    possible_moves = move_generator.get_legal_moves(state)

    for candidate in possible_moves:
        if candidate == step:
            return candidate

    raise InvalidMove(
        f"Ход {step['from']}->{step['to']} недопустим при броске {state.dice_roll}",
        context={'move': step, 'possible_moves': possible_moves},
    )
