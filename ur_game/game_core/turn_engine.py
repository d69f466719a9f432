# ur_game/game_core/turn_engine.py
"""
Машина состояний хода.

step(state, action) -> (state, effects) - чистая функция: не хранит
ничего между вызовами, не шлет сообщений и не пишет логов. Проводка
канала и журналирование живут в services/game_session.py.

Фазы выводятся из самого GameState:
    GameOver(winner)          - completed[p] == 7 (проверяется первой)
    AwaitingRoll(player)      - dice_roll == 0
    AwaitingMove(player, r)   - dice_roll == r > 0
TurnPassing(player) мгновенно переходит в AwaitingRoll(other) и
наружу виден только как эффект 'turn_passed'.
"""

from dataclasses import dataclass, replace
from typing import Callable, NamedTuple, Optional

from . import constants as c
from . import move_generator
from .board_state import GameState, apply_move_to_board, create_initial_board_state, other_player
from .errors import IllegalTransition
from .move_validator import validate_move
from .state_codec import decode_state, parse_state_word
from .utils import roll_dice

PHASE_AWAITING_ROLL = "AWAITING_ROLL"
PHASE_AWAITING_MOVE = "AWAITING_MOVE"
PHASE_GAME_OVER = "GAME_OVER"


class Phase(NamedTuple):
    name: str
    player: Optional[str]
    dice_roll: int = 0


# --- Действия ---

@dataclass(frozen=True)
class NewGame:
    pass


@dataclass(frozen=True)
class RestoreGame:
    state: object  # int или десятичная строка


@dataclass(frozen=True)
class RollDice:
    player: str


@dataclass(frozen=True)
class MakeMove:
    player: str
    move: dict


@dataclass(frozen=True)
class EndTurn:
    player: str


def get_phase(state: GameState) -> Phase:
    winner = state.winner
    if winner is not None:
        return Phase(PHASE_GAME_OVER, winner)
    if state.dice_roll == 0:
        return Phase(PHASE_AWAITING_ROLL, state.current_player)
    return Phase(PHASE_AWAITING_MOVE, state.current_player, state.dice_roll)


def _expect(state: GameState, phase_name: str, player: str, action_name: str) -> None:
    phase = get_phase(state)
    if phase.name != phase_name:
        raise IllegalTransition(
            f"{action_name} в фазе {phase.name}, ожидалась {phase_name}",
            context={'phase': phase, 'player': player},
        )
    if phase.player != player:
        raise IllegalTransition(
            f"{action_name} от игрока {player}, но сейчас ход {phase.player}",
            context={'phase': phase, 'player': player},
        )


def step(state: GameState, action, dice: Callable[[], int] = roll_dice) -> tuple:
    """
    Применяет действие и возвращает (новое_состояние, эффекты).

    Поднимает IllegalTransition (чужой ход / не та фаза) или InvalidMove
    (ход не из легального множества); исходное состояние при этом
    не меняется, так как GameState неизменяем.
    """
    if isinstance(action, NewGame):
        return create_initial_board_state(), [{'effect': 'new_game'}]

    if isinstance(action, RestoreGame):
        restored = decode_state(parse_state_word(action.state))
        return restored, [{'effect': 'restored', 'phase': get_phase(restored).name}]

    if isinstance(action, RollDice):
        return _roll(state, action.player, dice)

    if isinstance(action, MakeMove):
        return _move(state, action.player, action.move)

    if isinstance(action, EndTurn):
        _expect(state, PHASE_AWAITING_MOVE, action.player, "end_turn")
        next_player = other_player(action.player)
        new_state = replace(state, dice_roll=0, current_player=next_player)
        return new_state, [{'effect': 'turn_ended', 'player': action.player, 'next_player': next_player}]

    raise IllegalTransition(f"Неизвестное действие: {action!r}")


def _roll(state: GameState, player: str, dice: Callable[[], int]) -> tuple:
    _expect(state, PHASE_AWAITING_ROLL, player, "roll_dice")

    value = dice()
    if not 0 <= value <= c.MAX_DICE_ROLL:
        raise ValueError(f"Бросок вне диапазона 0..{c.MAX_DICE_ROLL}: {value}")

    effects = [{'effect': 'rolled', 'player': player, 'value': value}]
    rolled = replace(state, dice_roll=value)

    if move_generator.are_moves_available(move_generator.get_legal_moves(rolled)):
        return rolled, effects

    # TurnPassing(player) -> AwaitingRoll(other)
    next_player = other_player(player)
    effects.append({'effect': 'turn_passed', 'player': player, 'next_player': next_player})
    return replace(state, dice_roll=0, current_player=next_player), effects


def _move(state: GameState, player: str, move: dict) -> tuple:
    _expect(state, PHASE_AWAITING_MOVE, player, "make_move")

    step_move = validate_move(state, move)
    captured = move_generator.is_capture(state, step_move)
    moved = apply_move_to_board(state, step_move, player)

    effects = [{
        'effect': 'moved',
        'player': player,
        'move': step_move,
        'captured': captured,
        'exited': step_move['to'] == c.EXIT,
    }]

    if moved.completed_of(player) == c.PIECES_PER_PLAYER:
        effects.append({'effect': 'game_over', 'winner': player})
        return replace(moved, dice_roll=0), effects

    if move_generator.lands_on_rosette(step_move):
        effects.append({'effect': 'bonus_turn', 'player': player})
        return replace(moved, dice_roll=0), effects

    return replace(moved, dice_roll=0, current_player=other_player(player)), effects
