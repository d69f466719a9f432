# ur_game/game_core/move_generator.py

from . import constants as c
from . import board_state as board
from .board_state import GameState


def get_legal_moves(state: GameState) -> list:
    """
    Все легальные ходы текущего игрока при текущем броске.

    Порядок: сначала ввод фишки из пула (если возможен), затем фишки
    на доске в порядке пути (самая продвинутая - последней).
    """
    if state.dice_roll == 0 or state.game_over:
        return []

    player = state.current_player
    roll = state.dice_roll
    path = board.get_path(player)
    moves = []

    # 1. Пул - одна агрегированная "виртуальная фишка"
    if state.off_board_of(player) > 0:
        entry_cell = path[roll - 1]
        if _can_land(state, entry_cell, player):
            moves.append({'from': board.get_off_board_pos(player), 'to': entry_cell})

    # 2. Фишки на доске
    own_cells = set(state.cells_of(player))
    for position, fr in enumerate(path):
        if fr not in own_cells:
            continue

        target = position + roll

        # 2.1 Выход - только точным броском
        if target == c.PATH_LENGTH:
            moves.append({'from': fr, 'to': c.EXIT})
            continue

        # 2.2 Перелет за конец пути запрещен
        if target > c.PATH_LENGTH:
            continue

        to = path[target]
        if _can_land(state, to, player):
            moves.append({'from': fr, 'to': to})

    return moves


def _can_land(state: GameState, cell: int, player: str) -> bool:
    """Пусто, или соперник не на защищенной розетке. Свою фишку бить нельзя."""
    occupant = board.owner_of(state.board[cell])
    if occupant is None:
        return True
    if occupant == player:
        return False
    return cell not in c.SAFE_CELLS


def is_capture(state: GameState, move: dict) -> bool:
    """Сбивает ли ход фишку соперника."""
    to = move['to']
    if to == c.EXIT:
        return False
    occupant = board.owner_of(state.board[to])
    return occupant is not None and occupant != state.current_player


def lands_on_rosette(move: dict) -> bool:
    return move['to'] in c.ROSETTES


def are_moves_available(moves) -> bool:
    """Проверяет, есть ли хотя бы один ход в списке."""
    return bool(moves)
