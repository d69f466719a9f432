# ur_game/game_core/board_state.py

from dataclasses import dataclass, field, replace
from typing import Optional

from . import constants as c


def _empty_board() -> tuple:
    return (c.CELL_EMPTY,) * c.BOARD_SIZE


@dataclass(frozen=True)
class GameState:
    """
    Полное авторитетное состояние партии.

    Неизменяемый объект: любое изменение порождает новый экземпляр
    (см. apply_move_to_board и turn_engine.step).
    Пары off_board / completed хранятся как (A, B).
    """
    board: tuple = field(default_factory=_empty_board)
    off_board: tuple = (c.PIECES_PER_PLAYER, c.PIECES_PER_PLAYER)
    completed: tuple = (0, 0)
    dice_roll: int = 0
    current_player: str = c.PLAYER_A

    def off_board_of(self, player: str) -> int:
        return self.off_board[player_index(player)]

    def completed_of(self, player: str) -> int:
        return self.completed[player_index(player)]

    def cells_of(self, player: str) -> list:
        """Клетки, занятые фишками игрока, по возрастанию индекса."""
        cell_value = c.PLAYER_CELL[player]
        return [i for i, value in enumerate(self.board) if value == cell_value]

    def on_board_count(self, player: str) -> int:
        return len(self.cells_of(player))

    @property
    def winner(self) -> Optional[str]:
        for player in c.PLAYERS:
            if self.completed_of(player) == c.PIECES_PER_PLAYER:
                return player
        return None

    @property
    def game_over(self) -> bool:
        return self.winner is not None


def player_index(player: str) -> int:
    """0 для A, 1 для B."""
    if player == c.PLAYER_A:
        return 0
    if player == c.PLAYER_B:
        return 1
    raise ValueError(f"Неизвестный игрок: {player!r}")


def other_player(player: str) -> str:
    return c.PLAYER_B if player == c.PLAYER_A else c.PLAYER_A


def owner_of(cell_value: int) -> Optional[str]:
    if cell_value == c.CELL_A:
        return c.PLAYER_A
    if cell_value == c.CELL_B:
        return c.PLAYER_B
    return None


def create_initial_board_state() -> GameState:
    """Все 7+7 фишек в пуле, ходит A, кубики не брошены."""
    return GameState()


def get_path(player: str) -> tuple:
    return c.PATHS[player]


def get_path_position(player: str, cell: int) -> int:
    """Позиция клетки на пути игрока (0..13)."""
    return c.PATHS[player].index(cell)


def get_off_board_pos(player: str) -> int:
    return c.OFF_BOARD[player]


def is_conserved(state: GameState) -> bool:
    """off_board + completed + on_board == 7 для каждого игрока."""
    return all(
        state.off_board_of(p) + state.completed_of(p) + state.on_board_count(p) == c.PIECES_PER_PLAYER
        for p in c.PLAYERS
    )


def _with_pair(pair: tuple, player: str, delta: int) -> tuple:
    values = list(pair)
    values[player_index(player)] += delta
    return tuple(values)


def apply_move_to_board(state: GameState, move: dict, player: str) -> GameState:
    """
    Применяет ОДИН ход (from, to) и возвращает новое состояние.

    Меняет только доску и счетчики: сбитая фишка соперника уходит
    в его пул, выход увеличивает completed. Кубики и очередь хода
    не трогает - это забота turn_engine.
    Легальность хода здесь НЕ проверяется (см. move_validator).
    """
    board = list(state.board)
    off_board = state.off_board
    completed = state.completed
    fr, to = move['from'], move['to']

    if fr == get_off_board_pos(player):
        off_board = _with_pair(off_board, player, -1)
    else:
        board[fr] = c.CELL_EMPTY

    if to == c.EXIT:
        completed = _with_pair(completed, player, +1)
    else:
        victim = owner_of(board[to])
        if victim is not None and victim != player:
            off_board = _with_pair(off_board, victim, +1)
        board[to] = c.PLAYER_CELL[player]

    return replace(state, board=tuple(board), off_board=off_board, completed=completed)
