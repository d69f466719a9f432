# ur_game/game_core/state_codec.py

from . import constants as c
from .board_state import GameState, is_conserved, owner_of, player_index
from .errors import DecodeError, EncodeError

# Раскладка 64-битного слова, от младшего бита
OFF_BOARD_A_SHIFT = 0
OFF_BOARD_B_SHIFT = 3
COMPLETED_A_SHIFT = 6
COMPLETED_B_SHIFT = 9
PLAYER_SHIFT = 12
DICE_SHIFT = 13
BOARD_SHIFT = 16

COUNT_MASK = 0b111
PLAYER_MASK = 0b1
DICE_MASK = 0b111
CELL_MASK = 0b11
CELL_BITS = 2

WORD_BITS = 64
WORD_MASK = (1 << WORD_BITS) - 1


def encode_state(state: GameState) -> int:
    """
    Кодирует GameState в 64-битное беззнаковое слово.

    Поднимает EncodeError, если поле не помещается в свою ширину
    (пул/завершенные > 7, кубики > 4, значение клетки вне {0, 1, 2}).
    """
    if len(state.board) != c.BOARD_SIZE:
        raise EncodeError(f"Ожидалась доска из {c.BOARD_SIZE} клеток, получено {len(state.board)}")

    counts = (
        ('off_board[A]', state.off_board[0], OFF_BOARD_A_SHIFT),
        ('off_board[B]', state.off_board[1], OFF_BOARD_B_SHIFT),
        ('completed[A]', state.completed[0], COMPLETED_A_SHIFT),
        ('completed[B]', state.completed[1], COMPLETED_B_SHIFT),
    )

    word = 0

    # Биты 0-11: четыре счетчика по 3 бита
    for name, value, shift in counts:
        if not isinstance(value, int) or not 0 <= value <= c.PIECES_PER_PLAYER:
            raise EncodeError(f"{name}={value!r} не помещается в 3 бита")
        word |= (value & COUNT_MASK) << shift

    # Бит 12: чей ход
    try:
        word |= (player_index(state.current_player) & PLAYER_MASK) << PLAYER_SHIFT
    except ValueError as e:
        raise EncodeError(str(e)) from e

    # Биты 13-15: кубики
    if not isinstance(state.dice_roll, int) or not 0 <= state.dice_roll <= c.MAX_DICE_ROLL:
        raise EncodeError(f"dice_roll={state.dice_roll!r} вне диапазона 0..{c.MAX_DICE_ROLL}")
    word |= (state.dice_roll & DICE_MASK) << DICE_SHIFT

    # Биты 16-63: доска, по 2 бита на клетку
    for i, cell in enumerate(state.board):
        if cell not in (c.CELL_EMPTY, c.CELL_A, c.CELL_B):
            raise EncodeError(f"Клетка {i}: недопустимое значение {cell!r}")
        word |= cell << (BOARD_SHIFT + CELL_BITS * i)

    return word


def decode_state(word: int) -> GameState:
    """
    Декодирует 64-битное слово в GameState.

    Никогда не подставляет состояние по умолчанию: любое повреждение
    (значение клетки 11, кубики > 4, нарушение сохранения фишек,
    фишка в разрыве креста или в чужом личном ряду) -> DecodeError.
    """
    if isinstance(word, bool) or not isinstance(word, int):
        raise DecodeError(f"Слово состояния должно быть целым, получено {type(word).__name__}")
    if not 0 <= word <= WORD_MASK:
        raise DecodeError(f"Слово состояния {word} вне диапазона 64 бит")

    off_board = (
        (word >> OFF_BOARD_A_SHIFT) & COUNT_MASK,
        (word >> OFF_BOARD_B_SHIFT) & COUNT_MASK,
    )
    completed = (
        (word >> COMPLETED_A_SHIFT) & COUNT_MASK,
        (word >> COMPLETED_B_SHIFT) & COUNT_MASK,
    )
    current_player = c.PLAYERS[(word >> PLAYER_SHIFT) & PLAYER_MASK]

    dice_roll = (word >> DICE_SHIFT) & DICE_MASK
    if dice_roll > c.MAX_DICE_ROLL:
        raise DecodeError(f"dice_roll={dice_roll} вне диапазона 0..{c.MAX_DICE_ROLL}")

    board = []
    for i in range(c.BOARD_SIZE):
        cell = (word >> (BOARD_SHIFT + CELL_BITS * i)) & CELL_MASK
        if cell == CELL_MASK:
            raise DecodeError(f"Клетка {i}: недопустимое значение 0b11")

        owner = owner_of(cell)
        if owner is not None:
            if i in c.EXCLUDED_CELLS:
                raise DecodeError(f"Клетка {i} не лежит ни на одном пути, но занята игроком {owner}")
            if i not in c.PATHS[owner]:
                raise DecodeError(f"Клетка {i} недостижима для игрока {owner}")
        board.append(cell)

    state = GameState(
        board=tuple(board),
        off_board=off_board,
        completed=completed,
        dice_roll=dice_roll,
        current_player=current_player,
    )

    if not is_conserved(state):
        raise DecodeError(
            f"Нарушено сохранение фишек: off={off_board}, completed={completed}, "
            f"on_board=({state.on_board_count(c.PLAYER_A)}, {state.on_board_count(c.PLAYER_B)})"
        )
    return state


def parse_state_word(value) -> int:
    """
    Принимает слово состояния в том виде, в каком оно приходит по сети:
    int или десятичная строка.
    """
    if isinstance(value, bool):
        raise DecodeError("Слово состояния не может быть bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        # str.isdigit() пропускает и юникодные цифры вроде "²"
        if text.isascii() and text.isdigit():
            return int(text)
    raise DecodeError(f"Слово состояния должно быть int или десятичной строкой, получено {value!r}")


def piece_layout(state: GameState) -> dict:
    """
    Назначает логические номера 0..6 фишкам каждого игрока (только для рендера).

    Первые off_board номеров - в пуле, следующие - на доске по возрастанию
    индекса клетки, последние completed - завершенные.
    Возвращает {игрок: [позиция, ...]}, где позиция - 'off', индекс клетки
    или 'done'.
    """
    layout = {}
    for player in c.PLAYERS:
        positions = ['off'] * state.off_board_of(player)
        positions.extend(state.cells_of(player))
        positions.extend(['done'] * state.completed_of(player))
        layout[player] = positions
    return layout


def format_state_binary(word: int) -> str:
    """Отладочное представление слова, сгруппированное по полям."""
    bits = format(word & WORD_MASK, '064b')
    board_bits = bits[:WORD_BITS - BOARD_SHIFT]
    cells = [board_bits[i:i + CELL_BITS] for i in range(0, len(board_bits), CELL_BITS)]
    # Клетка 0 - в младших битах, поэтому переворачиваем
    cells.reverse()
    low = bits[WORD_BITS - BOARD_SHIFT:]
    return (
        f"board[0..23]={' '.join(cells)} | "
        f"dice={low[0:3]} player={low[3]} "
        f"doneB={low[4:7]} doneA={low[7:10]} offB={low[10:13]} offA={low[13:16]}"
    )
