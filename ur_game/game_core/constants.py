# ur_game/game_core/constants.py

# === Игроки ===
PLAYER_A = 'A'
PLAYER_B = 'B'
PLAYERS = (PLAYER_A, PLAYER_B)

PIECES_PER_PLAYER = 7

# === Доска ===
# Сетка 3x8, индекс клетки = row * 8 + col.
# Ряд 0 - личный ряд A, ряд 1 - общий, ряд 2 - личный ряд B.
BOARD_COLS = 8
BOARD_SIZE = 24

# Значения клетки (2 бита в слове состояния)
CELL_EMPTY = 0
CELL_A = 1
CELL_B = 2

PLAYER_CELL = {PLAYER_A: CELL_A, PLAYER_B: CELL_B}

# Разрывы "креста": на путях их нет.
# 4/20 - стартовые зоны, 5/21 - зоны выхода (рисует только клиент).
START_AREA = {PLAYER_A: 4, PLAYER_B: 20}
EXCLUDED_CELLS = frozenset({4, 5, 20, 21})

# === Сентинелы ходов ===
# Ход "с пула" идет из стартовой зоны игрока, выход - в клетку 24.
OFF_BOARD = START_AREA
EXIT = BOARD_SIZE

# === Пути ===
SHARED_SEGMENT = (8, 9, 10, 11, 12, 13, 14, 15)

PATHS = {
    PLAYER_A: (3, 2, 1, 0) + SHARED_SEGMENT + (7, 6),
    PLAYER_B: (19, 18, 17, 16) + SHARED_SEGMENT + (23, 22),
}
PATH_LENGTH = 14


ROSETTES = frozenset({0, 7, 11, 16, 23})
# Розетки на общем отрезке: фишка там неуязвима.
SAFE_CELLS = ROSETTES & frozenset(SHARED_SEGMENT)

# === Кубики ===
# Четыре двоичных кубика, сумма 0..4.
DICE_COUNT = 4
MAX_DICE_ROLL = 4
