# ur_game/game_core/__init__.py

# "Публичный API" игрового ядра
from .constants import (
    PLAYER_A, PLAYER_B, PIECES_PER_PLAYER, BOARD_SIZE, EXIT, OFF_BOARD
)

from .board_state import (
    GameState,
    create_initial_board_state,
    apply_move_to_board,
    other_player,
)

from .state_codec import (
    encode_state,
    decode_state,
    parse_state_word,
    piece_layout,
    format_state_binary,
)

from .move_generator import (
    get_legal_moves,
    are_moves_available,
)

from .move_validator import (
    validate_move,
)

from .turn_engine import (
    step,
    get_phase,
    NewGame,
    RestoreGame,
    RollDice,
    MakeMove,
    EndTurn,
)

from .errors import (
    UrGameError,
    DecodeError,
    EncodeError,
    InvalidMove,
    IllegalTransition,
    TransportFailure,
)

from .utils import (
    roll_dice,
    get_winner,
)
