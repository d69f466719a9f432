# ur_game/game_core/utils.py

import random
from typing import Optional

from . import constants as c


def roll_dice(rng: Optional[random.Random] = None) -> int:
    """Бросает четыре двоичных кубика и возвращает сумму (0..4)."""
    rng = rng or random
    return sum(rng.randint(0, 1) for _ in range(c.DICE_COUNT))


def get_winner(state) -> Optional[str]:
    """Возвращает 'A', 'B' или None (нет победителя)."""
    return state.winner
