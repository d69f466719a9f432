# ur_game/game_core/ai_controller.py

import logging
import random
import time
from typing import Optional

from . import constants as c
from . import move_generator
from .board_state import GameState, get_off_board_pos, get_path_position

# Настраиваем логгер для этого модуля
logger = logging.getLogger(__name__)

# Веса эвристики
SCORE_EXIT = 100
SCORE_CAPTURE = 60
SCORE_ROSETTE = 40
SCORE_ENTER = 20
SCORE_LEAVE_SAFE = -15


class AIController:

    def __init__(self, think_delay: float = 0.0, rng: Optional[random.Random] = None):
        """
        Простой эвристический бот: выход > взятие > розетка > ввод фишки,
        при равенстве - самая продвинутая фишка, затем случайный выбор.
        think_delay - пауза "на подумать" в секундах (0 в тестах).
        """
        self.think_delay = think_delay
        self.rng = rng or random.Random()

        logger.info(f"AIController инициализирован. Задержка: {think_delay:.2f} сек.")

    def choose_move(self, state: GameState, possible_moves: list) -> Optional[dict]:
        """Возвращает выбранный ход из possible_moves или None, если ходов нет."""
        if not possible_moves:
            logger.debug("choose_move: нет ходов, бот пропускает.")
            return None

        if self.think_delay > 0:
            time.sleep(self.think_delay)

        scored = [(self._score(state, move), move) for move in possible_moves]
        best_score = max(score for score, _ in scored)
        best_moves = [move for score, move in scored if score == best_score]

        choice = self.rng.choice(best_moves)
        logger.debug(f"Бот (игрок {state.current_player}) выбрал {choice} (оценка {best_score}) из {possible_moves}")
        return choice

    def _score(self, state: GameState, move: dict) -> int:
        player = state.current_player
        fr, to = move['from'], move['to']

        if to == c.EXIT:
            return SCORE_EXIT

        score = 0
        if move_generator.is_capture(state, move):
            score += SCORE_CAPTURE
        if move_generator.lands_on_rosette(move):
            score += SCORE_ROSETTE

        if fr == get_off_board_pos(player):
            score += SCORE_ENTER
        else:
            if fr in c.SAFE_CELLS:
                score += SCORE_LEAVE_SAFE
            # Чем дальше продвинута фишка, тем выше приоритет
            score += get_path_position(player, fr)

        return score
