# ur_game/services/game_session.py

import logging
import random
import threading
from typing import Callable, List, Optional

from ur_game.game_core import (
    DecodeError,
    EndTurn,
    IllegalTransition,
    InvalidMove,
    MakeMove,
    NewGame,
    RestoreGame,
    RollDice,
    format_state_binary,
    encode_state,
    get_legal_moves,
    get_phase,
    roll_dice,
    step,
)
from ur_game.game_core.ai_controller import AIController
from ur_game.game_core.constants import PLAYER_A, PLAYER_B
from ur_game.game_core.turn_engine import PHASE_AWAITING_MOVE, PHASE_AWAITING_ROLL

from .game_state import (
    Notification,
    REJECT_NO_GAME,
    build_game_state_payload,
    build_rejection_payload,
    notify,
)

logger = logging.getLogger(__name__)


class GameSession:
    """
    Представляет ОДНУ партию одного подключенного клиента.

    Единственная записываемая копия GameState живет здесь. Все изменения
    идут через turn_engine.step под self.lock, и каждое принятое действие
    дает ровно одно уведомление 'game_state'.
    Методы возвращают список уведомлений, отправкой занимаются хендлеры.
    """

    def __init__(
        self,
        game_id: str,
        sid: str,
        ai_controller: AIController,
        log_event: Callable,
        rng: Optional[random.Random] = None,
        human_player: str = PLAYER_A,
        ai_player: str = PLAYER_B,
    ):
        self.id = game_id
        self.sid = sid
        self.ai_controller = ai_controller
        self.log_event = log_event or (lambda *args, **kwargs: None)
        self.rng = rng or random.Random()
        self.human_player = human_player
        self.ai_player = ai_player

        self.lock = threading.RLock()
        self.state = None  # до new_game / restore_game партии нет

        self.log_event("SESSION_INIT", f"Сессия {self.id} создана.", sid=sid, game_id=self.id)

    # --- Жизненный цикл ---

    def new_game(self) -> List[Notification]:
        return self._apply(NewGame(), "new_game")

    def restore_game(self, state_word) -> List[Notification]:
        return self._apply(RestoreGame(state_word), "restore_game")

    # --- Действия человека ---

    def roll_dice(self) -> List[Notification]:
        return self._apply(RollDice(self.human_player), "roll_dice")

    def make_move(self, move: dict) -> List[Notification]:
        return self._apply(MakeMove(self.human_player, move), "make_move")

    def end_turn(self) -> List[Notification]:
        return self._apply(EndTurn(self.human_player), "end_turn")

    # --- Ход бота ---

    def ai_move(self) -> List[Notification]:
        """
        Одно действие бота: бросок в AwaitingRoll(bot) или ход в AwaitingMove(bot).
        В любой другой фазе запрос отклоняется молча (только лог).
        """
        with self.lock:
            if self.state is None:
                return self._no_game("ai_move")

            phase = get_phase(self.state)
            if phase.player == self.ai_player and phase.name == PHASE_AWAITING_ROLL:
                return self._apply(RollDice(self.ai_player), "ai_move")

            if phase.player == self.ai_player and phase.name == PHASE_AWAITING_MOVE:
                move = self.ai_controller.choose_move(self.state, get_legal_moves(self.state))
                if move is None:
                    return self._apply(EndTurn(self.ai_player), "ai_move")
                return self._apply(MakeMove(self.ai_player, move), "ai_move")

            self.log_event(
                "STATE_VIOLATION_BLOCKED",
                f"ai_move requested in phase {phase.name} (player {phase.player}).",
                sid=self.sid,
                game_id=self.id,
            )
            return []

    # --- Внутреннее ---

    def _roll(self) -> int:
        return roll_dice(self.rng)

    def _no_game(self, action_name: str) -> List[Notification]:
        self.log_event("NO_GAME", f"{action_name} before new_game/restore_game.", sid=self.sid, game_id=self.id)
        return [notify(build_rejection_payload('Партия не начата.', REJECT_NO_GAME), self.sid)]

    def _apply(self, action, action_name: str) -> List[Notification]:
        with self.lock:

            if self.state is None and not isinstance(action, (NewGame, RestoreGame)):
                return self._no_game(action_name)

            try:
                new_state, effects = step(self.state, action, dice=self._roll)

            except IllegalTransition as e:
                # Чужой ход / не та фаза: игроку ничего не отправляем
                self.log_event("STATE_VIOLATION_BLOCKED", e.message, sid=self.sid, game_id=self.id)
                return []

            except (InvalidMove, DecodeError) as e:
                self.log_event("ACTION_REJECTED", f"{action_name}: {e.message}", sid=self.sid, game_id=self.id)
                return [notify(build_rejection_payload(**e.to_payload()), self.sid)]

            # --- Commit ---
            self.state = new_state

            for effect in effects:
                self.log_event("GAME_EFFECT", f"{action_name}: {effect['effect']}", sid=self.sid, game_id=self.id, extra_data=effect)

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"[GameSession {self.id}] {format_state_binary(encode_state(new_state))}")

            return [notify(build_game_state_payload(new_state), self.sid)]
