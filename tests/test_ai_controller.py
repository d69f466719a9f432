import random

from ur_game.game_core import get_legal_moves
from ur_game.game_core.ai_controller import AIController


def test_no_moves_returns_none(make_state):
    assert AIController().choose_move(make_state(), []) is None


def test_prefers_exit(make_state):
    state = make_state(cells={22: 'B', 9: 'A'}, dice_roll=1, current_player='B')
    moves = get_legal_moves(state)

    assert AIController(rng=random.Random(1)).choose_move(state, moves) == {'from': 22, 'to': 24}


def test_prefers_capture_over_entry(make_state):
    state = make_state(cells={12: 'B', 13: 'A'}, dice_roll=1, current_player='B')
    moves = get_legal_moves(state)

    assert {'from': 20, 'to': 19} in moves
    assert AIController(rng=random.Random(1)).choose_move(state, moves) == {'from': 12, 'to': 13}


def test_choice_is_always_legal(make_state):
    state = make_state(cells={8: 'A', 1: 'A'}, dice_roll=1)
    moves = get_legal_moves(state)
    controller = AIController(rng=random.Random(7))

    for _ in range(20):
        assert controller.choose_move(state, moves) in moves
