from dataclasses import replace

import pytest

from ur_game.game_core import (
    InvalidMove,
    apply_move_to_board,
    create_initial_board_state,
    get_legal_moves,
    validate_move,
)
from ur_game.game_core.board_state import is_conserved
from ur_game.game_core.constants import EXIT, SAFE_CELLS
from ur_game.game_core.move_generator import is_capture, lands_on_rosette


def test_single_entry_move_from_full_pool():
    state = replace(create_initial_board_state(), dice_roll=1)

    assert get_legal_moves(state) == [{'from': 4, 'to': 3}]


def test_entry_for_player_b_uses_own_start_area(make_state):
    state = make_state(dice_roll=4, current_player='B')
    assert get_legal_moves(state) == [{'from': 20, 'to': 16}]


def test_no_moves_without_roll(make_state):
    assert get_legal_moves(make_state(cells={3: 'A'})) == []


def test_own_piece_blocks_entry(make_state):
    state = make_state(cells={3: 'A'}, dice_roll=1)
    assert get_legal_moves(state) == [{'from': 3, 'to': 2}]


def test_exit_only_on_exact_roll(make_state):
    # Клетка 7 - позиция 12 на пути A
    exact = make_state(cells={7: 'A'}, dice_roll=2)
    assert get_legal_moves(exact) == [{'from': 4, 'to': 2}, {'from': 7, 'to': EXIT}]

    overshoot = make_state(cells={7: 'A'}, dice_roll=3)
    assert {'from': 7, 'to': EXIT} not in get_legal_moves(overshoot)
    assert all(move['from'] != 7 for move in get_legal_moves(overshoot))


def test_moves_listed_in_path_order(make_state):
    state = make_state(cells={8: 'A', 1: 'A'}, dice_roll=1)
    assert get_legal_moves(state) == [
        {'from': 4, 'to': 3},
        {'from': 1, 'to': 0},
        {'from': 8, 'to': 9},
    ]


def test_opponent_on_safe_rosette_is_untouchable(make_state):
    state = make_state(cells={9: 'A', 11: 'B'}, dice_roll=2)

    moves = get_legal_moves(state)

    assert moves == [{'from': 4, 'to': 2}]
    assert not any(move['to'] in SAFE_CELLS for move in moves)


def test_capture_sends_victim_to_pool(make_state):
    state = make_state(cells={9: 'A', 10: 'B'}, dice_roll=1)
    move = {'from': 9, 'to': 10}

    assert move in get_legal_moves(state)
    assert is_capture(state, move)

    after = apply_move_to_board(state, move, 'A')

    assert after.board[10] == 1
    assert after.board[9] == 0
    assert after.off_board_of('B') == 7
    assert is_conserved(after)


def test_exit_increments_completed(make_state):
    state = make_state(cells={6: 'A'}, completed=(3, 0), dice_roll=1)
    after = apply_move_to_board(state, {'from': 6, 'to': EXIT}, 'A')

    assert after.completed_of('A') == 4
    assert after.on_board_count('A') == 0
    assert is_conserved(after)


def test_rosettes():
    assert lands_on_rosette({'from': 4, 'to': 0})
    assert lands_on_rosette({'from': 20, 'to': 16})
    assert not lands_on_rosette({'from': 4, 'to': 3})
    assert not lands_on_rosette({'from': 6, 'to': EXIT})


def test_validate_move_returns_matching_legal_move(make_state):
    state = make_state(dice_roll=2)
    assert validate_move(state, {'from': '4', 'to': 2}) == {'from': 4, 'to': 2}


@pytest.mark.parametrize("move", [
    {'from': 4, 'to': 3},
    {'from': 3, 'to': 1},
    {'from': 4},
    {'from': 'x', 'to': 2},
    None,
])
def test_validate_move_rejects(make_state, move):
    state = make_state(dice_roll=2)
    with pytest.raises(InvalidMove):
        validate_move(state, move)


def test_no_moves_after_game_over(make_state):
    state = make_state(completed=(7, 0), dice_roll=3, current_player='B')
    assert get_legal_moves(state) == []
