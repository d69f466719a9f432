import json
import os

import pytest

from ur_game import create_app, socketio
from ur_game.game_core import GameState
from ur_game.game_core import constants as c

# Register Socket.IO handlers before any create_app(): Flask-SocketIO keeps
# handlers for re-registration on later init_app() calls only if they are
# declared while no server exists yet (each test builds a fresh app).
from ur_game.sockets import connection_handlers, game_handlers  # noqa: E402,F401


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    RATELIMIT_ENABLED = False
    AI_THINK_DELAY_SEC = 0.0


@pytest.fixture()
def flask_app(tmp_path):
    class _Config(TestConfig):
        LOG_FILE = str(tmp_path / 'application.log')
        EVENT_LOG_FILE = str(tmp_path / 'game_events.log')
        CLIENT_STATE_FILE = str(tmp_path / 'client_state.json')

    application, _ = create_app(_Config)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def make_state():
    """
    Собирает GameState по расстановке {клетка: игрок}.
    Пул считается сам, чтобы фишки сходились до семи.
    """
    def _make(cells=None, completed=(0, 0), dice_roll=0, current_player=c.PLAYER_A):
        cells = cells or {}
        board = [c.CELL_EMPTY] * c.BOARD_SIZE
        for cell, player in cells.items():
            board[cell] = c.PLAYER_CELL[player]

        on_board_a = sum(1 for p in cells.values() if p == c.PLAYER_A)
        on_board_b = sum(1 for p in cells.values() if p == c.PLAYER_B)
        off_board = (
            c.PIECES_PER_PLAYER - completed[0] - on_board_a,
            c.PIECES_PER_PLAYER - completed[1] - on_board_b,
        )
        return GameState(
            board=tuple(board),
            off_board=off_board,
            completed=tuple(completed),
            dice_roll=dice_roll,
            current_player=current_player,
        )

    return _make


@pytest.fixture()
def received_envelopes():
    """Разбирает кадры события 'message' из Socket.IO test client."""
    def _received(test_client):
        envelopes = []
        for packet in test_client.get_received():
            if packet['name'] != 'message':
                continue
            args = packet['args']
            if isinstance(args, (list, tuple)):
                args = args[0]
            envelopes.append(json.loads(args) if isinstance(args, str) else args)
        return envelopes

    return _received
