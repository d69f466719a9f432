import json

import pytest

from ur_game.client import Channel, LocalStore, SessionView, SyncSession
from ur_game.game_core import InvalidMove, TransportFailure, encode_state
from ur_game.services.game_state import build_game_state_payload, build_rejection_payload


class FakeChannel(Channel):
    """Канал в памяти: open() сразу сигналит готовность."""

    def __init__(self):
        super().__init__()
        self.sent = []
        self.opened = 0
        self.fail_sends = False
        self.failed_opens = 0
        self.refuse_opens = 0
        self.background_tasks = []
        self._open = False

    @property
    def is_open(self):
        return self._open

    def open(self):
        if self.refuse_opens:
            self.refuse_opens -= 1
            self.failed_opens += 1
            raise TransportFailure("connection refused")
        self.opened += 1
        self._open = True
        self._fire_ready()

    def send(self, text):
        if self.fail_sends:
            raise TransportFailure("link down")
        self.sent.append(json.loads(text))

    def close(self):
        if self._open:
            self._open = False
            self._fire_close()

    def start_background_task(self, target, *args, **kwargs):
        self.background_tasks.append((target, args))

    def run_last_task(self):
        target, args = self.background_tasks[-1]
        target(*args)

    def deliver(self, payload):
        self._fire_message(json.dumps(payload))

    def sent_types(self):
        return [envelope['type'] for envelope in self.sent]


class RecordingView(SessionView):
    def __init__(self):
        self.rendered = []
        self.errors = []
        self.interaction = None

    def render(self, snapshot, state):
        self.rendered.append((snapshot, state))

    def notify_error(self, message):
        self.errors.append(message)

    def set_interaction_enabled(self, enabled):
        self.interaction = enabled


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture()
def channel():
    return FakeChannel()


@pytest.fixture()
def store(tmp_path):
    return LocalStore(tmp_path / 'client_state.json')


@pytest.fixture()
def view():
    return RecordingView()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def session(channel, store, view, clock):
    return SyncSession(channel, store, view=view, clock=clock)


def test_ready_without_saved_state_starts_new_game(session, channel):
    session.connect()

    assert channel.sent_types() == ['new_game']
    assert session.liveness.running


def test_ready_with_saved_state_restores(session, channel, store):
    store.save_game_state({'type': 'game_state', 'state': '12345'})

    session.connect()

    assert channel.sent == [{'type': 'restore_game', 'state': '12345'}]


def test_game_state_is_persisted_rendered_and_rolled(session, channel, store, view, make_state):
    session.connect()
    payload = build_game_state_payload(make_state())

    channel.deliver(payload)

    assert store.load_game_state() == payload
    assert view.rendered[-1][0] == payload
    assert view.rendered[-1][1] == make_state()
    assert view.interaction is True
    assert channel.sent_types() == ['new_game', 'roll_dice']


def test_remote_turn_requests_ai_move(session, channel, make_state):
    session.connect()
    channel.deliver(build_game_state_payload(make_state(current_player='B')))

    assert channel.sent_types()[-1] == 'ai_move'


def test_local_turn_without_moves_ends_turn(session, channel, make_state):
    session.connect()
    stuck = make_state(cells={9: 'A', 11: 'B'}, completed=(6, 0), dice_roll=2)
    payload = build_game_state_payload(stuck)
    assert payload['moves'] == []

    channel.deliver(payload)

    assert channel.sent_types()[-1] == 'end_turn'


def test_game_over_sends_nothing(session, channel, make_state):
    session.connect()
    channel.deliver(build_game_state_payload(make_state(completed=(7, 0), current_player='B')))

    assert channel.sent_types() == ['new_game']


def test_make_move_is_filtered_against_last_moves(session, channel, make_state):
    session.connect()
    channel.deliver(build_game_state_payload(make_state(dice_roll=1)))
    assert channel.sent_types() == ['new_game']

    with pytest.raises(InvalidMove):
        session.make_move(4, 2)
    assert channel.sent_types() == ['new_game']

    session.make_move(4, 3)
    assert channel.sent[-1] == {'type': 'make_move', 'from': 4, 'to': 3}


def test_corrupt_state_is_not_persisted(session, channel, store, view):
    session.connect()

    channel.deliver({'type': 'game_state', 'state': '1'})

    assert store.load_game_state() is None
    assert view.errors
    assert view.rendered == []
    assert session.state is None


def test_rejection_is_shown(session, channel, view):
    session.connect()
    channel.deliver(build_rejection_payload('nope', 'INVALID_MOVE'))

    assert view.errors == ['nope']


def test_restart_clears_saved_game(session, channel, store, make_state):
    session.connect()
    channel.deliver(build_game_state_payload(make_state(dice_roll=1)))

    session.restart()

    assert store.load_game_state() is None
    assert session.snapshot is None
    assert channel.sent_types()[-1] == 'new_game'


def test_send_failure_propagates(session, channel):
    session.connect()
    channel.fail_sends = True

    with pytest.raises(TransportFailure):
        session.roll_dice()


def test_send_failure_during_follow_up_disables_view(session, channel, view, make_state):
    session.connect()
    channel.fail_sends = True

    channel.deliver(build_game_state_payload(make_state()))

    assert view.interaction is False
    assert view.errors == ['link down']


def test_close_stops_liveness(session, channel, view):
    session.connect()
    assert session.liveness.running

    channel.close()

    assert not session.liveness.running
    assert view.interaction is False


def test_liveness_tick_pings_while_frames_arrive(session, channel, clock):
    session.connect()
    clock.now += 30
    channel.deliver({'type': 'pong'})
    clock.now += 30

    session._on_liveness_tick()

    assert channel.sent_types()[-1] == 'ping'
    assert channel.is_open


def test_silent_channel_is_closed(session, channel, clock):
    session.connect()
    clock.now += 61

    session._on_liveness_tick()

    assert not channel.is_open
    assert not session.liveness.running
    assert 'ping' not in channel.sent_types()
    assert channel.opened == 1


@pytest.fixture()
def reconnecting_session(channel, store, view, clock):
    return SyncSession(channel, store, view=view, clock=clock, auto_reconnect=True, reconnect_delay=0)


def test_silent_channel_reconnects_when_enabled(reconnecting_session, channel, clock, make_state):
    reconnecting_session.connect()
    channel.deliver(build_game_state_payload(make_state(dice_roll=1)))
    clock.now += 61

    reconnecting_session._on_liveness_tick()
    assert not channel.is_open
    channel.run_last_task()

    assert channel.opened == 2
    assert channel.is_open
    assert reconnecting_session.liveness.running
    assert channel.sent[-1] == {'type': 'restore_game', 'state': str(encode_state(make_state(dice_roll=1)))}


def test_dropped_link_reconnects_and_restores(reconnecting_session, channel, view, make_state):
    reconnecting_session.connect()
    channel.deliver(build_game_state_payload(make_state(dice_roll=1)))

    # Сервер оборвал соединение
    channel.close()
    assert view.interaction is False
    channel.run_last_task()

    assert channel.opened == 2
    assert reconnecting_session.liveness.running
    assert view.interaction is True
    assert channel.sent[-1] == {'type': 'restore_game', 'state': str(encode_state(make_state(dice_roll=1)))}


def test_reconnect_retries_after_refusal(reconnecting_session, channel, view):
    reconnecting_session.connect()
    channel.close()
    channel.refuse_opens = 2

    channel.run_last_task()

    assert channel.failed_opens == 2
    assert channel.opened == 2
    assert view.errors == ['connection refused', 'connection refused']
    assert channel.is_open


def test_requested_close_does_not_reconnect(reconnecting_session, channel):
    reconnecting_session.connect()
    tasks_before = len(channel.background_tasks)

    reconnecting_session.close()

    assert len(channel.background_tasks) == tasks_before
    assert not channel.is_open
    assert channel.opened == 1


def test_dropped_link_stays_closed_without_auto_reconnect(session, channel):
    session.connect()
    tasks_before = len(channel.background_tasks)

    channel.close()

    assert len(channel.background_tasks) == tasks_before
    assert channel.opened == 1


def test_from_config(channel, tmp_path):
    config = {
        'CLIENT_STATE_FILE': str(tmp_path / 'state.json'),
        'LOCAL_PLAYER': 'B',
        'PING_INTERVAL_SEC': 5,
        'PONG_TIMEOUT_SEC': 15,
    }
    session = SyncSession.from_config(config, channel)

    assert session.local_player == 'B'
    assert session.pong_timeout == 15
    assert session.liveness.interval == 5
