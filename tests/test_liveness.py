import threading

from ur_game.client import LivenessMonitor
from ur_game.game_core import TransportFailure


def test_liveness_start_stop_is_idempotent():
    started = []
    monitor = LivenessMonitor(20, lambda: None, start_task=lambda target, *args: started.append(args))

    monitor.start()
    monitor.start()
    assert monitor.running
    assert len(started) == 1

    stop_event = started[0][0]
    monitor.stop()
    monitor.stop()
    assert not monitor.running
    assert stop_event.is_set()


def test_liveness_ticks_until_stopped():
    ticked = threading.Event()
    monitor = LivenessMonitor(0.01, ticked.set)

    monitor.start()
    try:
        assert ticked.wait(2.0)
    finally:
        monitor.stop()

    assert not monitor.running


def test_liveness_survives_failing_tick():
    calls = []
    done = threading.Event()

    def tick():
        calls.append(1)
        if len(calls) >= 2:
            done.set()
        raise TransportFailure("link down")

    monitor = LivenessMonitor(0.01, tick)
    monitor.start()
    try:
        assert done.wait(2.0)
    finally:
        monitor.stop()
