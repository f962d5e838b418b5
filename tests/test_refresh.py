import threading

from cp750.refresh import RefreshScheduler
from cp750.transport import StreamClosedError

from device_stub import wait_for


def test_idle_until_interval_set():
    calls = []
    scheduler = RefreshScheduler(lambda: calls.append(1))
    try:
        assert scheduler.state == "idle"
        assert scheduler.next_trigger is None
        assert not scheduler.running
        scheduler.set_interval(30)
        assert scheduler.state == "armed"
        assert scheduler.running
        assert wait_for(lambda: len(calls) >= 2)
    finally:
        scheduler.stop()
    assert scheduler.state == "stopped"
    assert not scheduler.running


def test_zero_interval_parks_loop():
    calls = []
    scheduler = RefreshScheduler(lambda: calls.append(1))
    try:
        scheduler.set_interval(20)
        assert wait_for(lambda: calls)
        scheduler.set_interval(0)
        assert scheduler.state == "idle"
        assert scheduler.next_trigger is None
        seen = len(calls)
        assert not wait_for(lambda: len(calls) > seen + 1, timeout=0.2)
        assert scheduler.running
    finally:
        scheduler.stop()


def test_interval_change_rearms_from_now():
    now = [100.0]
    scheduler = RefreshScheduler(lambda: None, clock=lambda: now[0])
    try:
        scheduler.set_interval(60_000)
        assert scheduler.next_trigger == 160.0
        now[0] = 130.0
        scheduler.set_interval(5_000)
        assert scheduler.next_trigger == 135.0
        assert scheduler.interval_ms == 5_000
    finally:
        scheduler.stop()


def test_failed_refresh_keeps_running(caplog):
    calls = []

    def refresh():
        calls.append(1)
        raise RuntimeError("device busy")

    scheduler = RefreshScheduler(refresh)
    try:
        scheduler.set_interval(20)
        assert wait_for(lambda: len(calls) >= 2)
        assert scheduler.state == "armed"
    finally:
        scheduler.stop()
    assert "device busy" in caplog.text


def test_closed_stream_stops_loop():
    fired = threading.Event()

    def refresh():
        fired.set()
        raise StreamClosedError("gone")

    scheduler = RefreshScheduler(refresh)
    scheduler.set_interval(20)
    assert fired.wait(2.0)
    assert wait_for(lambda: scheduler.state == "stopped")
    assert wait_for(lambda: not scheduler.running)
    scheduler.set_interval(20)
    assert scheduler.state == "stopped"
    scheduler.stop()


def test_stop_keeps_reporting_a_refresh_still_in_progress():
    entered = threading.Event()
    release = threading.Event()

    def refresh():
        entered.set()
        release.wait(5.0)

    scheduler = RefreshScheduler(refresh)
    scheduler.set_interval(10)
    assert entered.wait(2.0)
    scheduler.stop(timeout=0.05)
    assert scheduler.state == "stopped"
    assert scheduler.running
    release.set()
    assert wait_for(lambda: not scheduler.running)
