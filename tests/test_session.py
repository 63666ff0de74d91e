from __future__ import annotations

from concurrent.futures import Executor, Future

import pytest

from styleforge import DecodeFailure, EditorConfig, TransformSession


class ManualExecutor(Executor):
    """Executor that runs submitted jobs only when told to."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        self.jobs.append((future, fn, args, kwargs))
        return future

    def run(self, index):
        future, fn, args, kwargs = self.jobs[index]
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


def test_latest_request_wins(make_encoded):
    executor = ManualExecutor()
    session = TransformSession(executor=executor)
    delivered = []

    session.submit(make_encoded(20, 10), "pixel", on_ready=delivered.append)
    session.submit(make_encoded(30, 10), "hd", on_ready=delivered.append)
    assert session.generation == 2

    executor.run(1)
    first = executor.run(0)

    assert [r.effect for r in delivered] == ["hd"]
    assert session.latest is delivered[0]
    assert session.latest.generation == 2
    assert session.latest.filename == "transformed-hd.jpg"
    assert (session.latest.image.width, session.latest.image.height) == (30, 10)
    # The stale computation still completed, its result was just not shown.
    assert first.result().effect == "pixel"


def test_reset_discards_in_flight_results(make_encoded):
    executor = ManualExecutor()
    session = TransformSession(executor=executor)
    delivered = []

    session.submit(make_encoded(8, 8), "oil", on_ready=delivered.append)
    session.reset()
    executor.run(0)

    assert delivered == []
    assert session.latest is None


def test_errors_reported_once_for_current_request():
    executor = ManualExecutor()
    session = TransformSession(executor=executor)
    errors = []

    session.submit(b"garbage", "hd", on_error=lambda gen, exc: errors.append((gen, exc)))
    executor.run(0)

    assert len(errors) == 1
    gen, exc = errors[0]
    assert gen == 1
    assert isinstance(exc, DecodeFailure)
    assert session.latest is None


def test_stale_errors_are_dropped(make_encoded):
    executor = ManualExecutor()
    session = TransformSession(executor=executor)
    errors = []

    session.submit(b"garbage", "hd", on_error=lambda gen, exc: errors.append(gen))
    session.submit(make_encoded(4, 4), "hd")
    executor.run(0)
    executor.run(1)

    assert errors == []
    assert session.latest.generation == 2


def test_session_applies_config(make_encoded):
    executor = ManualExecutor()
    session = TransformSession(executor=executor, config=EditorConfig(max_width=50, output_quality=0.5))
    session.submit(make_encoded(200, 100), "ghibli")
    result = executor.run(0).result()
    assert (result.image.width, result.image.height) == (50, 25)
    assert result.image.quality == 0.5


def test_invalid_config_is_rejected():
    with pytest.raises(ValueError):
        TransformSession(executor=ManualExecutor(), config=EditorConfig(max_width=0))


def test_thread_pool_session(make_encoded):
    session = TransformSession()
    try:
        future = session.submit(make_encoded(40, 20), "neon")
        result = future.result(timeout=60)
    finally:
        session.shutdown()
    assert result.generation == 1
    assert result.filename == "transformed-neon.jpg"
