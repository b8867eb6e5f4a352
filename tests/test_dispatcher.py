import asyncio
import threading
import time

import pytest

from core.api import QueryDispatcher
from core.errors import QueryExecutionError, QueryMalformedError
from core.models import Query


class _Result:
    def __init__(self, mode: str, pos: str):
        self.mode = mode
        self.pos = pos

    def to_serializable(self):
        return {"mode": self.mode, "pos": self.pos}

    def to_text(self) -> str:
        return f"{self.pos}: {self.mode}\n"


class _SlowEngine:
    """Records the wall-clock interval of every call."""

    def __init__(self, delay: float = 0.02):
        self.delay = delay
        self.intervals: list[tuple[float, float]] = []
        self._guard = threading.Lock()

    def query(self, mode: str, pos: str) -> _Result:
        start = time.monotonic()
        time.sleep(self.delay)
        end = time.monotonic()
        with self._guard:
            self.intervals.append((start, end))
        return _Result(mode, pos)


class _FailingEngine:
    def __init__(self, exc: Exception):
        self.exc = exc
        self.calls = 0

    def query(self, mode: str, pos: str):
        self.calls += 1
        raise self.exc


class _RecordingAudit:
    def __init__(self):
        self.records: list[tuple] = []

    def record(self, origin, mode, pos, format, scope):
        self.records.append((origin, mode, pos, format, scope))


def _assert_no_overlap(intervals):
    ordered = sorted(intervals)
    for (_, prev_end), (next_start, _) in zip(ordered, ordered[1:]):
        assert next_start >= prev_end


def test_execute_forwards_mode_and_position():
    dispatcher = QueryDispatcher(_SlowEngine(delay=0))

    result = dispatcher.execute(Query(mode="describe", pos="/proj/a.py:#10"))

    assert result.to_serializable() == {"mode": "describe", "pos": "/proj/a.py:#10"}


def test_concurrent_threads_never_overlap():
    engine = _SlowEngine()
    dispatcher = QueryDispatcher(engine)

    threads = [
        threading.Thread(target=dispatcher.execute, args=(Query(mode="describe", pos=f"/a.py:#{i}"),))
        for i in range(8)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(engine.intervals) == 8
    _assert_no_overlap(engine.intervals)


@pytest.mark.asyncio
async def test_concurrent_tasks_never_overlap():
    engine = _SlowEngine()
    dispatcher = QueryDispatcher(engine)

    await asyncio.gather(
        *(asyncio.to_thread(dispatcher.execute, Query(mode="callers", pos=f"/a.py:#{i}")) for i in range(6))
    )

    assert len(engine.intervals) == 6
    _assert_no_overlap(engine.intervals)


def test_query_errors_propagate_unchanged_and_are_not_retried():
    engine = _FailingEngine(QueryMalformedError("invalid position"))
    dispatcher = QueryDispatcher(engine)

    with pytest.raises(QueryMalformedError, match="invalid position"):
        dispatcher.execute(Query(mode="describe", pos="nonsense"))
    assert engine.calls == 1


def test_unexpected_engine_failure_is_wrapped():
    engine = _FailingEngine(KeyError("boom"))
    dispatcher = QueryDispatcher(engine)

    with pytest.raises(QueryExecutionError) as exc:
        dispatcher.execute(Query(mode="describe", pos="/a.py:#1"))
    assert isinstance(exc.value.__cause__, KeyError)
    assert engine.calls == 1


def test_lock_released_after_failure():
    engine = _FailingEngine(RuntimeError("boom"))
    dispatcher = QueryDispatcher(engine)

    for _ in range(2):
        with pytest.raises(QueryExecutionError):
            dispatcher.execute(Query(mode="describe", pos="/a.py:#1"))
    assert engine.calls == 2


def test_audit_records_every_query_even_on_failure():
    audit = _RecordingAudit()
    dispatcher = QueryDispatcher(
        _FailingEngine(QueryMalformedError("bad")), audit=audit, scope_description="./proj"
    )

    with pytest.raises(QueryMalformedError):
        dispatcher.execute(Query(mode="describe", pos="x", format="json", origin="1.2.3.4:5"))

    assert audit.records == [("1.2.3.4:5", "describe", "x", "json", "./proj")]


def test_no_audit_by_default():
    dispatcher = QueryDispatcher(_SlowEngine(delay=0))

    assert dispatcher.audit is None
    dispatcher.execute(Query(mode="describe", pos="/a.py:#1"))


class _BlockingEngine:
    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()

    def query(self, mode: str, pos: str) -> _Result:
        self.started.set()
        self.release.wait(5)
        return _Result(mode, pos)


def test_waiting_query_is_audited_before_it_gets_the_lock():
    engine = _BlockingEngine()
    audit = _RecordingAudit()
    dispatcher = QueryDispatcher(engine, audit=audit)

    first = threading.Thread(target=dispatcher.execute, args=(Query(mode="describe", pos="/a.py:#1"),))
    second = threading.Thread(target=dispatcher.execute, args=(Query(mode="referrers", pos="/a.py:#2"),))
    try:
        first.start()
        assert engine.started.wait(5)
        second.start()

        deadline = time.monotonic() + 5
        while len(audit.records) < 2 and time.monotonic() < deadline:
            time.sleep(0.01)

        assert not engine.release.is_set()
        assert [r[1] for r in audit.records] == ["describe", "referrers"]
    finally:
        engine.release.set()
        first.join(5)
        second.join(5)
