import sys
import threading
import time
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from labeled_stopwatch import SharedStopwatch, StopwatchConfig, global_stopwatch
from labeled_stopwatch import stopwatch as stopwatch_module


def _run_threads(count, target):
    barrier = threading.Barrier(count)
    errors = []

    def wrapped(index):
        barrier.wait()
        try:
            target(index)
        except Exception as exc:  # surfaced through the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=wrapped, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert errors == []


def test_concurrent_distinct_labels_keep_every_update(capsys):
    sw = SharedStopwatch(StopwatchConfig(silent=True))
    per_thread = 200
    results = {}

    def work(index):
        for j in range(per_thread):
            sw.start(f"t{index}-{j}")
        for j in range(0, per_thread, 2):
            results[(index, j)] = sw.stop(f"t{index}-{j}")

    _run_threads(8, work)

    assert len(sw) == 8 * per_thread // 2
    assert all(f"t{i}-{j}" in sw for i in range(8) for j in range(1, per_thread, 2))
    assert len(results) == 8 * per_thread // 2
    assert all(value >= 0.0 for value in results.values())
    assert capsys.readouterr().err == ""


def test_concurrent_stop_of_one_label_succeeds_once(capsys):
    sw = SharedStopwatch(StopwatchConfig(silent=True))
    sw.start("shared")
    time.sleep(0.001)
    results = []

    _run_threads(6, lambda _: results.append(sw.stop("shared")))

    assert sum(1 for value in results if value > 0.0) == 1
    assert capsys.readouterr().err.count("Timer 'shared' does not exist") == 5


def test_handles_share_registry(capsys):
    sw = SharedStopwatch(StopwatchConfig(silent=True))
    other = sw.handle()
    assert other is not sw
    assert other.shares_registry_with(sw)
    assert not SharedStopwatch().shares_registry_with(sw)

    sw.start("io")
    assert "io" in other
    assert other.stop("io") >= 0.0
    assert "io" not in sw
    other.start("a")
    sw.clear()
    assert other.labels() == []
    assert capsys.readouterr().out == ""


def test_global_stopwatch_is_shared():
    first = global_stopwatch()
    assert isinstance(first, SharedStopwatch)
    assert global_stopwatch() is first
    first.start("global")
    assert "global" in global_stopwatch()


def test_global_stopwatch_constructed_once(monkeypatch):
    constructed = []
    lock = threading.Lock()

    class CountingStopwatch(SharedStopwatch):
        def __init__(self, *args, **kwargs):
            with lock:
                constructed.append(self)
            time.sleep(0.01)
            super().__init__(*args, **kwargs)

    monkeypatch.setattr(stopwatch_module, "SharedStopwatch", CountingStopwatch)
    seen = []

    _run_threads(16, lambda _: seen.append(global_stopwatch()))

    assert len(constructed) == 1
    assert len(seen) == 16
    assert all(instance is constructed[0] for instance in seen)
