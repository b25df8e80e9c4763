import threading
import time
from collections import defaultdict
from contextlib import contextmanager


_lock = threading.Lock()
_counters = defaultdict(int)
_durations = defaultdict(float)


def labelled(name: str, **labels: str) -> str:
    if not labels:
        return name
    inner = ",".join(f"{key}=\"{value}\"" for key, value in sorted(labels.items()))
    return f"{name}{{{inner}}}"


def inc(name: str, value: int = 1) -> None:
    with _lock:
        _counters[name] += value


def observe(name: str, value: float) -> None:
    with _lock:
        _durations[name] += value


@contextmanager
def timed(name: str):
    start = time.perf_counter()
    try:
        yield
    finally:
        observe(name, time.perf_counter() - start)


def snapshot() -> tuple[dict, dict]:
    with _lock:
        return dict(_counters), dict(_durations)


def reset() -> None:
    with _lock:
        _counters.clear()
        _durations.clear()


def render_text(counters: dict, durations: dict) -> str:
    lines = [f"{name} {value}" for name, value in sorted(counters.items())]
    lines.extend(f"{name}_sum {value}" for name, value in sorted(durations.items()))
    return "\n".join(lines) + "\n"
