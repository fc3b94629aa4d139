# src/services/ids.py
import threading
import time

_lock = threading.Lock()
_last_issued = 0


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def new_recipe_id() -> str:
    """Millisecond timestamp id for a custom recipe, strictly increasing per process."""
    global _last_issued
    with _lock:
        candidate = max(_now_ms(), _last_issued + 1)
        _last_issued = candidate
    return str(candidate)
