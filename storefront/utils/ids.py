# storefront/utils/ids.py
import threading
import time
from typing import Iterable

from storefront.errors import NotFound

_lock = threading.Lock()
_last_id = 0


def monotonic_id(taken: Iterable[int] = ()) -> int:
    """
    Millisecond timestamp id, strictly greater than every id handed out
    before in this process and than every id in `taken`.
    """
    global _last_id
    floor = max(taken, default=0)
    with _lock:
        candidate = max(int(time.time() * 1000), _last_id + 1, floor + 1)
        _last_id = candidate
    return candidate


def next_sequential_id(taken: Iterable[int], start: int = 0) -> int:
    return max([start, *taken]) + 1


def parse_id(value, not_found: type[NotFound] = NotFound) -> int:
    """Coerce an incoming id to int; anything non-numeric is reported as not found."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise not_found(value) from None
