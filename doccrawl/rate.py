import threading
import time
from typing import Callable, Dict


class Throttle:
    """Fixed courtesy delay between fetch starts against one origin.

    No backoff: the gap is always ``delay_seconds``.
    """

    def __init__(
        self,
        delay_seconds: float,
        now: Callable[[], float] | None = None,
        sleep: Callable[[float], None] | None = None,
    ):
        self.delay_seconds = delay_seconds
        self._next_slot: Dict[str, float] = {}
        self._lock = threading.Lock()
        self._now = now or time.monotonic
        self._sleep = sleep or time.sleep

    def wait_turn(self, key: str) -> float:
        if self.delay_seconds <= 0:
            return 0.0
        with self._lock:
            now = self._now()
            slot = max(self._next_slot.get(key, now), now)
            self._next_slot[key] = slot + self.delay_seconds
        sleep_for = slot - now
        if sleep_for > 0:
            self._sleep(sleep_for)
        return sleep_for
