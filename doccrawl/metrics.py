import threading
import time
from dataclasses import dataclass, replace


@dataclass
class Totals:
    fetched: int = 0
    failed: int = 0
    bytes: int = 0
    links_admitted: int = 0
    fetch_ms_sum: float = 0.0


class Metrics:
    def __init__(self):
        self._totals = Totals()
        self._lock = threading.Lock()
        self._start = time.monotonic()

    def record_fetch(self, ok: bool, bytes_read: int, fetch_ms: float) -> None:
        with self._lock:
            if ok:
                self._totals.fetched += 1
            else:
                self._totals.failed += 1
            self._totals.bytes += max(0, bytes_read)
            self._totals.fetch_ms_sum += fetch_ms

    def record_links(self, admitted: int) -> None:
        with self._lock:
            self._totals.links_admitted += admitted

    def snapshot(self) -> tuple[Totals, float]:
        with self._lock:
            t = replace(self._totals)
        elapsed = max(1e-6, time.monotonic() - self._start)
        return t, elapsed

    def summary(self) -> str:
        totals, elapsed = self.snapshot()
        attempts = totals.fetched + totals.failed
        avg_ms = totals.fetch_ms_sum / max(1, attempts)
        return (
            f"fetched={totals.fetched} failed={totals.failed} "
            f"links_admitted={totals.links_admitted} "
            f"KB={totals.bytes / 1024:.1f} avg_fetch_ms={avg_ms:.1f} elapsed_s={elapsed:.1f}"
        )
