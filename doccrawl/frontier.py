import logging
import threading
from collections import deque
from typing import Deque, Iterable, List, Optional, Set

from .errors import SeedResolutionError
from .parsing import UrlTools
from .types import StatusSink


logger = logging.getLogger(__name__)


class Frontier:
    """BFS queue plus visited set, capped by the page budget.

    A URL is marked visited the moment it is admitted, so it can never be
    queued twice. Queued URLs are already in the visited set, so capping
    the visited set at the budget caps the queue as well.
    """

    def __init__(self, base_url: str, max_pages: int):
        self.base_url = base_url
        self.base_origin = UrlTools.origin(base_url)
        self.max_pages = max_pages
        self._queue: Deque[str] = deque()
        self._visited: Set[str] = set()
        self._fetched = 0
        self._lock = threading.Lock()

    def seed(self, paths: Iterable[str], status: Optional[StatusSink] = None) -> List[str]:
        admitted: List[str] = []
        for path in paths:
            try:
                url = UrlTools.resolve_seed(self.base_url, path, self.base_origin)
            except SeedResolutionError as exc:
                logger.warning("Invalid start path %s", exc)
                if status:
                    status(f"Invalid start path: {exc}")
                continue
            if self.admit(url):
                admitted.append(url)
        return admitted

    def admit(self, url: str) -> bool:
        with self._lock:
            if url in self._visited:
                return False
            if len(self._visited) >= self.max_pages:
                return False
            self._visited.add(url)
            self._queue.append(url)
            return True

    def dequeue(self) -> Optional[str]:
        with self._lock:
            if not self._queue:
                return None
            return self._queue.popleft()

    def record_fetch(self) -> int:
        with self._lock:
            self._fetched += 1
            return self._fetched

    def is_done(self) -> bool:
        with self._lock:
            return not self._queue or self._fetched >= self.max_pages

    @property
    def fetched_pages(self) -> int:
        with self._lock:
            return self._fetched

    @property
    def remaining_budget(self) -> int:
        with self._lock:
            return max(0, self.max_pages - self._fetched)

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)

    def visited_count(self) -> int:
        with self._lock:
            return len(self._visited)

    def has_visited(self, url: str) -> bool:
        with self._lock:
            return url in self._visited
