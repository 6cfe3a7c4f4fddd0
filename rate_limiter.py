import threading
import time
from collections import OrderedDict
from typing import Callable

from logger import get_logger

logger = get_logger(__name__)


class FixedWindowRateLimiter:
    """
    Fixed-window request counter per client.

    Args:
        max_requests: requests allowed per window
        window_seconds: window length
        max_clients: number of client counters kept; least recently seen are evicted
        clock: monotonic time source (injectable for tests)
    """

    def __init__(self, max_requests: int = 100, window_seconds: float = 60,
                 max_clients: int = 10000, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_clients = max_clients
        self.clock = clock
        # client_id -> [count, window_reset_at]
        self._windows: "OrderedDict[str, list]" = OrderedDict()
        self._lock = threading.Lock()

    def allow(self, client_id: str) -> bool:
        now = self.clock()
        with self._lock:
            window = self._windows.get(client_id)
            if window is None or now >= window[1]:
                self._windows[client_id] = [1, now + self.window_seconds]
                self._windows.move_to_end(client_id)
                self._evict()
                return True

            self._windows.move_to_end(client_id)
            if window[0] >= self.max_requests:
                logger.warning("Rate limit exceeded for %s", client_id)
                return False
            window[0] += 1
            return True

    def _evict(self):
        while len(self._windows) > self.max_clients:
            self._windows.popitem(last=False)

    def __len__(self):
        return len(self._windows)
