import threading
import time


class FixedWindowRateLimiter:
    """
    In-memory per-client request counter reset every `window_seconds`.

    client -> (window_start, count)
    Process-local, like the rest of the app's state. Expired windows are
    swept at most once per window, so the table only holds clients seen
    in roughly the last two windows.
    """

    def __init__(self, max_requests: int, window_seconds: float, clock=time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._last_sweep = clock()
        # sync routes run in the threadpool
        self._lock = threading.Lock()

    def _sweep(self, now: float):
        if now - self._last_sweep < self.window_seconds:
            return
        self._windows = {
            client: (start, count)
            for client, (start, count) in self._windows.items()
            if now - start < self.window_seconds
        }
        self._last_sweep = now

    def allow(self, client: str) -> bool:
        with self._lock:
            now = self.clock()
            self._sweep(now)
            start, count = self._windows.get(client, (now, 0))

            if now - start >= self.window_seconds:
                start, count = now, 0

            if count >= self.max_requests:
                self._windows[client] = (start, count)
                return False

            self._windows[client] = (start, count + 1)
            return True

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._windows)
