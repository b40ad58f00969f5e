import threading
import time
from collections import deque


class SlidingWindowRateLimiter:
    """
    In-memory sliding-window limiter keyed by caller + route.
    Per-process state; each API worker enforces its own budget.
    Keys whose hits have all aged out are evicted on a periodic sweep.
    """

    def __init__(self, clock=time.monotonic, sweep_interval_seconds: float = 60.0) -> None:
        self._lock = threading.Lock()
        self._clock = clock
        self._sweep_interval = sweep_interval_seconds
        self._last_sweep = clock()
        self._hits: dict[str, tuple[int, deque[float]]] = {}

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """
        Returns (allowed, retry_after_seconds).
        """
        now = self._clock()
        cutoff = now - window_seconds
        with self._lock:
            if now - self._last_sweep >= self._sweep_interval:
                self._sweep(now)
            _, hits = self._hits.get(key, (window_seconds, deque()))
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= limit:
                retry_after = max(1, int(hits[0] + window_seconds - now + 0.999))
                return False, retry_after
            hits.append(now)
            self._hits[key] = (window_seconds, hits)
            return True, 0

    def _sweep(self, now: float) -> None:
        stale = [k for k, (window, hits) in self._hits.items() if not hits or hits[-1] <= now - window]
        for k in stale:
            del self._hits[k]
        self._last_sweep = now

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


rate_limiter = SlidingWindowRateLimiter()
