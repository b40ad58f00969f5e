import logging
import threading
from contextlib import contextmanager

from app.core.errors import MutationInProgress

logger = logging.getLogger(__name__)


class MatchMutationGuard:
    """
    Tracks which (user, match) pairs have a save/approve/skip in flight.
    A second mutation on the same match is refused instead of interleaved.
    In-process only; each API worker holds its own set.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._in_flight: set[tuple[str, str]] = set()

    @contextmanager
    def hold(self, user_id: str, match_id: str):
        key = (user_id, match_id)
        with self._lock:
            if key in self._in_flight:
                logger.info("Refusing concurrent mutation: user=%s match=%s", user_id, match_id)
                raise MutationInProgress(f"Another change to match {match_id} is still in progress")
            self._in_flight.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._in_flight.discard(key)

    def is_busy(self, user_id: str, match_id: str) -> bool:
        with self._lock:
            return (user_id, match_id) in self._in_flight


mutation_guard = MatchMutationGuard()
