"""
Change Feed

In-process channel that carries committed game writes, as (old, new)
pairs, to subscribers such as the leaderboard aggregator.

Delivery is at-least-once: a handler that raises is retried, and after the
last attempt the change is parked in ``dead_letters``, which keeps only
the most recent ``dead_letter_limit`` failures. Changes are
dispatched from a single FIFO queue, so changes for one game arrive in
commit order. Subscribers must be idempotent.
"""

import queue
from collections import deque
import threading
import time
from typing import Callable, Deque, List, Optional, Tuple

from ..models.game import GameChange
from ..utils.game_logger import game_logger

ChangeHandler = Callable[[GameChange], object]

_STOP = object()


class ChangeFeed:
    """
    Ordered change channel with retrying delivery.

    In synchronous mode ``publish`` delivers before returning, which keeps
    tests deterministic. Otherwise a dispatcher thread started with
    ``start()`` drains the queue.
    """

    def __init__(self, max_delivery_attempts: int = 3, retry_delay_seconds: float = 0.5,
                 synchronous: bool = False, dead_letter_limit: int = 1000):
        self.max_delivery_attempts = max(1, max_delivery_attempts)
        self.retry_delay_seconds = retry_delay_seconds
        self.synchronous = synchronous
        self.dead_letters: Deque[Tuple[GameChange, str, Exception]] = deque(
            maxlen=max(1, dead_letter_limit)
        )
        self.dead_letter_total = 0
        self._handlers: List[Tuple[str, ChangeHandler]] = []
        self._queue: "queue.Queue" = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def subscribe(self, handler: ChangeHandler, name: Optional[str] = None) -> None:
        """Register a consumer. Every change is delivered to every consumer."""
        self._handlers.append((name or getattr(handler, '__name__', repr(handler)), handler))

    def publish(self, change: GameChange) -> None:
        """Hand a committed change to the feed. Never raises on consumer failure."""
        if self.synchronous:
            self._dispatch(change)
        else:
            self._queue.put(change)

    def pending(self) -> int:
        return self._queue.qsize()

    def drain(self) -> int:
        """Deliver everything currently queued on the calling thread."""
        delivered = 0
        while True:
            try:
                change = self._queue.get_nowait()
            except queue.Empty:
                return delivered
            try:
                if change is _STOP:
                    continue
                self._dispatch(change)
                delivered += 1
            finally:
                self._queue.task_done()

    def start(self) -> threading.Thread:
        """Start the background dispatcher thread."""
        if self._thread and self._thread.is_alive():
            return self._thread
        self._thread = threading.Thread(target=self._run, name='change-feed', daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        if self._thread and self._thread.is_alive():
            self._queue.put(_STOP)
            self._thread.join(timeout)
        self._thread = None

    def _run(self) -> None:
        game_logger.logger.info("Change feed dispatcher started")
        while True:
            change = self._queue.get()
            try:
                if change is _STOP:
                    break
                self._dispatch(change)
            finally:
                self._queue.task_done()
        game_logger.logger.info("Change feed dispatcher stopped")

    def _dispatch(self, change: GameChange) -> None:
        # Handlers are isolated: one failing consumer does not block the others
        for name, handler in self._handlers:
            self._deliver(change, name, handler)

    def _deliver(self, change: GameChange, name: str, handler: ChangeHandler) -> bool:
        last_error = None
        for attempt in range(1, self.max_delivery_attempts + 1):
            try:
                handler(change)
                return True
            except Exception as e:
                last_error = e
                game_logger.logger.warning(
                    f"Change feed: {name} failed on game {change.key} "
                    f"(attempt {attempt}/{self.max_delivery_attempts}): {e}"
                )
                if attempt < self.max_delivery_attempts and self.retry_delay_seconds:
                    time.sleep(self.retry_delay_seconds * attempt)

        self.dead_letters.append((change, name, last_error))
        self.dead_letter_total += 1
        game_logger.logger.error(
            f"Change feed: giving up on game {change.key} for {name} "
            f"after {self.max_delivery_attempts} attempts: {last_error}"
        )
        return False
