"""Shutdown primitives: a countdown latch the workers release on exit, and an alarm that can force it open."""
import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class CountDownLatch:
    """Opens when count reaches zero or when force_release() is called, whichever comes first."""

    def __init__(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        self._count = count
        self._forced = False
        self._cond = threading.Condition()

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    @property
    def forced(self) -> bool:
        with self._cond:
            return self._forced

    def count_down(self) -> None:
        with self._cond:
            if self._count > 0:
                self._count -= 1
            if self._count == 0:
                self._cond.notify_all()

    def force_release(self) -> None:
        with self._cond:
            self._forced = True
            self._cond.notify_all()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until open. Returns True only if every party counted down (not forced, not timed out)."""
        with self._cond:
            self._cond.wait_for(lambda: self._count == 0 or self._forced, timeout=timeout)
            return self._count == 0


class Alarm:
    """One-shot timer that runs on_fire after delay seconds unless cancelled first."""

    def __init__(self, delay: float, on_fire: Callable[[], None], name: str = "xiaoi-alarm") -> None:
        self._fired = threading.Event()
        self._on_fire = on_fire
        self._timer = threading.Timer(delay, self._fire)
        self._timer.name = name
        self._timer.daemon = True

    def _fire(self) -> None:
        self._fired.set()
        self._on_fire()

    @property
    def fired(self) -> bool:
        return self._fired.is_set()

    def start(self) -> "Alarm":
        self._timer.start()
        return self

    def cancel(self) -> None:
        self._timer.cancel()
