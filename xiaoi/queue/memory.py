"""In-memory bounded queue. Single process: post() enqueues, worker threads consume."""
import logging
import queue
import threading

from xiaoi.errors import QueueFullError
from xiaoi.queue.base import MessageQueue
from xiaoi.queue.schemas import Message

logger = logging.getLogger(__name__)


class MemoryQueue(MessageQueue):
    """queue.Queue with maxsize=capacity; one instance per dispatcher."""

    def __init__(self, capacity: int) -> None:
        super().__init__(capacity)
        self._queue: queue.Queue[Message] = queue.Queue(maxsize=capacity)
        self._last_id = 0
        self._id_lock = threading.Lock()

    def next_id(self) -> int:
        with self._id_lock:
            self._last_id += 1
            return self._last_id

    def qsize(self) -> int:
        return self._queue.qsize()

    def put_nowait(self, message: Message) -> None:
        try:
            self._queue.put_nowait(message)
        except queue.Full:
            raise QueueFullError(f"Queue full (capacity {self.capacity})") from None

    def get(self, timeout: float) -> Message | None:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
