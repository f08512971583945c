"""Queue abstraction: bounded FIFO of pending messages shared by post() and the workers.

Flow:
  1. Caller posts a question → dispatcher checks admission → put_nowait(message)
  2. Each worker polls get(timeout) → processes message → callback

Implementations: MemoryQueue (single process), RedisQueue (Redis list).
"""
from abc import ABC, abstractmethod

from xiaoi.queue.schemas import Message


class MessageQueue(ABC):
    """Bounded request queue. Plug-and-play backend."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity

    @abstractmethod
    def next_id(self) -> int:
        """Next message id: starts at 1, unique and increasing for everyone sharing this queue."""
        pass

    @abstractmethod
    def qsize(self) -> int:
        """Current occupancy. Advisory: may be stale by the time the caller acts on it."""
        pass

    @abstractmethod
    def put_nowait(self, message: Message) -> None:
        """Enqueue without blocking. Raises QueueFullError if the queue is at capacity."""
        pass

    @abstractmethod
    def get(self, timeout: float) -> Message | None:
        """Wait up to timeout seconds for the next message. Returns None if none arrived."""
        pass

    def close(self) -> None:
        """Release backend resources. Called once after all workers exit."""
        pass
