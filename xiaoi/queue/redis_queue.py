"""Redis queue: pending messages live in a Redis list shared by every worker of the dispatcher.

Post LPUSHes the JSON message; workers BRPOP, so the list is FIFO. Occupancy is LLEN.
Message ids come from INCR on "<queue_key>:id", shared by every dispatcher on the list.
The list outlives a dispatcher: messages left queued at close are delivered to whichever
dispatcher polls the key next.
The capacity check and the push are two round trips, so the bound is advisory under
concurrent posters, the same as the admission check in front of it.
"""
import logging

import redis

from xiaoi.errors import QueueFullError
from xiaoi.queue.base import MessageQueue
from xiaoi.queue.schemas import Message

logger = logging.getLogger(__name__)


class RedisQueue(MessageQueue):
    """Request queue = Redis list (LPUSH/BRPOP), bounded by LLEN."""

    def __init__(
        self,
        capacity: int,
        *,
        redis_url: str = "redis://localhost:6379/0",
        queue_key: str = "xiaoi:requests",
        client: redis.Redis | None = None,
    ) -> None:
        super().__init__(capacity)
        self._redis_url = redis_url
        self._queue_key = queue_key
        self._client = client

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(self._redis_url, decode_responses=True)
        return self._client

    @property
    def id_key(self) -> str:
        return f"{self._queue_key}:id"

    def next_id(self) -> int:
        # INCR on a key next to the list, so dispatchers sharing the list (or restarting on it) never reuse an id.
        return int(self._get_client().incr(self.id_key))

    def qsize(self) -> int:
        return int(self._get_client().llen(self._queue_key))

    def put_nowait(self, message: Message) -> None:
        r = self._get_client()
        if int(r.llen(self._queue_key)) >= self.capacity:
            raise QueueFullError(f"Queue full (capacity {self.capacity}, key {self._queue_key})")
        r.lpush(self._queue_key, message.model_dump_json())
        logger.debug("Published message %s to list %s", message.id, self._queue_key)

    def get(self, timeout: float) -> Message | None:
        # BRPOP timeout 0 means "block forever"; keep the poll bounded so workers see shutdown.
        result = self._get_client().brpop(self._queue_key, timeout=max(timeout, 0.01))
        if result is None:
            return None
        _, raw = result
        return Message.model_validate_json(raw)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
