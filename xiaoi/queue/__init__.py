from xiaoi.config import Parameters
from xiaoi.queue.base import MessageQueue
from xiaoi.queue.memory import MemoryQueue
from xiaoi.queue.redis_queue import RedisQueue
from xiaoi.queue.schemas import Message


def get_queue(params: Parameters) -> MessageQueue:
    if params.queue_type == "memory":
        return MemoryQueue(params.queue_size)
    if params.queue_type == "redis":
        return RedisQueue(
            params.queue_size,
            redis_url=params.redis_url,
            queue_key=params.redis_queue_key,
        )
    raise ValueError(f"Unsupported QUEUE_TYPE: {params.queue_type}. Use memory or redis.")


__all__ = ["Message", "MessageQueue", "MemoryQueue", "RedisQueue", "get_queue"]
