"""Dispatcher: bounded queue + fixed worker pool + timeout-bounded shutdown.

Usage:
    def on_answer(msg: Message) -> None:
        print(msg.id, msg.answer or msg.error)

    x = Xiaoi(get_parameters(), on_answer)
    x.post("user-1", "hello")
    x.close(5)
"""
import logging
import random
import threading

import httpx

from xiaoi.client import AskClient
from xiaoi.config import Parameters
from xiaoi.errors import DispatcherClosedError, QueueFullError
from xiaoi.queue import MessageQueue, get_queue
from xiaoi.queue.schemas import Message
from xiaoi.signer import Signer
from xiaoi.sync import Alarm, CountDownLatch
from xiaoi.worker.run import Callback, Worker

logger = logging.getLogger(__name__)


class Xiaoi:
    """Live dispatcher handle. Not reusable after close()."""

    def __init__(
        self,
        params: Parameters,
        callback: Callback,
        *,
        transport: httpx.BaseTransport | None = None,
        message_queue: MessageQueue | None = None,
        rng: random.Random | None = None,
    ) -> None:
        params.validate()
        self.params = params
        self._callback = callback
        self._signer = Signer(params.key, params.secret, rng=rng)
        self._queue = message_queue if message_queue is not None else get_queue(params)
        self._client = AskClient(
            params.url,
            params.timeout,
            url_encode_body=params.url_encode_body,
            transport=transport,
        )
        self._closed = False
        self._clean_close: bool | None = None
        self._stop = threading.Event()
        self._exited = CountDownLatch(params.connections)
        self._workers = [
            Worker(i, self._queue, self._signer, self._client, callback, self._stop, self._exited)
            for i in range(params.connections)
        ]
        for w in self._workers:
            w.start()
        logger.info(
            "Dispatcher started: connections=%d queue_size=%d queue_type=%s url=%s",
            params.connections, params.queue_size, params.queue_type, params.url,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def post(self, userid: str, question: str) -> int:
        """Enqueue one question and return its id. Raises QueueFullError when near capacity, DispatcherClosedError after close()."""
        if self._closed:
            raise DispatcherClosedError("Dispatcher is closed")
        # Keep one slot per worker free for messages already being dequeued.
        if self._queue.qsize() + self.params.connections > self.params.queue_size:
            raise QueueFullError(f"Queue full (capacity {self.params.queue_size})")
        msg = Message(id=self._queue.next_id(), userid=userid, question=question)
        self._queue.put_nowait(msg)
        logger.debug("Queued message %s for %s", msg.id, userid)
        return msg.id

    def close(self, timeout: float | None = None) -> bool:
        """Signal every worker to stop and wait up to timeout seconds.

        Returns True if all workers exited, False if the wait was forced open. Messages still
        in flight at that point are abandoned; their callbacks may never run. Queued messages
        are never drained. Calling close() again returns the first call's result.
        """
        if self._closed:
            logger.warning("close() called on a closed dispatcher")
            return bool(self._clean_close)
        self._closed = True
        if timeout is None:
            timeout = self.params.close_timeout
        self._stop.set()
        alarm = Alarm(timeout, self._exited.force_release, name="xiaoi-close-alarm").start()
        clean = self._exited.wait()
        alarm.cancel()
        if clean:
            self._client.close()
            self._queue.close()
            logger.info("Dispatcher closed: all %d workers exited", len(self._workers))
        else:
            logger.warning(
                "Dispatcher close timed out after %ss: %d of %d workers still busy; in-flight messages abandoned",
                timeout, self._exited.count, len(self._workers),
            )
        self._clean_close = clean
        return clean

    def __enter__(self) -> "Xiaoi":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open(params: Parameters, callback: Callback, **kwargs) -> Xiaoi:  # noqa: A001
    """Validate params, derive hashes, start workers; returns the live dispatcher."""
    return Xiaoi(params, callback, **kwargs)
