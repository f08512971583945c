"""Worker: poll the request queue → sign → POST → callback. One thread per worker, shutdown checked between messages."""
import logging
import threading
from typing import Callable

from xiaoi.client import AskClient
from xiaoi.errors import FailureKind
from xiaoi.queue.base import MessageQueue
from xiaoi.queue.schemas import Message
from xiaoi.signer import Signer
from xiaoi.sync import CountDownLatch
from xiaoi.trace_log import trace_calls, trace_log

logger = logging.getLogger(__name__)

Callback = Callable[[Message], None]

# Upper bound on how long an idle worker waits on the queue before re-checking shutdown.
POLL_SECONDS = 0.1


@trace_calls("worker.run.do_request")
def do_request(message: Message, signer: Signer, client: AskClient) -> None:
    """Sign and send one message. Fills message.answer, or message.error on failure."""
    signed = signer.sign()
    trace_log("worker.run.do_request", "signed", msg_id=message.id, auth_header=signed.auth_header)
    trace_log(
        "worker.run.do_request",
        "body",
        msg_id=message.id,
        userid=message.userid,
        question=message.question[:200],
    )
    client.ask(message, signed)


class Worker:
    """One loop: wait for (message | shutdown); on message do_request then callback exactly once."""

    def __init__(
        self,
        index: int,
        message_queue: MessageQueue,
        signer: Signer,
        client: AskClient,
        callback: Callback,
        stop: threading.Event,
        exited: CountDownLatch,
    ) -> None:
        self.index = index
        self._queue = message_queue
        self._signer = signer
        self._client = client
        self._callback = callback
        self._stop = stop
        self._exited = exited
        self._thread = threading.Thread(target=self.run, name=f"xiaoi-worker-{index}", daemon=True)

    def start(self) -> threading.Thread:
        self._thread.start()
        return self._thread

    @property
    def thread(self) -> threading.Thread:
        return self._thread

    def run(self) -> None:
        logger.debug("Worker %d started", self.index)
        try:
            while not self._stop.is_set():
                try:
                    message = self._queue.get(timeout=POLL_SECONDS)
                except Exception as e:
                    # Backend hiccup (e.g. Redis connection drop); keep polling until shutdown.
                    logger.exception("Worker %d queue error: %s", self.index, e)
                    self._stop.wait(POLL_SECONDS)
                    continue
                if message is None:
                    continue
                self.handle(message)
        finally:
            logger.debug("Worker %d exited", self.index)
            self._exited.count_down()

    def handle(self, message: Message) -> None:
        try:
            do_request(message, self._signer, self._client)
        except Exception as e:
            # e.g. httpx.InvalidURL from a bad url, UnicodeEncodeError from a non-ASCII key in X-Auth
            logger.exception("Request for message %s failed unexpectedly: %s", message.id, e)
            message.answer = ""
            message.error = FailureKind.TRANSPORT
        finally:
            try:
                self._callback(message)
            except Exception as e:
                logger.exception("Callback for message %s raised: %s", message.id, e)
