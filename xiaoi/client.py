"""HTTP exchange with the xiaoi ask endpoint: form body, signed headers, one POST per message."""
import logging
from urllib.parse import quote

import httpx

from xiaoi.errors import FailureKind
from xiaoi.queue.schemas import Message
from xiaoi.signer import SignedRequest

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"
AUTH_HEADER = "X-Auth"


def build_body(userid: str, question: str, *, url_encode: bool = False) -> str:
    """userId=...&question=...&type=0&platform=custom.

    Values are sent as-is unless url_encode is set; unescaped '&', '=' or '+' in a
    question will corrupt the form on the server side.
    """
    if url_encode:
        userid = quote(userid, safe="")
        question = quote(question, safe="")
    return f"userId={userid}&question={question}&type=0&platform=custom"


def build_headers(signed: SignedRequest) -> dict[str, str]:
    return {AUTH_HEADER: signed.auth_header, "Content-Type": CONTENT_TYPE}


class AskClient:
    """Thin wrapper over one shared httpx.Client (thread-safe) for all workers of a dispatcher."""

    def __init__(
        self,
        url: str,
        timeout: float,
        *,
        url_encode_body: bool = False,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self.url_encode_body = url_encode_body
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def ask(self, message: Message, signed: SignedRequest) -> None:
        """POST one question. Sets message.answer on 2xx; otherwise sets message.error and logs why. Never raises httpx errors."""
        body = build_body(message.userid, message.question, url_encode=self.url_encode_body)
        try:
            with self._client.stream(
                "POST", self.url, content=body.encode("utf-8"), headers=build_headers(signed)
            ) as resp:
                if not resp.is_success:
                    logger.warning("Http response for message %s: %s %s", message.id, resp.status_code, resp.reason_phrase)
                    message.error = FailureKind.PROTOCOL
                    return
                try:
                    resp.read()
                except httpx.HTTPError as e:
                    logger.warning("Read response err for message %s: %s", message.id, e)
                    message.error = FailureKind.READ
                    return
                message.answer = resp.text
        except httpx.HTTPError as e:
            logger.warning("Http request err for message %s: %s", message.id, e)
            message.error = FailureKind.TRANSPORT

    def close(self) -> None:
        self._client.close()
