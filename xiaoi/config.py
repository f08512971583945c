"""Config from environment. Single place for credentials, pool size, queue backend and endpoint."""
import os
from dataclasses import dataclass
from typing import Literal

from dotenv import load_dotenv

from xiaoi.errors import InvalidParametersError

REALM = "xiaoi.com"
METHOD = "POST"
URI = "/ask.do"
SCHEMA = "http://"
HOST = "nlp." + REALM
REQ_URL = SCHEMA + HOST + URI

DEFAULT_CONNECTIONS = 8
DEFAULT_QUEUE_SIZE = 10000


@dataclass
class Parameters:
    """Dispatcher parameters. key/secret/connections/queue_size/timeout are required in practice; the rest have defaults."""
    key: str = ""
    secret: str = ""
    connections: int = DEFAULT_CONNECTIONS
    queue_size: int = DEFAULT_QUEUE_SIZE
    timeout: float = 10.0  # seconds per HTTP call, enforced by httpx
    url: str = REQ_URL
    queue_type: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    redis_queue_key: str = "xiaoi:requests"
    # Body values go out unescaped unless this is on; '&' or '=' in a question corrupts the form.
    url_encode_body: bool = False
    close_timeout: float = 5.0

    def validate(self) -> None:
        """Raise InvalidParametersError on the first bad field."""
        if not self.key or not self.key.strip():
            raise InvalidParametersError("key is required")
        if not self.secret or not self.secret.strip():
            raise InvalidParametersError("secret is required")
        if self.connections < 1:
            raise InvalidParametersError(f"connections must be >= 1, got {self.connections}")
        # post() admits while qsize + connections <= queue_size, so a smaller queue admits nothing.
        if self.queue_size < self.connections:
            raise InvalidParametersError(
                f"queue_size ({self.queue_size}) must be at least connections ({self.connections})"
            )
        if self.timeout <= 0:
            raise InvalidParametersError(f"timeout must be positive, got {self.timeout}")
        if self.close_timeout <= 0:
            raise InvalidParametersError(f"close_timeout must be positive, got {self.close_timeout}")
        if self.queue_type not in ("memory", "redis"):
            raise InvalidParametersError(f"Unsupported queue_type: {self.queue_type}. Use memory or redis.")


def _env_flag(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default: str, kind: type):
    raw = os.getenv(name, default)
    try:
        return kind(raw)
    except (TypeError, ValueError):
        raise InvalidParametersError(f"{name} must be {kind.__name__}, got {raw!r}") from None


def get_parameters() -> Parameters:
    """Read parameters from env / .env. Raises InvalidParametersError on a malformed number."""
    load_dotenv()
    return Parameters(
        key=os.getenv("XIAOI_APP_KEY", ""),
        secret=os.getenv("XIAOI_APP_SECRET", ""),
        connections=_env_number("XIAOI_CONNECTIONS", str(DEFAULT_CONNECTIONS), int),
        queue_size=_env_number("XIAOI_QUEUE_SIZE", str(DEFAULT_QUEUE_SIZE), int),
        timeout=_env_number("XIAOI_TIMEOUT_SECONDS", "10", float),
        url=os.getenv("XIAOI_URL", REQ_URL),
        queue_type=os.getenv("QUEUE_TYPE", "memory"),
        redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        redis_queue_key=os.getenv("XIAOI_REDIS_QUEUE_KEY", "xiaoi:requests"),
        url_encode_body=_env_flag("XIAOI_URL_ENCODE_BODY"),
        close_timeout=_env_number("XIAOI_CLOSE_TIMEOUT_SECONDS", "5", float),
    )
