"""Request tracing, switched on by XIAOI_DEBUG_TRACE=1 (or DEBUG_TRACE=1) in the environment or .env.

When on, do_request logs its signed X-Auth header, the form fields it sends, and how it returned.
"""
import logging
import os
from functools import wraps
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

TRACE_ENV_KEYS = ("XIAOI_DEBUG_TRACE", "DEBUG_TRACE")
_enabled: bool | None = None


def is_trace_enabled() -> bool:
    global _enabled
    if _enabled is None:
        _enabled = any(
            (os.environ.get(key) or "").strip().lower() in ("1", "true", "yes", "on")
            for key in TRACE_ENV_KEYS
        )
    return _enabled


def reset_trace_cache() -> None:
    """Re-read the environment on the next check."""
    global _enabled
    _enabled = None


def trace_log(component: str, event: str = "", **fields: Any) -> None:
    if not is_trace_enabled():
        return
    line = f"[trace] {component} {event}".rstrip()
    if fields:
        line += " " + " ".join(f"{k}={v!r}" for k, v in fields.items())
    logger.info(line)


F = TypeVar("F", bound=Callable[..., Any])


def trace_calls(component: str) -> Callable[[F], F]:
    """Trace entry, exit and raised exceptions of the wrapped function; exceptions propagate unchanged."""

    def decorator(f: F) -> F:
        @wraps(f)
        def wrapped(*args: Any, **kwargs: Any) -> Any:
            trace_log(component, "entered")
            try:
                out = f(*args, **kwargs)
            except Exception as e:
                trace_log(component, "raised", error=type(e).__name__, detail=str(e)[:80])
                raise
            trace_log(component, "exited")
            return out

        return wrapped  # type: ignore[return-value]

    return decorator
