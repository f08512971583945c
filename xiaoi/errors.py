"""Exceptions raised synchronously to callers, and the failure kinds recorded on a message."""
from enum import Enum


class XiaoiError(Exception):
    """Base exception for the dispatcher."""
    pass


class QueueFullError(XiaoiError):
    """Queue is at (or near) capacity; post was rejected and nothing was enqueued. Retry later."""
    pass


class DispatcherClosedError(XiaoiError):
    """post() after close()."""
    pass


class InvalidParametersError(XiaoiError, ValueError):
    pass


class FailureKind(str, Enum):
    """Why a message came back without an answer. Stored on Message.error; never raised."""
    TRANSPORT = "transport"  # network error while sending
    PROTOCOL = "protocol"    # non-2xx status
    READ = "read"            # response body could not be read
