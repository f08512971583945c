"""Bounded-concurrency dispatcher for the xiaoi natural-language ask API."""
from xiaoi.config import Parameters, get_parameters
from xiaoi.dispatcher import Xiaoi, open
from xiaoi.errors import (
    DispatcherClosedError,
    FailureKind,
    InvalidParametersError,
    QueueFullError,
    XiaoiError,
)
from xiaoi.queue.schemas import Message

__all__ = [
    "Xiaoi",
    "open",
    "Parameters",
    "get_parameters",
    "Message",
    "FailureKind",
    "XiaoiError",
    "QueueFullError",
    "DispatcherClosedError",
    "InvalidParametersError",
]
