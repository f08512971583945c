"""Message model: what goes on the request queue and what the callback receives."""
from pydantic import BaseModel, Field

from xiaoi.errors import FailureKind


class Message(BaseModel):
    """One question. Owned by the worker processing it until the callback returns."""
    id: int = Field(..., description="Sequential identity assigned at enqueue time, starting at 1")
    userid: str = Field(..., description="Requester identity sent as userId")
    question: str = Field(..., description="Question text sent as question")
    answer: str = Field(default="", description="Raw response body; empty until answered or on failure")
    error: FailureKind | None = Field(
        default=None,
        description="Why answer is empty: transport, protocol or read. None when the call succeeded.",
    )
