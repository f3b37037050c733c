"""
Conversation message models.

Messages are immutable once appended to a session; they leave memory only
through count trimming, age sweeps, or an explicit clear.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a conversation message."""
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single conversation turn."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Who wrote the message")
    content: str = Field(..., description="Message text")
    created_at: datetime = Field(default_factory=datetime.now, description="Append time")

    def format(self) -> str:
        """Render as ``ROLE: content`` for prompt history."""
        return f"{self.role.value.upper()}: {self.content}"


class MemoryStatistics(BaseModel):
    """Read-only snapshot of session memory usage."""
    active_sessions: int = Field(default=0, description="Sessions currently held")
    total_messages: int = Field(default=0, description="Messages across all sessions")
    max_history_size: int = Field(default=20, description="Per-session message cap")
