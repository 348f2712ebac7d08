"""Conversation and message models.

A conversation is keyed by an external session id and owns an append-only
list of messages.  Assistant messages carry the sources the answer was
grounded on; user messages carry ``sources=None``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Source(BaseModel):
    """Attribution of an answer to one retrieved chunk."""

    model_config = ConfigDict(frozen=True)

    document_id: int
    document_name: str
    chunk_index: int = Field(ge=0)
    similarity: float = Field(
        ge=0.0, le=1.0, description="Cosine similarity clamped to the 0..1 range."
    )
    metadata: dict[str, Any] | None = None


class Conversation(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    session_id: str = Field(min_length=1, description="External session identifier (unique).")
    language: str = Field(default="en", description="Default answer language.")
    created_at: datetime


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    conversation_id: int
    role: MessageRole
    content: str
    original_language: str
    sources: list[Source] | None = Field(
        default=None, description="None for user messages; ordered sources otherwise."
    )
    timestamp: datetime


class NewMessage(BaseModel):
    """Fields supplied when appending a :class:`Message`."""

    model_config = ConfigDict(frozen=True)

    conversation_id: int
    role: MessageRole
    content: str
    original_language: str
    sources: list[Source] | None = None
