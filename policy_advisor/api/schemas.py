"""Pydantic request/response schemas for the policy advisor API.

Domain models (Document, Conversation, Message, VectorStatus) are returned
as-is; the schemas here cover request bodies and the few responses that
have no domain model of their own.

Convention: request schemas end with "Request", response schemas end with
"Response".
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from policy_advisor.models.conversation import Message


class CreateConversationRequest(BaseModel):
    """Explicitly start a conversation for a client session."""

    session_id: str = Field(..., min_length=1, max_length=200)
    language: str = Field(default="en", min_length=2, max_length=8)


class PostMessageRequest(BaseModel):
    """A user question; ``language`` defaults to the conversation's language."""

    content: str = Field(..., min_length=1, max_length=4000)
    language: str | None = Field(default=None, min_length=2, max_length=8)


class MessageExchangeResponse(BaseModel):
    """The stored user message and the assistant's reply."""

    user_message: Message
    assistant_message: Message


class DeleteResponse(BaseModel):
    success: bool


class ConnectionTestResponse(BaseModel):
    """Result of a one-message round trip to the generation provider."""

    success: bool
    model: str
    provider: str
    error: str | None = None


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
