"""Policy advisor HTTP layer: routes, schemas, and middleware."""

from policy_advisor.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from policy_advisor.api.routes import router
from policy_advisor.api.schemas import (
    ConnectionTestResponse,
    CreateConversationRequest,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    MessageExchangeResponse,
    PostMessageRequest,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "ConnectionTestResponse",
    "CreateConversationRequest",
    "DeleteResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageExchangeResponse",
    "PostMessageRequest",
]
