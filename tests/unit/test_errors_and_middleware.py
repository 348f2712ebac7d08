"""Unit tests for the error hierarchy and its HTTP mapping."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from policy_advisor.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    status_code_for,
)
from policy_advisor.utils.errors import (
    ConfigurationError,
    EmbeddingProviderError,
    ExtractionError,
    InvalidTransitionError,
    LLMError,
    NotFoundError,
    PolicyAdvisorError,
    ProviderError,
    ProviderErrorReason,
    SearchCorruptionError,
    ValidationError,
)


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [
            ValidationError,
            NotFoundError,
            ExtractionError,
            InvalidTransitionError,
            ConfigurationError,
            SearchCorruptionError,
            ProviderError,
            EmbeddingProviderError,
            LLMError,
        ],
    )
    def test_all_inherit_from_base(self, cls: type[PolicyAdvisorError]) -> None:
        assert issubclass(cls, PolicyAdvisorError)

    def test_str_includes_provider(self) -> None:
        assert str(LLMError("Rate limit exceeded", provider_name="openrouter")) == (
            "[openrouter] Rate limit exceeded"
        )
        assert str(NotFoundError("Document 3 not found")) == "Document 3 not found"

    def test_reason_defaults_to_transient(self) -> None:
        assert LLMError().reason is ProviderErrorReason.TRANSIENT

    def test_reason_accepts_string_value(self) -> None:
        assert ProviderError(reason="quota").reason is ProviderErrorReason.QUOTA


class TestStatusCodeFor:
    @pytest.mark.parametrize(
        ("exc", "status"),
        [
            (ValidationError("bad"), 400),
            (NotFoundError("missing"), 404),
            (LLMError(reason=ProviderErrorReason.RATE_LIMIT), 503),
            (LLMError(reason=ProviderErrorReason.TRANSIENT), 503),
            (LLMError(reason=ProviderErrorReason.AUTH), 502),
            (EmbeddingProviderError(reason=ProviderErrorReason.QUOTA), 502),
            (ExtractionError("nope"), 500),
            (ConfigurationError("nope"), 500),
        ],
    )
    def test_mapping(self, exc: PolicyAdvisorError, status: int) -> None:
        assert status_code_for(exc) == status


class TestErrorHandlingMiddleware:
    @pytest.fixture()
    def client(self) -> TestClient:
        app = FastAPI()
        app.add_middleware(ErrorHandlingMiddleware)
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/missing")
        async def missing() -> dict:
            raise NotFoundError("Document 9 not found")

        @app.get("/upstream")
        async def upstream() -> dict:
            raise LLMError("quota exhausted", provider_name="openrouter", reason="quota")

        @app.get("/ok")
        async def ok() -> dict:
            return {"ok": True}

        return TestClient(app)

    def test_not_found_body(self, client: TestClient) -> None:
        response = client.get("/missing")
        assert response.status_code == 404
        assert response.json() == {"error": "NotFoundError", "detail": "Document 9 not found"}

    def test_provider_error_body(self, client: TestClient) -> None:
        response = client.get("/upstream")
        assert response.status_code == 502
        assert response.json()["error"] == "LLMError"
        assert response.json()["detail"] == "quota exhausted"

    def test_success_passes_through(self, client: TestClient) -> None:
        assert client.get("/ok").json() == {"ok": True}
