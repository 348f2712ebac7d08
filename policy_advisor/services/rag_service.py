"""Retrieval orchestrator: grounded answers with source attribution.

Flow for :meth:`RAGService.answer`:

  1. EMBED     -- the query goes through the same embedding provider used
                  at ingestion time.
  2. RETRIEVE  -- top-k chunks among READY documents (cosine similarity).
  3. EMPTY     -- no chunks means no documents: return a fixed message,
                  translated when the language is not the base language.
  4. GENERATE  -- chunk contents joined by blank lines become the context
                  of a two-message prompt (system instruction + question).
  5. TRANSLATE -- non-base languages get the answer translated.
  6. ATTRIBUTE -- one source per retrieved chunk, in retrieval order.

Any failure in steps 1-6 is logged and converted into an apology with no
sources; callers of :meth:`answer` only ever see ``ValidationError`` for
bad input.
"""

from __future__ import annotations

import structlog

from policy_advisor.config.languages import language_name, validate_language
from policy_advisor.interfaces.embedding_provider import IEmbeddingProvider
from policy_advisor.interfaces.llm_provider import ChatMessage, ILLMProvider
from policy_advisor.interfaces.vector_store_provider import IVectorStoreProvider
from policy_advisor.models.rag import ConnectionTestResult, RAGResponse, RetrievedChunk
from policy_advisor.services.translation_service import TranslationService
from policy_advisor.utils.errors import LLMError, ValidationError
from policy_advisor.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

NO_DOCUMENTS_MESSAGE = (
    "I don't have access to any policy documents yet. Please upload company policy "
    "documents first so I can help answer your questions."
)
APOLOGY_MESSAGE = (
    "I apologize, but I'm experiencing technical difficulties. Please try again later "
    "or contact IT support if the problem persists."
)

_BASE_SYSTEM_PROMPT = """\
You are a corporate policy advisor AI assistant. Your role is to provide accurate, helpful answers about company policies based on the provided context.

Guidelines:
1. Base your answers strictly on the provided policy documents
2. If the context doesn't contain enough information, clearly state this
3. Maintain a professional, authoritative tone
4. Cite specific policy sections when possible
5. If asked about something not covered in the policies, direct users to consult HR or legal teams
6. Provide clear, actionable guidance when possible
7. Always prioritize accuracy over completeness"""


def build_system_prompt(language: str, base_language: str = "en") -> str:
    """Return the grounding instruction, with a response-language clause if needed."""
    if language == base_language:
        return _BASE_SYSTEM_PROMPT
    return (
        f"{_BASE_SYSTEM_PROMPT}\n\nImportant: Respond in {language_name(language)}, but "
        "preserve any specific policy terms, section numbers, or official terminology in "
        "their original language for accuracy."
    )


def build_user_prompt(query: str, context: str) -> str:
    return (
        "Based on the following company policy documents, please answer this question: "
        f'"{query}"\n\n'
        f"Policy Context:\n{context}\n\n"
        "Please provide a comprehensive answer based on the policy information above. "
        "If the policies don't contain enough information to fully answer the question, "
        "please state what additional resources the employee should consult."
    )


def build_context(results: list[RetrievedChunk]) -> str:
    return "\n\n".join(r.chunk.content for r in results)


class RAGService:
    """Answers questions from the uploaded policy corpus.

    Parameters
    ----------
    embedding_provider:
        Must be the provider the corpus was ingested with.
    vector_store:
        Similarity index over READY documents.
    llm_provider:
        Generation backend.
    translation_service:
        Used for non-base-language answers and fixed messages.
    top_k:
        Number of chunks retrieved per query.
    model:
        Generation model; ``None`` uses the provider default.
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        llm_provider: ILLMProvider,
        translation_service: TranslationService,
        top_k: int = 5,
        model: str | None = None,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._llm = llm_provider
        self._translator = translation_service
        self._top_k = top_k
        self._model = model

    @property
    def base_language(self) -> str:
        return self._translator.base_language

    async def answer(self, query: str, language: str = "en") -> RAGResponse:
        """Answer *query* in *language* from the indexed documents.

        Raises
        ------
        ValidationError
            If *query* is blank or *language* is unsupported.
        """
        if not query or not query.strip():
            raise ValidationError("Query must not be empty")
        validate_language(language)

        try:
            return await self._answer(query, language)
        except Exception as exc:
            logger.error(
                "rag_answer_failed",
                language=language,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return RAGResponse(
                content=await self._translator.translate_best_effort(APOLOGY_MESSAGE, language),
                sources=[],
            )

    async def _answer(self, query: str, language: str) -> RAGResponse:
        query_vector = await self._embedding_provider.embed_single(query)
        results = await self._vector_store.search(query_vector, top_k=self._top_k)

        if not results:
            logger.info("rag_no_documents", language=language)
            return RAGResponse(
                content=await self._translator.translate_best_effort(
                    NO_DOCUMENTS_MESSAGE, language
                ),
                sources=[],
            )

        messages: list[ChatMessage] = [
            {"role": "system", "content": build_system_prompt(language, self.base_language)},
            {"role": "user", "content": build_user_prompt(query, build_context(results))},
        ]
        content = await self._llm.complete(messages, model=self._model)

        if language != self.base_language:
            content = await self._translator.translate(content, language)

        logger.info(
            "rag_answer",
            language=language,
            sources=len(results),
            top_similarity=round(results[0].similarity, 4),
        )
        return RAGResponse(content=content, sources=[r.to_source() for r in results])

    async def test_connection(self) -> ConnectionTestResult:
        """Send one short message to the generation provider and report the outcome."""
        model = self._model or self._llm.get_model_name()
        provider = self._llm.get_provider_name()
        try:
            await self._llm.complete(
                [{"role": "user", "content": "Hello, test connection"}],
                model=model,
                max_tokens=16,
            )
        except LLMError as exc:
            logger.warning("connection_test_failed", reason=exc.reason.value, error=str(exc))
            return ConnectionTestResult(
                success=False, model=model, provider=provider, error=str(exc)
            )
        return ConnectionTestResult(success=True, model=model, provider=provider)
