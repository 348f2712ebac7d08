"""Conversation bookkeeping around the retrieval orchestrator.

A conversation is identified by an external session id and created either
explicitly or on the first message.  Posting a message stores the user's
text, answers it, and stores the assistant reply with its sources.
"""

from __future__ import annotations

import structlog

from policy_advisor.config.languages import validate_language
from policy_advisor.interfaces.document_store import IDocumentStore
from policy_advisor.models.conversation import Conversation, Message, MessageRole, NewMessage
from policy_advisor.services.rag_service import RAGService
from policy_advisor.utils.errors import NotFoundError, ValidationError

logger = structlog.get_logger(logger_name=__name__)


class ConversationService:
    def __init__(self, document_store: IDocumentStore, rag_service: RAGService) -> None:
        self._store = document_store
        self._rag = rag_service

    async def get_or_create(self, session_id: str, language: str = "en") -> Conversation:
        """Return the conversation for *session_id*, creating it with *language* if absent."""
        if not session_id or not session_id.strip():
            raise ValidationError("session_id must not be empty")
        validate_language(language)
        conversation = await self._store.get_conversation(session_id)
        if conversation is None:
            conversation = await self._store.create_conversation(session_id, language)
            logger.info("conversation_created", session_id=session_id, language=language)
        return conversation

    async def get(self, session_id: str) -> Conversation:
        """Raises :class:`NotFoundError` if *session_id* has no conversation."""
        conversation = await self._store.get_conversation(session_id)
        if conversation is None:
            raise NotFoundError(f"Conversation '{session_id}' not found")
        return conversation

    async def list_messages(self, session_id: str) -> list[Message]:
        conversation = await self.get(session_id)
        return await self._store.get_messages(conversation.id)

    async def post_message(
        self,
        session_id: str,
        content: str,
        language: str | None = None,
    ) -> tuple[Message, Message]:
        """Store *content*, answer it, and store the reply.

        The answer language is *language* if given, else the
        conversation's default.

        Returns
        -------
        tuple[Message, Message]
            The stored user message and the stored assistant message.
        """
        if not content or not content.strip():
            raise ValidationError("Message content must not be empty")
        if language is not None:
            validate_language(language)

        conversation = await self.get_or_create(session_id, language or self._rag.base_language)
        answer_language = language or conversation.language

        user_message = await self._store.create_message(
            NewMessage(
                conversation_id=conversation.id,
                role=MessageRole.USER,
                content=content,
                original_language=answer_language,
            )
        )
        response = await self._rag.answer(content, answer_language)
        assistant_message = await self._store.create_message(
            NewMessage(
                conversation_id=conversation.id,
                role=MessageRole.ASSISTANT,
                content=response.content,
                original_language=answer_language,
                sources=response.sources,
            )
        )
        logger.info(
            "conversation_turn",
            session_id=session_id,
            language=answer_language,
            sources=len(response.sources),
        )
        return user_message, assistant_message
