"""Handler for the request/response message transport.

Messages are plain dicts, as delivered by a browser extension runtime or
any other message-passing channel:

    {"action": "searchCache", "text": ...}
        -> {"match": {...} | None, "similarity": float (only on a match)}
    {"action": "cachePrompt", "prompt": ..., "answer": ...}
        -> {"success": True} | {"error": str}

The handler never raises: every failure becomes an ``{"error": ...}``
response, except embedding failures during a search, which degrade to
``{"match": None}``.
"""

import logging
from typing import Any

from pydantic import ValidationError

from prompt_cache.config import settings
from prompt_cache.dto import (
    CacheEntryRecord,
    CachePromptMessage,
    CachePromptResponse,
    ErrorResponse,
    SearchCacheMessage,
    SearchCacheResponse,
    transport_message_adapter,
)
from prompt_cache.errors import CacheError, EmbeddingUnavailable
from prompt_cache.services import CacheService

logger = logging.getLogger(__name__)


class MessageHandler:
    """Dispatches transport messages to CacheService.

    It is also the caller that enforces the length preconditions:
    searches for texts shorter than min_query_length are skipped, and
    answers no longer than min_answer_length are not cached.

    Example:
        ```python
        handler = MessageHandler(cache_service=cache_service)
        response = await handler.handle_message({"action": "searchCache", "text": "..."})
        ```
    """

    def __init__(
        self,
        cache_service: CacheService,
        min_query_length: int | None = None,
        min_answer_length: int | None = None,
    ) -> None:
        """Initialize the message handler.

        Args:
            cache_service: The cache service for business logic (required).
            min_query_length: Shortest text worth searching. Defaults to settings.
            min_answer_length: Answers must be longer than this. Defaults to settings.
        """
        self._cache = cache_service
        self._min_query_length = (
            settings.cache_min_query_length if min_query_length is None else min_query_length
        )
        self._min_answer_length = (
            settings.cache_min_answer_length if min_answer_length is None else min_answer_length
        )

    async def handle_message(self, payload: Any) -> dict[str, Any]:
        """Validate a raw message and dispatch it by action.

        Args:
            payload: The raw message

        Returns:
            The response message
        """
        try:
            message = transport_message_adapter.validate_python(payload)
        except ValidationError as e:
            logger.warning("Rejected invalid message: %s", e.errors(include_url=False))
            return ErrorResponse(error=f"Invalid message: {_first_error(e)}").model_dump()

        if isinstance(message, SearchCacheMessage):
            return await self.search_cache(message)
        return await self.cache_prompt(message)

    async def search_cache(self, message: SearchCacheMessage) -> dict[str, Any]:
        """Handle ``searchCache``.

        Args:
            message: The validated search message

        Returns:
            Response with the match (or None) and its similarity
        """
        text = message.text.strip()
        if len(text) < self._min_query_length:
            return SearchCacheResponse().to_message()

        try:
            match = await self._cache.lookup(text)
        except EmbeddingUnavailable as e:
            logger.warning("Embedding unavailable, treating search as a miss: %s", e)
            return SearchCacheResponse().to_message()
        except CacheError as e:
            logger.error("Cache search failed: %s", e)
            return ErrorResponse(error=str(e)).model_dump()

        if match is None:
            return SearchCacheResponse().to_message()
        return SearchCacheResponse(
            match=CacheEntryRecord.from_entity(match.entry),
            similarity=match.similarity,
        ).to_message()

    async def cache_prompt(self, message: CachePromptMessage) -> dict[str, Any]:
        """Handle ``cachePrompt``.

        Args:
            message: The validated cache message

        Returns:
            Success response, or an error response
        """
        if len(message.answer) <= self._min_answer_length:
            return ErrorResponse(
                error=f"Answer must be longer than {self._min_answer_length} characters"
            ).model_dump()

        try:
            await self._cache.record(message.prompt, message.answer)
        except CacheError as e:
            logger.error("Failed to cache prompt: %s", e)
            return ErrorResponse(error=str(e)).model_dump()

        return CachePromptResponse().model_dump()


def _first_error(error: ValidationError) -> str:
    details = error.errors(include_url=False)
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid')}" if location else first.get("msg", "invalid")
