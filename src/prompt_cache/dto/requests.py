"""Request DTOs for the message transport and the HTTP API."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter


class SearchCacheMessage(BaseModel):
    """Transport message asking for the best cached answer for a text."""

    action: Literal["searchCache"]
    text: str


class CachePromptMessage(BaseModel):
    """Transport message carrying a finished prompt/answer pair to cache."""

    action: Literal["cachePrompt"]
    prompt: str = Field(..., min_length=1)
    answer: str


TransportMessage = Annotated[
    SearchCacheMessage | CachePromptMessage,
    Field(discriminator="action"),
]

transport_message_adapter: TypeAdapter[SearchCacheMessage | CachePromptMessage] = TypeAdapter(
    TransportMessage
)


class SearchRequest(BaseModel):
    """Request DTO for searching the cache over HTTP."""

    text: str = Field(..., description="The query text to search for", min_length=1)
    threshold: float | None = Field(
        None,
        description="Override the default similarity threshold (-1 to 1, higher = more strict)",
        ge=-1.0,
        le=1.0,
    )


class RecordRequest(BaseModel):
    """Request DTO for recording an answered query."""

    query: str = Field(..., description="The original user query", min_length=1)
    answer: str = Field(..., description="The answer to cache", min_length=1)


class ThresholdRequest(BaseModel):
    """Request DTO for updating the similarity threshold."""

    threshold: float = Field(..., ge=-1.0, le=1.0)
