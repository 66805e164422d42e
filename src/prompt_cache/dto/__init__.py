"""Data Transfer Objects for external contracts.

These Pydantic models define the message transport contract, the HTTP
API contract and the persisted snapshot shape. They are used for
validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .records import CacheEntryRecord, CacheSnapshotRecord
from .requests import (
    CachePromptMessage,
    RecordRequest,
    SearchCacheMessage,
    SearchRequest,
    ThresholdRequest,
    TransportMessage,
    transport_message_adapter,
)
from .responses import (
    CachePromptResponse,
    CacheStatsResponse,
    ErrorResponse,
    HealthCheckResponse,
    RecordResponse,
    SearchCacheResponse,
    SearchResponse,
)

__all__ = [
    "CacheEntryRecord",
    "CacheSnapshotRecord",
    "SearchCacheMessage",
    "CachePromptMessage",
    "TransportMessage",
    "transport_message_adapter",
    "SearchRequest",
    "RecordRequest",
    "ThresholdRequest",
    "SearchCacheResponse",
    "CachePromptResponse",
    "ErrorResponse",
    "SearchResponse",
    "RecordResponse",
    "CacheStatsResponse",
    "HealthCheckResponse",
]
