"""Handler layer for transports.

This layer converts external requests into service calls.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Store / Repository
    (HTTP, messages) -> (Business) -> (Data)
"""

from .cache_handler import CacheHandler
from .message_handler import MessageHandler

__all__ = [
    "CacheHandler",
    "MessageHandler",
]
