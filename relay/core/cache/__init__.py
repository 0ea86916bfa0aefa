"""Cache implementation."""

from relay.core.cache.attachment_cache import AttachmentCache, CachedAttachment
from relay.core.cache.cache import Cache
from relay.core.cache.entity_cache import EntityCache
from relay.core.cache.errors import (
    AttachmentError,
    AttachmentIOError,
    CacheError,
    EntityLookupError,
    FetchFailedError,
    MissingEntryError,
    NilProviderError,
    RequestFailedError
)
from relay.core.cache.provider import Provider

__all__ = [
    "AttachmentCache",
    "AttachmentError",
    "AttachmentIOError",
    "Cache",
    "CacheError",
    "CachedAttachment",
    "EntityCache",
    "EntityLookupError",
    "FetchFailedError",
    "MissingEntryError",
    "NilProviderError",
    "Provider",
    "RequestFailedError"
]
