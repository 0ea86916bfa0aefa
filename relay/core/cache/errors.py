from typing import Any, Optional

class CacheError(Exception):
    """Base class for recoverable cache errors"""

class MissingEntryError(CacheError):
    """Raised when invalidating an entry that is not cached"""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"cache: {kind} {entity_id} not present")

class EntityLookupError(CacheError):
    """Raised when the provider fails to supply an entity"""

    def __init__(self, kind: str, entity_id: str, error: Exception):
        self.kind = kind
        self.entity_id = entity_id
        self.error = error
        super().__init__(f"cache: {kind} {entity_id} lookup failed: {error}")

class AttachmentError(CacheError):
    """Base class for attachment download errors

    The attachment attribute holds the name and type known before the download
    was attempted; its content is always empty.
    """

    reason = "attachment download failed"

    def __init__(self, url: str, attachment: Any, detail: Optional[str] = None):
        self.url = url
        self.attachment = attachment
        message = f"cache: attachment download: {self.reason}: {url}"
        if detail:
            message += f": {detail}"
        super().__init__(message)

class RequestFailedError(AttachmentError):
    """Network request could not be completed"""

    reason = "network request failed"

class FetchFailedError(AttachmentError):
    """Remote answered with a non-200 status"""

    reason = "http error"

    def __init__(self, url: str, attachment: Any, status: int):
        self.status = status
        super().__init__(url, attachment, f"status {status}")

class AttachmentIOError(AttachmentError):
    """Response body could not be read"""

    reason = "I/O error"

class NilProviderError(TypeError):
    """Raised when a cache is created without a provider"""

    def __init__(self):
        super().__init__("cache: attempted to create cache with nil provider")
