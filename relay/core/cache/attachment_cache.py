import aiohttp
import asyncio
import logging

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from relay.core.cache.errors import (
    AttachmentIOError,
    FetchFailedError,
    RequestFailedError
)
from relay.core.utils.config import Config

ATTACHMENT_LIFETIME_HOURS = 24
ATTACHMENT_PRUNE_THRESHOLD = 1000
REQUEST_TIMEOUT_SECONDS = 30
CLEANUP_INTERVAL_MINUTES = 60

@dataclass
class CachedAttachment:
    """Downloaded attachment content, keyed in the cache by its URL"""
    name: str
    content_type: str
    content: bytes = b""
    last_reference: datetime = field(default_factory=datetime.now)

class AttachmentCache:
    """Read-through cache of attachment content fetched over HTTP"""

    def __init__(self, config: Config, start_maintenance=False):
        """Initialize the attachment cache

        Args:
            config: Config instance
            start_maintenance: Whether to start the maintenance loop
        """
        self.config = config
        self.attachments: Dict[str, CachedAttachment] = {}  # url -> CachedAttachment
        self._lock = asyncio.Lock()
        self.lifetime = timedelta(hours=self._setting("lifetime_hours", ATTACHMENT_LIFETIME_HOURS))
        self.prune_threshold = self._setting("prune_threshold", ATTACHMENT_PRUNE_THRESHOLD)
        self.request_timeout = self._setting("request_timeout", REQUEST_TIMEOUT_SECONDS)
        self.cleanup_interval_minutes = self._setting("cleanup_interval_minutes", CLEANUP_INTERVAL_MINUTES)
        self.session: Optional[aiohttp.ClientSession] = None
        self.maintenance_task = asyncio.create_task(self._maintenance_loop()) if start_maintenance else None

    def _setting(self, key: str, default):
        """Read an attachments setting, treating an explicit null as unset"""
        value = self.config.get_setting("attachments", key, default)
        return default if value is None else value

    def __contains__(self, url: str) -> bool:
        return url in self.attachments

    def __len__(self) -> int:
        return len(self.attachments)

    async def close(self) -> None:
        """Stop maintenance and release the HTTP session"""
        if self.maintenance_task and not self.maintenance_task.done():
            self.maintenance_task.cancel()
            try:
                await self.maintenance_task
            except asyncio.CancelledError:
                pass  # Expected

        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def _maintenance_loop(self) -> None:
        """Periodically clean up stale and excess attachments"""
        try:
            while True:
                await asyncio.sleep(self.cleanup_interval_minutes * 60)
                removed = await self.clean()
                logging.info(f"Attachment cache maintenance completed, removed {removed} attachments")
        except asyncio.CancelledError:
            logging.info("Attachment cache maintenance task cancelled")
        except Exception as e:
            logging.error(f"Error in attachment cache maintenance: {e}", exc_info=True)

    async def get(self, url: str, name_hint: str = "", type_hint: str = "") -> CachedAttachment:
        """Get an attachment, downloading it on a miss

        Args:
            url: Source URL, the identity of the attachment
            name_hint: File name to record for a new entry
            type_hint: MIME type to record for a new entry

        Returns:
            Copy of the cached attachment

        Raises:
            RequestFailedError: If the request could not be made or timed out
            FetchFailedError: If the response status was not 200
            AttachmentIOError: If the response body could not be read
        """
        async with self._lock:
            cached = self.attachments.get(url)
            if cached is not None:
                cached.last_reference = datetime.now()
                return replace(cached)

        attachment = CachedAttachment(name=name_hint, content_type=type_hint)
        attachment.content, content_type = await self._download(url, attachment)
        if not attachment.content_type:
            attachment.content_type = content_type
        attachment.last_reference = datetime.now()

        async with self._lock:
            self.attachments[url] = attachment

        logging.info(f"Cached attachment {url} ({len(attachment.content)} bytes)")
        return replace(attachment)

    async def _download(self, url: str, attachment: CachedAttachment):
        """Download the body of an attachment

        Args:
            url: URL to download
            attachment: Metadata reported alongside any error

        Returns:
            Tuple of body bytes and response content type
        """
        session = self._get_session()

        try:
            async with session.get(url) as response:
                if response.status != 200:
                    raise FetchFailedError(url, replace(attachment), response.status)

                try:
                    body = await response.read()
                except asyncio.TimeoutError as e:
                    raise RequestFailedError(url, replace(attachment), str(e) or type(e).__name__) from e
                except (aiohttp.ClientError, OSError) as e:
                    raise AttachmentIOError(url, replace(attachment), str(e) or type(e).__name__) from e

                return body, response.content_type or ""
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RequestFailedError(url, replace(attachment), str(e) or type(e).__name__) from e

    def _get_session(self) -> aiohttp.ClientSession:
        """Create the HTTP session on first use"""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.request_timeout)
            )
        return self.session

    async def clean(self) -> int:
        """Apply age-based and then count-based eviction

        Returns:
            Number of removed attachments
        """
        async with self._lock:
            removed = self._enforce_age_limit()
            removed += self._enforce_total_limit()

        if removed:
            logging.info(f"Removed {removed} attachments from cache")
        return removed

    def _enforce_age_limit(self) -> int:
        """Remove attachments not referenced within the lifetime"""
        cutoff_date = datetime.now() - self.lifetime
        to_remove = [
            url for url, attachment in self.attachments.items()
            if attachment.last_reference < cutoff_date
        ]

        for url in to_remove:
            del self.attachments[url]

        logging.debug(f"Removed {len(to_remove)} attachments due to age limit")
        return len(to_remove)

    def _enforce_total_limit(self) -> int:
        """Remove least recently referenced attachments above the threshold"""
        if len(self.attachments) <= self.prune_threshold:
            return 0

        to_remove_count = len(self.attachments) - self.prune_threshold
        sorted_attachments: List[str] = sorted(
            self.attachments,
            key=lambda url: (self.attachments[url].last_reference, url)
        )

        for url in sorted_attachments[:to_remove_count]:
            del self.attachments[url]

        logging.debug(f"Removed {to_remove_count} attachments due to total limit")
        return to_remove_count
