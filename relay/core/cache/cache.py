import logging

from typing import Any

from relay.core.cache.attachment_cache import AttachmentCache, CachedAttachment
from relay.core.cache.entity_cache import EntityCache
from relay.core.cache.errors import NilProviderError
from relay.core.cache.provider import Provider
from relay.core.utils.config import Config

class Cache:
    """Cache of platform data used while relaying events

    Holds one read-through cache per entity kind and one for attachment
    content. Instances are independent of each other.
    """

    def __init__(self, provider: Provider, config: Config, start_maintenance: bool = False):
        """Initialize the cache

        Args:
            provider: Source of channel, user and guild data
            config: Configuration object
            start_maintenance: Whether to start the attachment maintenance loop

        Raises:
            NilProviderError: If provider is None
        """
        if provider is None:
            raise NilProviderError()

        self.provider = provider
        self.config = config
        self.channel_cache = EntityCache("channel", provider.fetch_channel)
        self.user_cache = EntityCache("user", provider.fetch_user)
        self.guild_cache = EntityCache("guild", provider.fetch_guild)
        self.attachment_cache = AttachmentCache(config, start_maintenance)

    async def channel(self, channel_id: str) -> Any:
        """Get channel data, fetching it from the provider on a miss"""
        return await self.channel_cache.get(channel_id)

    async def user(self, user_id: str) -> Any:
        """Get user data, fetching it from the provider on a miss"""
        return await self.user_cache.get(user_id)

    async def guild(self, guild_id: str) -> Any:
        """Get guild data, fetching it from the provider on a miss"""
        return await self.guild_cache.get(guild_id)

    async def attachment(self, descriptor: Any) -> CachedAttachment:
        """Get attachment content, downloading it on a miss

        Args:
            descriptor: Object with url, filename and content_type attributes

        Returns:
            CachedAttachment
        """
        return await self.attachment_cache.get(
            descriptor.url,
            getattr(descriptor, "filename", None) or "",
            getattr(descriptor, "content_type", None) or ""
        )

    async def invalidate_channel(self, channel_id: str) -> None:
        await self.channel_cache.invalidate(channel_id)

    async def invalidate_user(self, user_id: str) -> None:
        await self.user_cache.invalidate(user_id)

    async def invalidate_guild(self, guild_id: str) -> None:
        await self.guild_cache.invalidate(guild_id)

    async def clean_attachments(self) -> int:
        """Evict stale and excess attachments

        Returns:
            Number of removed attachments
        """
        return await self.attachment_cache.clean()

    async def close(self) -> None:
        """Release resources held by the cache"""
        await self.attachment_cache.close()
        logging.info("Cache closed")
