from abc import ABC, abstractmethod
from typing import Any

class Provider(ABC):
    """Source of channel, user and guild data for the cache.

    Implementations raise on failure: a not-found class error when the ID is
    unknown upstream, anything else for transport or auth problems. The cache
    does not distinguish between them.
    """

    @abstractmethod
    async def fetch_channel(self, channel_id: str) -> Any:
        """Fetch channel data by ID"""
        raise NotImplementedError("Child classes must implement fetch_channel")

    @abstractmethod
    async def fetch_user(self, user_id: str) -> Any:
        """Fetch user data by ID"""
        raise NotImplementedError("Child classes must implement fetch_user")

    @abstractmethod
    async def fetch_guild(self, guild_id: str) -> Any:
        """Fetch guild data by ID"""
        raise NotImplementedError("Child classes must implement fetch_guild")
