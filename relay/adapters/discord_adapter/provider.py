import discord

from typing import Any

from relay.core.cache.provider import Provider

class DiscordProvider(Provider):
    """Provider backed by a discord.py client

    Objects already in the client's gateway state are returned without an API
    call; everything else is fetched over REST. Lookup failures propagate as
    discord.py raises them (discord.NotFound, discord.HTTPException, ...).
    """

    def __init__(self, client: discord.Client):
        """Initialize the provider

        Args:
            client: Connected discord.py client
        """
        self.client = client

    async def fetch_channel(self, channel_id: str) -> Any:
        channel = self.client.get_channel(int(channel_id))
        if channel is None:
            channel = await self.client.fetch_channel(int(channel_id))
        return channel

    async def fetch_user(self, user_id: str) -> Any:
        user = self.client.get_user(int(user_id))
        if user is None:
            user = await self.client.fetch_user(int(user_id))
        return user

    async def fetch_guild(self, guild_id: str) -> Any:
        guild = self.client.get_guild(int(guild_id))
        if guild is None:
            guild = await self.client.fetch_guild(int(guild_id))
        return guild
