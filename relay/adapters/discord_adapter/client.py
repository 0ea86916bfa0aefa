import asyncio
import logging
import discord
from discord.ext import commands

from typing import Callable, Optional

from relay.core.utils.config import Config

class Client:
    """Discord client implementation"""

    def __init__(self, config: Config, process_event: Callable):
        """Initialize the Discord client

        Args:
            config (Config): The configuration for the Discord client
            process_event (Callable): The function to process events
        """
        self.config = config
        self.process_event = process_event

        intents = discord.Intents.default()
        intents.message_content = True  # Needed to read message content
        intents.guild_messages = True
        intents.dm_messages = True
        intents.guilds = True

        self.bot = commands.Bot(command_prefix="!", intents=intents)
        self._setup_event_handlers()

        self.running = False
        self._connection_task: Optional[asyncio.Task] = None

    def _setup_event_handlers(self) -> None:
        """Set up Discord event handlers"""
        @self.bot.event
        async def on_ready():
            self.running = True
            logging.info(f"Logged in to Discord as {self.bot.user}")

        @self.bot.event
        async def on_message(message):
            await self.process_event({"type": "new_message", "event": message})

        @self.bot.event
        async def on_guild_join(guild):
            await self.process_event({"type": "joined_guild", "event": guild})

        @self.bot.event
        async def on_guild_remove(guild):
            await self.process_event({"type": "removed_guild", "event": guild})

        @self.bot.event
        async def on_guild_update(_, after):
            await self.process_event({"type": "updated_guild", "event": after})

        @self.bot.event
        async def on_guild_channel_update(_, after):
            await self.process_event({"type": "updated_channel", "event": after})

        @self.bot.event
        async def on_guild_channel_delete(channel):
            await self.process_event({"type": "deleted_channel", "event": channel})

        @self.bot.event
        async def on_user_update(_, after):
            await self.process_event({"type": "updated_user", "event": after})

    async def connect(self) -> bool:
        """Connect to Discord"""
        try:
            self._connection_task = asyncio.create_task(
                self.bot.start(self.config.get_setting("adapter", "bot_token"))
            )
            await asyncio.sleep(1)

            if self._connection_task.done():
                raise RuntimeError(self._connection_task.exception())

            logging.info("Discord connection initiated successfully")
            return True
        except Exception as e:
            logging.error(f"Error initiating Discord connection: {e}")
            return False

    def connection_failed(self) -> bool:
        """Check whether the connection task ended unexpectedly"""
        return self._connection_task is not None and self._connection_task.done()

    async def disconnect(self) -> None:
        """Disconnect from Discord"""
        self.running = False

        try:
            await self.bot.close()

            if self._connection_task and not self._connection_task.done():
                self._connection_task.cancel()
                try:
                    await self._connection_task
                except asyncio.CancelledError:
                    pass  # Expected

            logging.info("Disconnected from Discord")
        except Exception as e:
            logging.error(f"Error disconnecting from Discord: {e}")
