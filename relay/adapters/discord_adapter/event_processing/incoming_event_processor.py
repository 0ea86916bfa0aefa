import asyncio
import logging

from typing import Any, Callable, Dict, List, Optional

from relay.core.cache.cache import Cache
from relay.core.cache.errors import AttachmentError, CacheError, MissingEntryError
from relay.core.utils.config import Config
from relay.outputs.base_output import BaseOutput
from relay.outputs.message import RelayAttachment, RelayMessage

class IncomingEventProcessor:
    """Turns Discord events into relayed messages and cache updates"""

    def __init__(self, config: Config, client: Any, cache: Cache, outputs: List[BaseOutput]):
        """Initialize the processor

        Args:
            config: Config instance
            client: discord.py bot the events come from
            cache: Cache used for channel, guild and attachment lookups
            outputs: Outputs every relayed message is written to
        """
        self.config = config
        self.client = client
        self.cache = cache
        self.outputs = outputs
        self.nickname = self.config.get_setting("adapter", "nickname")

    async def process_event(self, event: Dict[str, Any]) -> Optional[RelayMessage]:
        """Process an event from the client

        Args:
            event: Dictionary with the event type and the discord.py event object

        Returns:
            The relayed message for new_message events, None otherwise
        """
        try:
            handler = self._get_event_handlers().get(event["type"])

            if handler:
                return await handler(event["event"])

            logging.debug(f"Unhandled event type: {event['type']}")
        except Exception as e:
            logging.error(f"Error processing event: {e}", exc_info=True)
        return None

    def _get_event_handlers(self) -> Dict[str, Callable]:
        """Get event handlers for incoming events"""
        return {
            "new_message": self._handle_message,
            "joined_guild": self._handle_guild_join,
            "updated_channel": self._handle_channel_change,
            "deleted_channel": self._handle_channel_change,
            "updated_guild": self._handle_guild_change,
            "removed_guild": self._handle_guild_change,
            "updated_user": self._handle_user_change
        }

    async def _handle_message(self, message: Any) -> Optional[RelayMessage]:
        """Relay a new message to all outputs

        Args:
            message: discord.Message

        Returns:
            The relayed message, or None if the message was skipped
        """
        if self.client.user and message.author.id == self.client.user.id:
            return None

        try:
            channel = await self.cache.channel(str(message.channel.id))
        except CacheError as e:
            logging.warning(f"Invalid channel for message {message.id}: {e}")
            return None

        guild = None
        if message.guild:
            try:
                guild = await self.cache.guild(str(message.guild.id))
            except CacheError as e:
                logging.warning(f"Invalid guild for message {message.id}: {e}")
                return None

        relay_message = RelayMessage(
            message_id=str(message.id),
            channel_id=str(message.channel.id),
            channel_name=getattr(channel, "name", None) or "direct",
            guild_id=str(guild.id) if guild else None,
            guild_name=guild.name if guild else None,
            author_id=str(message.author.id),
            author_name=str(message.author),
            timestamp=int(message.created_at.timestamp()),
            content=message.clean_content or "",
            attachments=await self._download_attachments(message)
        )

        await asyncio.gather(*(self._write(output, relay_message) for output in self.outputs))
        return relay_message

    async def _download_attachments(self, message: Any) -> List[RelayAttachment]:
        """Download message attachments through the cache

        Failed downloads are logged and left out.

        Args:
            message: discord.Message

        Returns:
            List of downloaded attachments
        """
        attachments = []

        for descriptor in getattr(message, "attachments", []):
            try:
                attachment = await self.cache.attachment(descriptor)
            except AttachmentError as e:
                logging.warning(f"Attachment download failed: {e}")
                continue

            attachments.append(
                RelayAttachment(
                    filename=attachment.name,
                    content_type=attachment.content_type,
                    content=attachment.content
                )
            )

        return attachments

    async def _write(self, output: BaseOutput, message: RelayMessage) -> None:
        try:
            await output.write(message)
        except Exception as e:
            logging.error(f"Error writing message {message.message_id} to output {output.name}: {e}", exc_info=True)

    async def _handle_guild_join(self, guild: Any) -> None:
        """Set the configured nickname in a newly joined guild

        Args:
            guild: discord.Guild
        """
        logging.info(f"Joined guild {guild.name} ({guild.id})")

        if not self.nickname:
            return

        try:
            await guild.me.edit(nick=self.nickname)
        except Exception as e:
            logging.error(f"Error updating nickname in guild {guild.id}: {e}")

    async def _handle_channel_change(self, channel: Any) -> None:
        await self._invalidate(self.cache.invalidate_channel, "channel", str(channel.id))

    async def _handle_guild_change(self, guild: Any) -> None:
        await self._invalidate(self.cache.invalidate_guild, "guild", str(guild.id))

    async def _handle_user_change(self, user: Any) -> None:
        await self._invalidate(self.cache.invalidate_user, "user", str(user.id))

    async def _invalidate(self, invalidate: Callable, kind: str, entity_id: str) -> None:
        """Drop a changed entity from the cache

        Args:
            invalidate: Cache invalidation coroutine function
            kind: Entity kind for logging
            entity_id: Entity ID
        """
        try:
            await invalidate(entity_id)
            logging.info(f"Invalidated cached {kind} {entity_id}")
        except MissingEntryError:
            logging.debug(f"Changed {kind} {entity_id} was not cached")
