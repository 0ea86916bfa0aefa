import asyncio
import logging

from typing import Optional

from relay.outputs.base_output import BaseOutput
from relay.outputs.message import RelayMessage

class QueueOutput(BaseOutput):
    """Puts relayed messages on an asyncio queue for in-process consumers

    With raw set the RelayMessage itself is queued, otherwise a one-line
    summary string. A put that does not complete within timeout seconds drops
    the message. The queue receives None once the output is closed.
    """

    def __init__(self,
                 name: str,
                 queue: asyncio.Queue,
                 timeout: Optional[float] = None,
                 raw: bool = False):
        super().__init__(name)
        self.queue = queue
        self.timeout = timeout
        self.raw = raw

    async def _open(self) -> None:
        pass

    async def _write(self, message: RelayMessage) -> None:
        item = message if self.raw else self._format(message)

        try:
            await asyncio.wait_for(self.queue.put(item), timeout=self.timeout or None)
        except asyncio.TimeoutError:
            logging.warning(f"Output {self.name}: timeout on send, message {message.message_id} dropped")

    def _format(self, message: RelayMessage) -> str:
        return f"@{message.author_name} ({message.guild_name or 'Direct'}) #{message.channel_name}: {message.content}"

    async def _close(self) -> None:
        await self.queue.put(None)
