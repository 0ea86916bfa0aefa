import sys

from datetime import datetime
from enum import Enum
from typing import Optional, TextIO

from relay.outputs.base_output import BaseOutput
from relay.outputs.message import RelayMessage

class CollateMode(str, Enum):
    """How consecutive alike messages are grouped.

    Each mode includes the ones before it: user collation implies channel
    collation.
    """
    NONE = "none"
    CHANNEL = "channel"
    USER = "user"

COLLATE_ORDER = [CollateMode.NONE, CollateMode.CHANNEL, CollateMode.USER]

class WriterOutput(BaseOutput):
    """Writes timestamped message lines to a text stream"""

    def __init__(self,
                 name: str,
                 path: Optional[str] = None,
                 stream: Optional[TextIO] = None,
                 prefix: str = "",
                 collate: CollateMode = CollateMode.NONE):
        """Initialize the writer

        Args:
            name: Output name
            path: File to append to; stdout when neither path nor stream is given
            stream: Already opened text stream
            prefix: Prepended to every message line
            collate: Collation mode
        """
        super().__init__(name)
        self.path = path
        self.stream = stream
        self.prefix = prefix
        self.collate = CollateMode(collate)
        self.last_author: Optional[str] = None
        self.last_channel: Optional[str] = None
        self._owns_stream = False

    def _collates(self, mode: CollateMode) -> bool:
        return COLLATE_ORDER.index(self.collate) >= COLLATE_ORDER.index(mode)

    async def _open(self) -> None:
        if self.stream is None:
            if self.path and self.path != "-":
                self.stream = open(self.path, "a", encoding="utf-8")
                self._owns_stream = True
            else:
                self.stream = sys.stdout

        # Collated output starts each group with a blank line
        if self.collate == CollateMode.NONE:
            self.stream.write("\n")
            self.stream.flush()

    async def _write(self, message: RelayMessage) -> None:
        channel_changed = message.channel_id != self.last_channel

        if self._collates(CollateMode.CHANNEL):
            if channel_changed:
                self.stream.write(f"\n{message.guild_name or 'Direct'} #{message.channel_name}:\n")

            if self._collates(CollateMode.USER) and message.author_id == self.last_author and not channel_changed:
                # Align with the text after "author: "
                padding = " " * (len(message.author_name) + 2)
                self._write_line(f"{padding}{message.content}")
            else:
                self._write_line(f"{message.author_name}: {message.content}")
        else:
            self._write_line(
                f"{message.author_name} ({message.guild_name or 'Direct'} #{message.channel_name}): {message.content}"
            )

        for attachment in message.attachments:
            self._write_line(f"  [attachment {attachment.filename} {attachment.content_type} {len(attachment.content)} bytes]")

        self.stream.flush()
        self.last_author = message.author_id
        self.last_channel = message.channel_id

    def _write_line(self, text: str) -> None:
        timestamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
        self.stream.write(f"{self.prefix}{timestamp} {text}\n")

    async def _close(self) -> None:
        self._write_line("relay log closing")
        self.stream.flush()

        if self._owns_stream:
            self.stream.close()
            self.stream = None
            self._owns_stream = False
