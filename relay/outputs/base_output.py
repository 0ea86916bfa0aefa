from abc import ABC, abstractmethod

from relay.outputs.message import RelayMessage

class OutputNotOpenError(RuntimeError):
    """Raised when writing to an output that was not opened"""

class BaseOutput(ABC):
    """Base output implementation.

    An output receives every relayed message. Outputs are opened once before
    the first message and closed on shutdown. Messages must not be modified.
    """

    def __init__(self, name: str):
        """Initialize output

        Args:
            name: Output name used in logs
        """
        self.name = name
        self.opened = False

    async def open(self) -> None:
        """Open the output"""
        await self._open()
        self.opened = True

    async def write(self, message: RelayMessage) -> None:
        """Write a message to the output

        Args:
            message: Message to write

        Raises:
            OutputNotOpenError: If the output was not opened
        """
        if not self.opened:
            raise OutputNotOpenError(f"output {self.name}: write before open")
        await self._write(message)

    async def close(self) -> None:
        """Close the output"""
        if not self.opened:
            return
        self.opened = False
        await self._close()

    @abstractmethod
    async def _open(self) -> None:
        raise NotImplementedError("Child classes must implement _open")

    @abstractmethod
    async def _write(self, message: RelayMessage) -> None:
        raise NotImplementedError("Child classes must implement _write")

    @abstractmethod
    async def _close(self) -> None:
        raise NotImplementedError("Child classes must implement _close")
