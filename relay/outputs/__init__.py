"""Output implementations."""

from typing import Any, Dict

from relay.outputs.base_output import BaseOutput, OutputNotOpenError
from relay.outputs.message import RelayAttachment, RelayMessage
from relay.outputs.queue_output import QueueOutput
from relay.outputs.writer_output import CollateMode, WriterOutput

def create_output(settings: Dict[str, Any]) -> BaseOutput:
    """Build an output from its configuration entry

    Args:
        settings: One entry of the outputs configuration list

    Returns:
        Output instance

    Raises:
        ValueError: If the output type is unknown or settings are invalid
    """
    output_type = settings.get("type")
    name = settings.get("name") or output_type

    if output_type == "writer":
        return WriterOutput(
            name,
            path=settings.get("path"),
            prefix=settings.get("prefix", ""),
            collate=CollateMode(settings.get("collate", "none"))
        )

    raise ValueError(f"Unknown output type: {output_type}")

__all__ = [
    "BaseOutput",
    "CollateMode",
    "OutputNotOpenError",
    "QueueOutput",
    "RelayAttachment",
    "RelayMessage",
    "WriterOutput",
    "create_output"
]
