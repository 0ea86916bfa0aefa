from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

class RelayAttachment(BaseModel):
    """Model for a downloaded attachment"""
    model_config = ConfigDict(frozen=True)

    filename: str
    content_type: str = ""
    content: bytes = b""

class RelayMessage(BaseModel):
    """Model for a message passed to outputs"""
    model_config = ConfigDict(frozen=True)

    message_id: str
    channel_id: str
    channel_name: str
    author_id: str
    author_name: str
    timestamp: int
    content: str = ""
    guild_id: Optional[str] = None
    guild_name: Optional[str] = None
    attachments: List[RelayAttachment] = Field(default_factory=list)
