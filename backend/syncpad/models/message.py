"""
Message Models (mini notes between users)
"""
from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime
import uuid

MessageType = Literal["note", "request", "response"]


class Message(BaseModel):
    """Mini note sent from one user to another"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    sender_id: str
    receiver_id: str
    title: str = "Quick Note"
    content: str
    is_read: bool = False
    message_type: MessageType = "note"
    linked_note_id: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class MessageCreate(BaseModel):
    """Request for sending a message"""
    receiver_id: str
    content: str
    title: Optional[str] = None
    message_type: MessageType = "note"
    linked_note_id: Optional[str] = None
