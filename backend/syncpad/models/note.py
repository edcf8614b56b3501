"""
Note Models
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid

DEFAULT_NOTE_TITLE = "Untitled Note"


def _today() -> str:
    return datetime.utcnow().strftime("%d/%m/%Y")


class NoteBase(BaseModel):
    """Base note fields"""
    title: str = DEFAULT_NOTE_TITLE
    content: str = ""


class NoteCreate(BaseModel):
    """Request for creating a note"""
    title: Optional[str] = None
    content: Optional[str] = None
    encrypted: bool = False
    passcode: Optional[str] = None
    is_public: bool = False
    edit_permissions: bool = False
    disable_edit: bool = False


class NoteUpdate(BaseModel):
    """Request for updating a note (owner only)"""
    title: Optional[str] = None
    content: Optional[str] = None
    encrypted: Optional[bool] = None
    passcode: Optional[str] = None
    is_public: Optional[bool] = None
    edit_permissions: Optional[bool] = None
    disable_edit: Optional[bool] = None


class NoteContentUpdate(BaseModel):
    """Request for editing a shared note's text"""
    title: Optional[str] = None
    content: Optional[str] = None
    passcode: Optional[str] = None


class PasscodeRequest(BaseModel):
    """Passcode supplied in a request body"""
    passcode: Optional[str] = None


class Note(NoteBase):
    """Note model with all fields"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    owner_id: str
    date: str = Field(default_factory=_today)
    renamed: bool = False
    original_title: str = ""
    encrypted: bool = False
    passcode: str = ""
    is_public: bool = False
    public_access_token: str = ""
    edit_permissions: bool = False
    disable_edit: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class NoteResponse(NoteBase):
    """Note as returned to clients; the passcode never leaves the server"""
    id: str
    owner_id: str
    date: str
    renamed: bool
    original_title: str
    encrypted: bool
    is_public: bool
    public_access_token: str
    edit_permissions: bool
    disable_edit: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_note(cls, note: Note, content: Optional[str] = None) -> "NoteResponse":
        data = note.model_dump(exclude={"passcode"})
        if content is not None:
            data["content"] = content
        return cls(**data)


class NoteView(BaseModel):
    """Result of opening a note"""
    note: NoteResponse
    is_owner: bool
    can_edit: bool
    requires_passcode: bool


class SharingStatus(BaseModel):
    """Result of toggling public sharing"""
    is_public: bool
    share_link: Optional[str] = None
