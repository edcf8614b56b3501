# Pydantic Models
from .user import (
    User, SecurityQuestion, StorageUsage, EmailRegisterRequest, EmailLoginRequest,
    AuthResponse, ProfileUpdateRequest, PasswordChangeRequest, SecurityQuestionRequest,
    ForgotPasswordEmailRequest, ForgotPasswordAnswerRequest, ForgotPasswordResetRequest,
    UserStatusRequest, USER_ROLES, ADMIN_ROLES,
)
from .note import (
    Note, NoteBase, NoteCreate, NoteUpdate, NoteContentUpdate, PasscodeRequest,
    NoteResponse, NoteView, SharingStatus, DEFAULT_NOTE_TITLE,
)
from .message import Message, MessageCreate

__all__ = [
    # User
    "User", "SecurityQuestion", "StorageUsage", "EmailRegisterRequest", "EmailLoginRequest",
    "AuthResponse", "ProfileUpdateRequest", "PasswordChangeRequest", "SecurityQuestionRequest",
    "ForgotPasswordEmailRequest", "ForgotPasswordAnswerRequest", "ForgotPasswordResetRequest",
    "UserStatusRequest", "USER_ROLES", "ADMIN_ROLES",
    # Note
    "Note", "NoteBase", "NoteCreate", "NoteUpdate", "NoteContentUpdate", "PasscodeRequest",
    "NoteResponse", "NoteView", "SharingStatus", "DEFAULT_NOTE_TITLE",
    # Message
    "Message", "MessageCreate",
]
