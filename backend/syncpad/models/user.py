"""
User Models
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid

USER_ROLES = ("user", "admin", "super_admin")
ADMIN_ROLES = ("admin", "super_admin")


class SecurityQuestion(BaseModel):
    """Security question used for password recovery"""
    question: str
    answer_hash: str


class StorageUsage(BaseModel):
    """Cached storage usage of a user's notes"""
    total_bytes: int = 0
    notes_count: int = 0
    last_calculated: Optional[datetime] = None


class User(BaseModel):
    """User model"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    email: str
    name: str
    unique_id: str = ""
    password_hash: str
    role: str = "user"
    is_active: bool = True
    is_online: bool = False
    last_seen: Optional[datetime] = None
    login_attempts: int = 0
    lock_until: Optional[datetime] = None
    security_question: Optional[SecurityQuestion] = None
    storage_usage: StorageUsage = Field(default_factory=StorageUsage)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    last_login: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def is_locked(self) -> bool:
        return self.lock_until is not None and self.lock_until > datetime.utcnow()

    def public_profile(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "unique_id": self.unique_id,
        }


class EmailRegisterRequest(BaseModel):
    """Request for email/password registration"""
    email: str
    password: str
    name: Optional[str] = None


class EmailLoginRequest(BaseModel):
    """Request for email/password login"""
    email: str
    password: str


class AuthResponse(BaseModel):
    """Response for authentication endpoints"""
    access_token: str
    token_type: str = "bearer"
    user: dict


class ProfileUpdateRequest(BaseModel):
    name: str
    email: str


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str


class SecurityQuestionRequest(BaseModel):
    question: str
    answer: str


class ForgotPasswordEmailRequest(BaseModel):
    email: str


class ForgotPasswordAnswerRequest(BaseModel):
    reset_token: str
    answer: str


class ForgotPasswordResetRequest(BaseModel):
    reset_token: str
    new_password: str
    confirm_password: str


class UserStatusRequest(BaseModel):
    """Admin action on a user account"""
    action: str
