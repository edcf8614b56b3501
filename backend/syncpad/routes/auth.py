"""
Authentication Routes
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import Optional
from datetime import datetime
import logging

from ..models import User, Note, EmailRegisterRequest, EmailLoginRequest, AuthResponse
from ..database import get_users_collection, get_notes_collection
from ..services.auth import (
    create_access_token,
    verify_password,
    hash_password,
    validate_email,
    require_auth,
    get_current_user,
)
from ..services.encryption import get_encryption
from ..services.tokens import issue_user_handle
from ..services.validation import sanitize_input, MIN_PASSWORD_LENGTH, MIN_NAME_LENGTH
from ..services.audit import log_security, log_user_action

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])

WELCOME_TITLE = "Welcome to SyncPad!"
WELCOME_CONTENT = (
    "Welcome to SyncPad, {name}! This is your first note. You can edit it, delete it, "
    "or create new notes.\n\n"
    "Features you can explore:\n"
    "- Create and edit notes\n"
    "- Share notes with others\n"
    "- Collaborate on shared notes\n"
    "- Encrypt sensitive notes\n\n"
    "Happy note-taking!"
)


async def unique_id_exists(candidate: str) -> bool:
    users = get_users_collection()
    return await users.find_one({"unique_id": candidate}, {"_id": 1}) is not None


async def create_welcome_note(user: User):
    note = Note(
        owner_id=user.id,
        title=WELCOME_TITLE,
        original_title=WELCOME_TITLE,
        content=WELCOME_CONTENT.format(name=user.name),
    )
    notes = get_notes_collection()
    await notes.insert_one(get_encryption().encrypt_note(note.model_dump()))


@router.post("/register", response_model=AuthResponse)
async def register_with_email(request: EmailRegisterRequest):
    """Регистрация по email/пароль"""
    email = (sanitize_input(request.email) or "").lower()
    if not validate_email(email):
        raise HTTPException(status_code=400, detail="Please enter a valid email address")

    if len(request.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters long")

    name = sanitize_input(request.name)
    if name is not None and len(name) < MIN_NAME_LENGTH:
        raise HTTPException(status_code=400, detail="Name must be at least 2 characters long")
    name = name or email.split("@")[0]

    users = get_users_collection()
    existing_user = await users.find_one({"email": email})
    if existing_user:
        raise HTTPException(status_code=400, detail="User with this email already exists")

    user = User(
        email=email,
        name=name,
        unique_id=await issue_user_handle(name, unique_id_exists),
        password_hash=hash_password(request.password),
        is_online=True,
    )
    await users.insert_one(user.model_dump())
    await create_welcome_note(user)

    log_user_action(user.id, "SIGNUP", email=user.email)
    access_token = create_access_token(user.id, user.email)

    return AuthResponse(access_token=access_token, user=user.public_profile())


@router.post("/login", response_model=AuthResponse)
async def login_with_email(request: EmailLoginRequest):
    """Вход по email/пароль"""
    users = get_users_collection()
    email = request.email.strip().lower()
    user_data = await users.find_one({"email": email})

    if not user_data or not verify_password(request.password, user_data["password_hash"]):
        log_security("LOGIN_FAILED", email=email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user = User(**user_data)
    if user.is_locked():
        raise HTTPException(
            status_code=423,
            detail="Account is temporarily locked due to too many failed attempts"
        )
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")

    now = datetime.utcnow()
    await users.update_one(
        {"id": user.id},
        {"$set": {"last_login": now, "is_online": True, "last_seen": now}}
    )

    log_user_action(user.id, "LOGIN")
    access_token = create_access_token(user.id, user.email)

    return AuthResponse(access_token=access_token, user=user.public_profile())


@router.get("/me")
async def get_me(user: User = Depends(require_auth)):
    """Получить информацию о текущем пользователе"""
    return user.public_profile()


@router.post("/logout")
async def logout(user: Optional[User] = Depends(get_current_user)):
    """Выход (на клиенте нужно удалить токен)"""
    if user is not None:
        users = get_users_collection()
        await users.update_one(
            {"id": user.id},
            {"$set": {"is_online": False, "last_seen": datetime.utcnow()}}
        )
        log_user_action(user.id, "LOGOUT")
    return {"message": "Logged out successfully"}
