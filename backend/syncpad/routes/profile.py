"""
Profile Routes
"""
from fastapi import APIRouter, HTTPException, Depends
import logging

from ..models import (
    User, SecurityQuestion, ProfileUpdateRequest, PasswordChangeRequest, SecurityQuestionRequest,
)
from ..database import get_users_collection
from ..services.auth import (
    require_auth,
    verify_password,
    hash_password,
    hash_security_answer,
    validate_email,
)
from ..services.validation import MIN_PASSWORD_LENGTH, MIN_NAME_LENGTH, MIN_ANSWER_LENGTH
from ..services.audit import log_security, log_user_action

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/profile", tags=["Profile"])

SECURITY_QUESTIONS = [
    "What was the name of your first pet?",
    "What city were you born in?",
    "What was your mother's maiden name?",
    "What was the name of your elementary school?",
    "What was your childhood nickname?",
    "What was the make of your first car?",
    "What was your favorite teacher's name?",
    "What was the name of the street you grew up on?",
    "What was your first job?",
    "What was the name of your first best friend?",
]


@router.get("")
async def get_profile(user: User = Depends(require_auth)):
    """Получить профиль"""
    return {
        **user.public_profile(),
        "role": user.role,
        "created_at": user.created_at,
        "last_login": user.last_login,
        "has_security_question": user.security_question is not None,
        "security_question": user.security_question.question if user.security_question else None,
    }


@router.get("/security-questions")
async def get_security_questions():
    """Список доступных контрольных вопросов"""
    return {"questions": SECURITY_QUESTIONS}


@router.put("")
async def update_profile(request: ProfileUpdateRequest, user: User = Depends(require_auth)):
    """Обновить имя и email"""
    name = request.name.strip()
    email = request.email.strip().lower()

    if len(name) < MIN_NAME_LENGTH:
        raise HTTPException(status_code=400, detail="Name must be at least 2 characters long")
    if not validate_email(email):
        raise HTTPException(status_code=400, detail="Please enter a valid email address")

    users = get_users_collection()
    existing_user = await users.find_one({"email": email, "id": {"$ne": user.id}})
    if existing_user:
        raise HTTPException(status_code=409, detail="Email is already taken by another user")

    await users.update_one({"id": user.id}, {"$set": {"name": name, "email": email}})

    log_user_action(user.id, "PROFILE_UPDATE", old_name=user.name, new_name=name)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": {"name": name, "email": email},
    }


@router.post("/password")
async def change_password(request: PasswordChangeRequest, user: User = Depends(require_auth)):
    """Сменить пароль"""
    if not request.current_password or not request.new_password or not request.confirm_password:
        raise HTTPException(status_code=400, detail="All password fields are required")
    if len(request.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="New password must be at least 6 characters long")
    if request.new_password != request.confirm_password:
        raise HTTPException(status_code=400, detail="New passwords do not match")
    if request.current_password == request.new_password:
        raise HTTPException(status_code=400, detail="New password must be different from current password")

    if not verify_password(request.current_password, user.password_hash):
        log_security("INVALID_PASSWORD_CHANGE_ATTEMPT", user=user.id)
        raise HTTPException(status_code=401, detail="Current password is incorrect")

    users = get_users_collection()
    await users.update_one(
        {"id": user.id},
        {"$set": {"password_hash": hash_password(request.new_password)}}
    )

    log_user_action(user.id, "PASSWORD_CHANGE")
    return {"success": True, "message": "Password changed successfully"}


@router.post("/security-question")
async def update_security_question(request: SecurityQuestionRequest, user: User = Depends(require_auth)):
    """Задать контрольный вопрос"""
    question = request.question.strip()
    answer = request.answer.strip()

    if not question or not answer:
        raise HTTPException(status_code=400, detail="Both question and answer are required")
    if question not in SECURITY_QUESTIONS:
        raise HTTPException(status_code=400, detail="Please select a valid security question")
    if len(answer) < MIN_ANSWER_LENGTH:
        raise HTTPException(status_code=400, detail="Security answer must be at least 3 characters long")

    security_question = SecurityQuestion(question=question, answer_hash=hash_security_answer(answer))

    users = get_users_collection()
    await users.update_one(
        {"id": user.id},
        {"$set": {"security_question": security_question.model_dump()}}
    )

    log_user_action(user.id, "SECURITY_QUESTION_UPDATE", question=question)
    return {"success": True, "message": "Security question updated successfully"}
