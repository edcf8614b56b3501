"""
Password Reset Routes

Three steps: email → security question → new password. Progress is carried by
a short-lived JWT whose ``stage`` claim must match the step being called.
"""
from fastapi import APIRouter, HTTPException
import logging

from ..models import (
    User, ForgotPasswordEmailRequest, ForgotPasswordAnswerRequest, ForgotPasswordResetRequest,
)
from ..database import get_users_collection
from ..services.auth import (
    create_reset_token,
    decode_reset_token,
    hash_password,
    verify_security_answer,
    validate_email,
    RESET_STAGE_QUESTION,
    RESET_STAGE_VERIFIED,
)
from ..services.validation import MIN_PASSWORD_LENGTH, MIN_ANSWER_LENGTH
from ..services.audit import log_security, log_user_action

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth/forgot-password", tags=["Password Reset"])

GENERIC_EMAIL_RESPONSE = "If an account with this email exists, you will receive instructions."


async def _load_reset_user(user_id: str) -> User:
    users = get_users_collection()
    user_data = await users.find_one({"id": user_id})
    if not user_data:
        raise HTTPException(status_code=401, detail="Invalid password reset session")
    return User(**user_data)


@router.post("/email")
async def forgot_password_email(request: ForgotPasswordEmailRequest):
    """Шаг 1: проверка email"""
    email = request.email.strip().lower()
    if not validate_email(email):
        raise HTTPException(status_code=400, detail="Please enter a valid email address")

    users = get_users_collection()
    user_data = await users.find_one({"email": email})

    # Не раскрываем, существует ли пользователь
    if not user_data:
        return {"step": "email", "message": GENERIC_EMAIL_RESPONSE}

    user = User(**user_data)
    if user.security_question is None:
        raise HTTPException(
            status_code=400,
            detail="This account does not have a security question set up. Please contact support."
        )

    log_user_action(user.id, "FORGOT_PASSWORD_INITIATED")
    return {
        "step": "security",
        "question": user.security_question.question,
        "reset_token": create_reset_token(user.id, RESET_STAGE_QUESTION),
    }


@router.post("/security")
async def forgot_password_security(request: ForgotPasswordAnswerRequest):
    """Шаг 2: ответ на контрольный вопрос"""
    user_id = decode_reset_token(request.reset_token, RESET_STAGE_QUESTION)

    if not request.answer or len(request.answer.strip()) < MIN_ANSWER_LENGTH:
        raise HTTPException(status_code=400, detail="Please provide a valid answer")

    user = await _load_reset_user(user_id)
    if user.security_question is None or not verify_security_answer(
        request.answer, user.security_question.answer_hash
    ):
        log_security("INVALID_SECURITY_ANSWER", user=user_id)
        raise HTTPException(status_code=401, detail="Incorrect answer. Please try again.")

    log_user_action(user_id, "SECURITY_QUESTION_VERIFIED")
    return {
        "step": "reset",
        "reset_token": create_reset_token(user_id, RESET_STAGE_VERIFIED),
    }


@router.post("/reset")
async def forgot_password_reset(request: ForgotPasswordResetRequest):
    """Шаг 3: новый пароль"""
    user_id = decode_reset_token(request.reset_token, RESET_STAGE_VERIFIED)

    if not request.new_password or not request.confirm_password:
        raise HTTPException(status_code=400, detail="Both password fields are required")
    if len(request.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters long")
    if request.new_password != request.confirm_password:
        raise HTTPException(status_code=400, detail="Passwords do not match")

    user = await _load_reset_user(user_id)
    users = get_users_collection()
    await users.update_one(
        {"id": user.id},
        {"$set": {"password_hash": hash_password(request.new_password), "login_attempts": 0, "lock_until": None}}
    )

    log_user_action(user_id, "PASSWORD_RESET_SUCCESS")
    return {
        "step": "success",
        "message": "Password reset successfully! You can now log in with your new password.",
    }
