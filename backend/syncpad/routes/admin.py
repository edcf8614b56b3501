"""
Admin Routes
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import Optional
from datetime import datetime, timedelta
import math
import re
import logging

from ..config import settings
from ..models import User, EmailLoginRequest, AuthResponse, UserStatusRequest, ADMIN_ROLES, USER_ROLES
from ..database import get_users_collection, get_notes_collection
from ..services.auth import create_access_token, verify_password, require_admin, ADMIN_SCOPE
from ..services.storage import get_storage_usage, format_bytes
from ..services.audit import log_security, log_user_action

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["Admin"])

USER_ACTIONS = {
    "activate": {"is_active": True},
    "deactivate": {"is_active": False},
    "make_admin": {"role": "admin"},
    "remove_admin": {"role": "user"},
}

HIDDEN_USER_FIELDS = {"_id": 0, "password_hash": 0, "security_question": 0}


@router.post("/login", response_model=AuthResponse)
async def admin_login(request: EmailLoginRequest):
    """Вход в панель администратора"""
    users = get_users_collection()
    email = request.email.strip().lower()
    admin_data = await users.find_one({"email": email, "role": {"$in": list(ADMIN_ROLES)}})

    if not admin_data:
        log_security("ADMIN_LOGIN_FAILED", email=email)
        raise HTTPException(status_code=401, detail="Invalid admin credentials")

    admin = User(**admin_data)
    if admin.is_locked():
        raise HTTPException(
            status_code=423,
            detail="Account is temporarily locked due to too many failed attempts"
        )

    if not verify_password(request.password, admin.password_hash):
        attempts = admin.login_attempts + 1
        update = {"login_attempts": attempts}
        if attempts >= settings.admin_max_login_attempts:
            update["lock_until"] = datetime.utcnow() + timedelta(minutes=settings.admin_lock_minutes)
            logger.warning(f"Admin account {admin.id} locked after {attempts} failed attempts")
        await users.update_one({"id": admin.id}, {"$set": update})

        log_security("ADMIN_LOGIN_FAILED", email=email, attempts=attempts)
        raise HTTPException(status_code=401, detail="Invalid admin credentials")

    if not admin.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")

    now = datetime.utcnow()
    await users.update_one(
        {"id": admin.id},
        {"$set": {
            "login_attempts": 0,
            "lock_until": None,
            "is_online": True,
            "last_seen": now,
            "last_login": now,
        }}
    )

    log_user_action(admin.id, "ADMIN_LOGIN", role=admin.role)
    return AuthResponse(
        access_token=create_access_token(admin.id, admin.email, scope=ADMIN_SCOPE),
        user={**admin.public_profile(), "role": admin.role},
    )


@router.get("/dashboard")
async def get_admin_dashboard(admin: User = Depends(require_admin)):
    """Статистика пользователей и хранилища"""
    users = get_users_collection()
    notes = get_notes_collection()

    total_users = await users.count_documents({"role": "user"})
    active_users = await users.count_documents({"is_online": True})
    total_admins = await users.count_documents({"role": {"$in": list(ADMIN_ROLES)}})

    total_storage_bytes = 0
    storage_rows = []
    regular_users = await users.find({"role": "user"}).to_list(None)
    for user_data in regular_users:
        user = User(**user_data)
        usage = await get_storage_usage(user)
        total_storage_bytes += usage.total_bytes
        storage_rows.append({
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "storage_bytes": usage.total_bytes,
            "formatted_storage": format_bytes(usage.total_bytes),
            "notes_count": usage.notes_count,
        })

    storage_rows.sort(key=lambda row: row["storage_bytes"], reverse=True)

    recent_cursor = users.find(
        {"role": "user"},
        {"_id": 0, "id": 1, "name": 1, "email": 1, "last_login": 1, "is_online": 1}
    ).sort("last_login", -1).limit(10)
    recent_users = await recent_cursor.to_list(10)

    log_user_action(admin.id, "ADMIN_DASHBOARD_ACCESS")
    return {
        "stats": {
            "total_users": total_users,
            "active_users": active_users,
            "total_admins": total_admins,
            "total_notes": await notes.count_documents({}),
            "public_notes": await notes.count_documents({"is_public": True}),
            "encrypted_notes": await notes.count_documents({"encrypted": True}),
            "total_storage": format_bytes(total_storage_bytes),
            "total_storage_bytes": total_storage_bytes,
        },
        "top_storage_users": storage_rows[:10],
        "recent_users": recent_users,
    }


@router.get("/users")
async def get_all_users(
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    role: Optional[str] = None,
    admin: User = Depends(require_admin)
):
    """Список пользователей с фильтрами и пагинацией"""
    page = max(page, 1)
    limit = max(limit, 1)

    query = {}
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [{"name": pattern}, {"email": pattern}]
    if role:
        if role not in USER_ROLES:
            raise HTTPException(status_code=400, detail="Invalid role")
        query["role"] = role

    users = get_users_collection()
    cursor = users.find(query, HIDDEN_USER_FIELDS).sort("created_at", -1).skip((page - 1) * limit).limit(limit)
    users_list = await cursor.to_list(limit)

    total = await users.count_documents(query)
    total_pages = math.ceil(total / limit)

    log_user_action(admin.id, "ADMIN_USERS_VIEW", page=page, search=search, role=role)
    return {
        "users": [
            {
                **{key: value for key, value in user_data.items() if key != "storage_usage"},
                "storage_usage": format_bytes(user_data.get("storage_usage", {}).get("total_bytes", 0)),
                "notes_count": user_data.get("storage_usage", {}).get("notes_count", 0),
            }
            for user_data in users_list
        ],
        "pagination": {
            "current_page": page,
            "total_pages": total_pages,
            "total_users": total,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
        "filters": {"search": search or "", "role": role or ""},
    }


@router.post("/users/{user_id}/status")
async def update_user_status(user_id: str, request: UserStatusRequest, admin: User = Depends(require_admin)):
    """Активировать/деактивировать пользователя или изменить роль"""
    users = get_users_collection()
    user_data = await users.find_one({"id": user_id}, {"_id": 0, "id": 1, "email": 1})
    if not user_data:
        raise HTTPException(status_code=404, detail="User not found")

    changes = USER_ACTIONS.get(request.action)
    if changes is None:
        raise HTTPException(status_code=400, detail="Invalid action")

    await users.update_one({"id": user_id}, {"$set": changes})

    log_user_action(admin.id, "ADMIN_USER_UPDATE", target=user_id, action=request.action)
    return {"success": True, "message": f"User {request.action} successful"}


@router.post("/logout")
async def admin_logout(admin: User = Depends(require_admin)):
    """Выход администратора"""
    users = get_users_collection()
    await users.update_one(
        {"id": admin.id},
        {"$set": {"is_online": False, "last_seen": datetime.utcnow()}}
    )
    log_user_action(admin.id, "ADMIN_LOGOUT")
    return {"message": "Logged out successfully"}
