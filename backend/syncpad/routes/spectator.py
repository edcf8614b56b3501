"""
Spectator Routes (collaborators and their public notes)
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import Optional
import re
import logging

from ..models import User, Note
from ..database import get_users_collection, get_notes_collection
from ..services.auth import require_auth
from ..services.encryption import get_encryption
from ..services.access import evaluate_access, build_note_view
from ..services.audit import log_user_action

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["Collaborators"])

PUBLIC_USER_FIELDS = {"_id": 0, "id": 1, "name": 1, "email": 1, "unique_id": 1, "created_at": 1, "last_login": 1}


async def _with_public_note_counts(users_list: list) -> list:
    notes = get_notes_collection()
    result = []
    for user_data in users_list:
        count = await notes.count_documents({"owner_id": user_data["id"], "is_public": True})
        result.append({**user_data, "public_note_count": count})
    return result


@router.get("")
async def get_collaborators(user: User = Depends(require_auth)):
    """Все пользователи с количеством публичных заметок"""
    users = get_users_collection()
    cursor = users.find({}, PUBLIC_USER_FIELDS).sort("created_at", -1).limit(100)
    users_list = await cursor.to_list(100)

    result = await _with_public_note_counts(users_list)
    log_user_action(user.id, "COLLABORATORS_VIEW", count=len(result))
    return {"users": result}


@router.get("/search")
async def search_users(query: Optional[str] = None, user: User = Depends(require_auth)):
    """Поиск пользователей по имени, email или уникальному ID"""
    if not query or len(query.strip()) < 2:
        return {"users": []}

    pattern = {"$regex": re.escape(query.strip()), "$options": "i"}
    users = get_users_collection()
    cursor = users.find(
        {"$or": [{"name": pattern}, {"email": pattern}, {"unique_id": pattern}]},
        PUBLIC_USER_FIELDS
    ).sort("name", 1).limit(20)
    users_list = await cursor.to_list(20)

    result = await _with_public_note_counts(users_list)
    log_user_action(user.id, "USER_SEARCH", query=query.strip(), count=len(result))
    return {"users": result}


@router.get("/{user_id}/notes")
async def get_user_public_notes(user_id: str, user: User = Depends(require_auth)):
    """Публичные заметки пользователя"""
    users = get_users_collection()
    owner = await users.find_one({"id": user_id}, PUBLIC_USER_FIELDS)
    if not owner:
        raise HTTPException(status_code=404, detail="User not found")

    notes = get_notes_collection()
    cursor = notes.find({"owner_id": user_id, "is_public": True}).sort("created_at", -1).limit(50)
    notes_list = await cursor.to_list(50)

    enc = get_encryption()
    views = []
    for raw in notes_list:
        note = Note(**enc.decrypt_note(raw))
        # Без пароля зашифрованные заметки показываются с заглушкой
        outcome = evaluate_access(note, user.id)
        views.append(build_note_view(note, user.id, outcome))

    log_user_action(user.id, "SPECTATOR_VIEW", viewed=user_id, count=len(views))
    return {"user": owner, "notes": [view.model_dump() for view in views]}
