"""
Public sharing of notes

Tokens are issued only when sharing is switched on and the note holds none.
Switching sharing off clears the token, so switching it on again issues a
fresh one. Cleared tokens are not remembered anywhere; they simply drop out of
the uniqueness check.
"""
from datetime import datetime
from typing import Optional
import logging

from ..config import settings
from ..database import get_notes_collection
from ..models import Note
from .tokens import issue_share_token

logger = logging.getLogger(__name__)

SHARED_PATH_PREFIX = "/shared/"


def share_link(token: str) -> str:
    return f"{SHARED_PATH_PREFIX}{token}"


async def share_token_exists(token: str) -> bool:
    notes = get_notes_collection()
    return await notes.find_one({"public_access_token": token}, {"_id": 1}) is not None


async def enable_sharing(note: Note) -> Optional[Note]:
    """Make the note public, issuing a token if it has none.

    Returns None if the note disappeared in the meantime.
    """
    notes = get_notes_collection()
    now = datetime.utcnow()

    if note.public_access_token:
        await notes.update_one({"id": note.id}, {"$set": {"is_public": True, "updated_at": now}})
        return note.model_copy(update={"is_public": True, "updated_at": now})

    token = await issue_share_token(share_token_exists, max_attempts=settings.share_token_max_attempts)

    # Записываем токен только если его до сих пор нет
    result = await notes.update_one(
        {"id": note.id, "public_access_token": {"$in": ["", None]}},
        {"$set": {"public_access_token": token, "is_public": True, "updated_at": now}}
    )

    if result.matched_count == 0:
        current = await notes.find_one({"id": note.id})
        if current is None:
            return None
        token = current.get("public_access_token") or ""
        logger.info(f"Note {note.id} already received a share token from a concurrent request")
        if not current.get("is_public"):
            await notes.update_one({"id": note.id}, {"$set": {"is_public": True, "updated_at": now}})

    logger.info(f"Sharing enabled for note {note.id}")
    return note.model_copy(update={"is_public": True, "public_access_token": token, "updated_at": now})


async def disable_sharing(note: Note) -> Note:
    """Make the note private and drop its token"""
    notes = get_notes_collection()
    now = datetime.utcnow()

    await notes.update_one(
        {"id": note.id},
        {"$set": {"is_public": False, "public_access_token": "", "updated_at": now}}
    )

    logger.info(f"Sharing disabled for note {note.id}")
    return note.model_copy(update={"is_public": False, "public_access_token": "", "updated_at": now})


async def toggle_sharing(note: Note) -> Optional[Note]:
    if note.is_public:
        return await disable_sharing(note)
    return await enable_sharing(note)
