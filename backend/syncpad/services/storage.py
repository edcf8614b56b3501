"""
Storage usage aggregation for the admin dashboard
"""
from datetime import datetime, timedelta
from typing import Optional
import logging

from ..config import settings
from ..database import get_notes_collection, get_users_collection
from ..models import User, StorageUsage
from .encryption import get_encryption

logger = logging.getLogger(__name__)

_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_bytes(num_bytes: int) -> str:
    """Human-readable size in base 1024, e.g. ``1.5 KB``"""
    if num_bytes <= 0:
        return "0 Bytes"
    exponent = 0
    while num_bytes >= 1024 ** (exponent + 1) and exponent < len(_UNITS) - 1:
        exponent += 1
    value = round(num_bytes / (1024 ** exponent), 2)
    return f"{value:g} {_UNITS[exponent]}"


def note_size(note_dict: dict) -> int:
    """UTF-8 size of a decrypted note's title and content"""
    title = note_dict.get("title") or ""
    content = note_dict.get("content") or ""
    return len(title.encode("utf-8")) + len(content.encode("utf-8"))


def is_stale(usage: StorageUsage, now: Optional[datetime] = None) -> bool:
    if usage.last_calculated is None:
        return True
    now = now or datetime.utcnow()
    return now - usage.last_calculated > timedelta(hours=settings.storage_recalc_hours)


async def calculate_storage_usage(user_id: str) -> StorageUsage:
    """Recompute a user's storage usage and cache it on the user record"""
    notes = get_notes_collection()
    enc = get_encryption()

    total_bytes = 0
    notes_count = 0
    cursor = notes.find({"owner_id": user_id}, {"title": 1, "content": 1})
    for note in await cursor.to_list(None):
        total_bytes += note_size(enc.decrypt_note(note))
        notes_count += 1

    usage = StorageUsage(
        total_bytes=total_bytes,
        notes_count=notes_count,
        last_calculated=datetime.utcnow(),
    )

    users = get_users_collection()
    await users.update_one({"id": user_id}, {"$set": {"storage_usage": usage.model_dump()}})

    logger.debug(f"Storage for user {user_id}: {total_bytes} bytes in {notes_count} notes")
    return usage


async def get_storage_usage(user: User) -> StorageUsage:
    """Cached usage, recomputed when older than the configured interval"""
    if is_stale(user.storage_usage):
        return await calculate_storage_usage(user.id)
    return user.storage_usage
