"""
Shared Note Routes (public links)
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import Optional
import logging

from ..models import User, NoteView
from ..services.auth import get_current_user
from .notes import load_note, open_note

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/shared", tags=["Sharing"])


@router.get("/{token}", response_model=NoteView)
async def get_shared_note(
    token: str,
    passcode: Optional[str] = None,
    user: Optional[User] = Depends(get_current_user)
):
    """Открыть заметку по публичной ссылке"""
    if not token:
        raise HTTPException(status_code=404, detail="Shared note not found or no longer available")

    note = await load_note({"public_access_token": token, "is_public": True})
    if note is None:
        raise HTTPException(status_code=404, detail="Shared note not found or no longer available")

    return open_note(note, user, passcode)
