"""
Notes Routes
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import List, Optional
from datetime import datetime
import logging

from ..models import (
    User, Note, NoteCreate, NoteUpdate, NoteContentUpdate, PasscodeRequest,
    NoteResponse, NoteView, SharingStatus, DEFAULT_NOTE_TITLE,
)
from ..database import get_notes_collection
from ..services.auth import require_auth, get_current_user
from ..services.encryption import get_encryption
from ..services.access import AccessOutcome, evaluate_access, build_note_view
from ..services.sharing import enable_sharing, disable_sharing, toggle_sharing, share_link
from ..services.validation import (
    sanitize_input, MAX_TITLE_LENGTH, MAX_CONTENT_LENGTH, MIN_PASSCODE_LENGTH,
)
from ..services.audit import log_security, log_user_action

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/notes", tags=["Notes"])


async def load_note(query: dict) -> Optional[Note]:
    """Fetch and decrypt a single note"""
    notes = get_notes_collection()
    note = await notes.find_one(query)
    if not note:
        return None
    return Note(**get_encryption().decrypt_note(note))


async def get_owned_note(note_id: str, user: User) -> Note:
    note = await load_note({"id": note_id})
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    if note.owner_id != user.id:
        log_security("NOTE_OWNER_CHECK_FAILED", user=user.id, note=note_id)
        raise HTTPException(status_code=403, detail="Access denied")
    return note


def open_note(note: Note, user: Optional[User], passcode: Optional[str]) -> NoteView:
    """Apply the access decision for a loaded note"""
    requester_id = user.id if user else None
    outcome = evaluate_access(note, requester_id, passcode)

    if outcome is AccessOutcome.DENIED:
        log_security("NOTE_ACCESS_DENIED", user=requester_id, note=note.id)
        raise HTTPException(status_code=403, detail="Access denied")

    return build_note_view(note, requester_id, outcome)


def _check_lengths(title: Optional[str], content: Optional[str]):
    if title is not None and len(title) > MAX_TITLE_LENGTH:
        raise HTTPException(status_code=400, detail="Note title must be less than 100 characters")
    if content is not None and len(content) > MAX_CONTENT_LENGTH:
        raise HTTPException(status_code=400, detail="Note content must be less than 10,000 characters")


def _check_passcode(passcode: Optional[str]):
    if not passcode or len(passcode) < MIN_PASSCODE_LENGTH:
        raise HTTPException(
            status_code=400,
            detail="Passcode is required for encrypted notes and must be at least 4 characters"
        )


@router.post("", response_model=NoteView)
async def create_note(note: NoteCreate, user: User = Depends(require_auth)):
    """Создать новую заметку"""
    title = sanitize_input(note.title) or ""
    content = sanitize_input(note.content) or ""

    # Пустую заметку не сохраняем
    if not title and not content:
        raise HTTPException(status_code=400, detail="Note cannot be empty. Please add some content or a title.")

    title = title or DEFAULT_NOTE_TITLE
    _check_lengths(title, content)
    if note.encrypted:
        _check_passcode(note.passcode)

    note_obj = Note(
        owner_id=user.id,
        title=title,
        content=content,
        original_title=title,
        encrypted=note.encrypted,
        passcode=note.passcode if note.encrypted else "",
        edit_permissions=note.edit_permissions,
        disable_edit=note.disable_edit,
    )

    enc = get_encryption()
    notes = get_notes_collection()
    await notes.insert_one(enc.encrypt_note(note_obj.model_dump()))

    if note.is_public:
        note_obj = await enable_sharing(note_obj)
        if note_obj is None:
            raise HTTPException(status_code=404, detail="Note not found")

    log_user_action(user.id, "NOTE_CREATE", note=note_obj.id, public=note_obj.is_public)
    return build_note_view(note_obj, user.id, AccessOutcome.VIEW_AND_EDIT)


@router.get("", response_model=List[NoteResponse])
async def get_notes(user: User = Depends(require_auth)):
    """Получить все заметки пользователя"""
    notes = get_notes_collection()
    cursor = notes.find({"owner_id": user.id}).sort("created_at", -1)
    notes_list = await cursor.to_list(1000)

    enc = get_encryption()
    return [NoteResponse.from_note(Note(**enc.decrypt_note(note))) for note in notes_list]


@router.get("/{note_id}", response_model=NoteView)
async def get_note(
    note_id: str,
    passcode: Optional[str] = None,
    user: Optional[User] = Depends(get_current_user)
):
    """Открыть заметку (владелец или по публичному доступу)"""
    note = await load_note({"id": note_id})
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return open_note(note, user, passcode)


@router.post("/{note_id}/unlock", response_model=NoteView)
async def unlock_note(
    note_id: str,
    request: PasscodeRequest,
    user: Optional[User] = Depends(get_current_user)
):
    """Открыть зашифрованную заметку, передав пароль в теле запроса"""
    note = await load_note({"id": note_id})
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return open_note(note, user, request.passcode)


@router.put("/{note_id}", response_model=NoteView)
async def update_note(note_id: str, note_update: NoteUpdate, user: User = Depends(require_auth)):
    """Обновить заметку (только владелец)"""
    note = await get_owned_note(note_id, user)

    update_data = {}

    if note_update.title is not None:
        title = sanitize_input(note_update.title)
        if not title:
            raise HTTPException(status_code=400, detail="Note title is required")
        _check_lengths(title, None)
        if title != note.title:
            update_data["renamed"] = True
            if not note.original_title:
                update_data["original_title"] = note.title
        update_data["title"] = title

    if note_update.content is not None:
        content = sanitize_input(note_update.content)
        _check_lengths(None, content)
        update_data["content"] = content

    encrypted = note.encrypted if note_update.encrypted is None else note_update.encrypted
    if encrypted:
        passcode = note.passcode if note_update.passcode is None else note_update.passcode
        _check_passcode(passcode)
    else:
        passcode = ""
    update_data["encrypted"] = encrypted
    update_data["passcode"] = passcode

    if note_update.edit_permissions is not None:
        update_data["edit_permissions"] = note_update.edit_permissions
    if note_update.disable_edit is not None:
        update_data["disable_edit"] = note_update.disable_edit

    update_data["updated_at"] = datetime.utcnow()

    enc = get_encryption()
    notes = get_notes_collection()
    await notes.update_one({"id": note_id}, {"$set": enc.encrypt_note(update_data)})

    note = note.model_copy(update=update_data)

    # Переключение публичного доступа
    if note_update.is_public is True and not note.is_public:
        note = await enable_sharing(note)
    elif note_update.is_public is False and (note.is_public or note.public_access_token):
        note = await disable_sharing(note)

    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")

    log_user_action(user.id, "NOTE_UPDATE", note=note_id)
    return build_note_view(note, user.id, AccessOutcome.VIEW_AND_EDIT)


@router.put("/{note_id}/content", response_model=NoteView)
async def edit_note_content(
    note_id: str,
    request: NoteContentUpdate,
    user: User = Depends(require_auth)
):
    """Изменить текст заметки с правом редактирования"""
    note = await load_note({"id": note_id})
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")

    outcome = evaluate_access(note, user.id, request.passcode)
    if outcome is AccessOutcome.PASSCODE_REQUIRED:
        raise HTTPException(status_code=403, detail="Passcode required")
    if not outcome.can_edit:
        log_security("NOTE_EDIT_DENIED", user=user.id, note=note_id, outcome=outcome.value)
        raise HTTPException(status_code=403, detail="Access denied")

    update_data = {}
    if request.title is not None:
        title = sanitize_input(request.title)
        if not title:
            raise HTTPException(status_code=400, detail="Note title is required")
        _check_lengths(title, None)
        if title != note.title:
            update_data["renamed"] = True
        update_data["title"] = title
    if request.content is not None:
        content = sanitize_input(request.content)
        _check_lengths(None, content)
        update_data["content"] = content
    update_data["updated_at"] = datetime.utcnow()

    enc = get_encryption()
    notes = get_notes_collection()
    await notes.update_one({"id": note_id}, {"$set": enc.encrypt_note(update_data)})

    log_user_action(user.id, "NOTE_CONTENT_EDIT", note=note_id, owner=note.owner_id)
    return build_note_view(note.model_copy(update=update_data), user.id, outcome)


@router.delete("/{note_id}")
async def delete_note(note_id: str, user: User = Depends(require_auth)):
    """Удалить заметку"""
    await get_owned_note(note_id, user)

    notes = get_notes_collection()
    result = await notes.delete_one({"id": note_id, "owner_id": user.id})

    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Note not found")

    log_user_action(user.id, "NOTE_DELETE", note=note_id)
    return {"message": "Note deleted successfully"}


@router.post("/{note_id}/sharing", response_model=SharingStatus)
async def toggle_note_sharing(note_id: str, user: User = Depends(require_auth)):
    """Включить/выключить публичный доступ"""
    note = await get_owned_note(note_id, user)

    note = await toggle_sharing(note)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")

    log_user_action(user.id, "NOTE_SHARING_TOGGLE", note=note_id, public=note.is_public)
    return SharingStatus(
        is_public=note.is_public,
        share_link=share_link(note.public_access_token) if note.is_public else None
    )
