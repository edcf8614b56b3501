"""
Note Access Evaluation

Decides what a requester may do with a note. The decision depends only on the
note snapshot, the requester id and the passcode they supplied; nothing is
read from the request context and nothing is written.
"""
from enum import Enum
from typing import Optional

from ..models import Note, NoteResponse, NoteView

ENCRYPTED_PLACEHOLDER = "[Encrypted - Passcode Required]"


class AccessOutcome(str, Enum):
    DENIED = "denied"
    PASSCODE_REQUIRED = "passcode_required"
    VIEW_ONLY = "view_only"
    VIEW_AND_EDIT = "view_and_edit"

    @property
    def can_view(self) -> bool:
        return self in (AccessOutcome.VIEW_ONLY, AccessOutcome.VIEW_AND_EDIT)

    @property
    def can_edit(self) -> bool:
        return self is AccessOutcome.VIEW_AND_EDIT


def is_owner(note: Note, requester_id: Optional[str]) -> bool:
    return requester_id is not None and requester_id == note.owner_id


def evaluate_access(note: Note, requester_id: Optional[str], passcode: Optional[str] = None) -> AccessOutcome:
    """Evaluate access for ``requester_id`` (None for anonymous requests).

    The owner always gets full access, encrypted or not. Everyone else needs
    the note to be public and, if it is encrypted, the exact passcode.
    """
    if is_owner(note, requester_id):
        return AccessOutcome.VIEW_AND_EDIT

    if not note.is_public:
        return AccessOutcome.DENIED

    if note.encrypted and (not passcode or passcode != note.passcode):
        return AccessOutcome.PASSCODE_REQUIRED

    if note.edit_permissions and not note.disable_edit:
        return AccessOutcome.VIEW_AND_EDIT
    return AccessOutcome.VIEW_ONLY


def build_note_view(note: Note, requester_id: Optional[str], outcome: AccessOutcome) -> NoteView:
    """Shape a non-denied outcome for the client.

    For PASSCODE_REQUIRED the content is swapped for a placeholder.
    """
    if outcome is AccessOutcome.DENIED:
        raise ValueError("Denied access has no view")

    requires_passcode = outcome is AccessOutcome.PASSCODE_REQUIRED
    content = ENCRYPTED_PLACEHOLDER if requires_passcode else None

    return NoteView(
        note=NoteResponse.from_note(note, content=content),
        is_owner=is_owner(note, requester_id),
        can_edit=outcome.can_edit,
        requires_passcode=requires_passcode,
    )
