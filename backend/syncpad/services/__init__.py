# Business Logic Services
from .encryption import EncryptionService, init_encryption, get_encryption
from .auth import (
    create_access_token,
    create_reset_token,
    decode_reset_token,
    verify_password,
    hash_password,
    validate_email,
    get_current_user,
    require_auth,
    require_admin,
)
from .access import AccessOutcome, evaluate_access, build_note_view, ENCRYPTED_PLACEHOLDER
from .tokens import issue_share_token, issue_user_handle
from .sharing import enable_sharing, disable_sharing, toggle_sharing, share_link

__all__ = [
    # Encryption
    "EncryptionService",
    "init_encryption",
    "get_encryption",
    # Auth
    "create_access_token",
    "create_reset_token",
    "decode_reset_token",
    "verify_password",
    "hash_password",
    "validate_email",
    "get_current_user",
    "require_auth",
    "require_admin",
    # Access
    "AccessOutcome",
    "evaluate_access",
    "build_note_view",
    "ENCRYPTED_PLACEHOLDER",
    # Tokens
    "issue_share_token",
    "issue_user_handle",
    # Sharing
    "enable_sharing",
    "disable_sharing",
    "toggle_sharing",
    "share_link",
]
