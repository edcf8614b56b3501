# API Routes
from .auth import router as auth_router
from .password_reset import router as password_reset_router
from .profile import router as profile_router
from .notes import router as notes_router
from .shared import router as shared_router
from .messages import router as messages_router
from .spectator import router as spectator_router
from .admin import router as admin_router

__all__ = [
    "auth_router",
    "password_reset_router",
    "profile_router",
    "notes_router",
    "shared_router",
    "messages_router",
    "spectator_router",
    "admin_router",
]
