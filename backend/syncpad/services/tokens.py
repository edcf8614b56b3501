"""
Unique identifier generation

Share tokens and public user handles are both produced by drawing random
candidates and checking them against what is already stored. The loop is
bounded; once the attempts run out a fallback with far more entropy is used
so generation always terminates.
"""
import random
import secrets
import string
import time
import uuid
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

ExistsCheck = Callable[[str], Awaitable[bool]]

SHARE_TOKEN_PREFIX = "share-"
DEFAULT_MAX_ATTEMPTS = 10

_BASE36 = string.digits + string.ascii_lowercase


async def generate_unique(
    candidate: Callable[[], str],
    exists: ExistsCheck,
    fallback: Callable[[], str],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> str:
    """Return the first candidate for which ``exists`` is false.

    After ``max_attempts`` collisions the value of ``fallback()`` is returned
    without being checked.
    """
    for attempt in range(max_attempts):
        value = candidate()
        if not await exists(value):
            return value
        logger.debug(f"Candidate collision on attempt {attempt + 1}/{max_attempts}")

    logger.warning(f"No unique candidate after {max_attempts} attempts, using fallback")
    return fallback()


def share_token_candidate() -> str:
    """``share-<epoch millis>-<9 base36 chars>``"""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{SHARE_TOKEN_PREFIX}{int(time.time() * 1000)}-{suffix}"


def share_token_fallback() -> str:
    return f"{SHARE_TOKEN_PREFIX}{uuid.uuid4().hex}"


async def issue_share_token(exists: ExistsCheck, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> str:
    """Issue a public share token not held by any note at the time of the check"""
    return await generate_unique(
        share_token_candidate,
        exists,
        share_token_fallback,
        max_attempts=max_attempts,
    )


def _handle_base(name: str) -> str:
    return "".join(name.split())


async def issue_user_handle(
    name: str,
    exists: ExistsCheck,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
) -> str:
    """Public user handle: the name without whitespace plus five random digits"""
    rng = rng or random.Random()
    base = _handle_base(name)

    return await generate_unique(
        lambda: f"{base}{rng.randint(10000, 99999)}",
        exists,
        lambda: f"{base}{int(time.time() * 1000)}",
        max_attempts=max_attempts,
    )
