"""
Audit logging for user actions and security events
"""
import logging
from typing import Optional

audit_logger = logging.getLogger("syncpad.audit")
security_logger = logging.getLogger("syncpad.security")


def _format(details: dict) -> str:
    return " ".join(f"{key}={value}" for key, value in details.items() if value is not None)


def log_user_action(user_id: Optional[str], action: str, /, **details):
    audit_logger.info(f"{action} user={user_id} {_format(details)}".rstrip())


def log_security(event: str, **details):
    security_logger.warning(f"{event} {_format(details)}".rstrip())
