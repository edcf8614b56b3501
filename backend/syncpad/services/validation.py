"""
Input sanitation and field limits
"""
import re
from typing import Optional

MAX_TITLE_LENGTH = 100
MAX_CONTENT_LENGTH = 10000
MIN_PASSCODE_LENGTH = 4
MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2
MIN_ANSWER_LENGTH = 3
MAX_MESSAGE_TITLE_LENGTH = 100
MAX_MESSAGE_CONTENT_LENGTH = 1000

_JS_PROTOCOL = re.compile(r'javascript:', re.IGNORECASE)
_EVENT_HANDLER = re.compile(r'on\w+=', re.IGNORECASE)


def sanitize_input(value: Optional[str]) -> Optional[str]:
    """Trim and strip markup that could be interpreted by a browser"""
    if value is None:
        return None
    cleaned = value.strip()
    cleaned = cleaned.replace('<', '').replace('>', '')
    cleaned = _JS_PROTOCOL.sub('', cleaned)
    return _EVENT_HANDLER.sub('', cleaned)
