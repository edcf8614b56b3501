"""
Client detection: decide whether a request gets the React bundle or the
server-rendered fallback
"""
import re
import logging

from fastapi import Request

logger = logging.getLogger(__name__)

FRONTEND_REACT = "react"
FRONTEND_FALLBACK = "fallback"

BOT_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"bot", r"crawler", r"spider", r"crawling",
        r"facebookexternalhit", r"twitterbot", r"linkedinbot",
        r"whatsapp", r"telegram", r"slackbot", r"discordbot",
        r"googlebot", r"bingbot", r"yandexbot", r"baiduspider",
    )
]

NON_BROWSER_AGENTS = ("okhttp", "alamofire", "curl", "wget")


def is_bot(user_agent: str) -> bool:
    return any(pattern.search(user_agent) for pattern in BOT_PATTERNS)


def is_api_request(accept: str, path: str) -> bool:
    return "application/json" in accept or "application/xml" in accept or path.startswith("/api/")


def supports_react(user_agent: str, accept: str, path: str) -> bool:
    """Only regular HTML-accepting browsers get the React bundle"""
    return (
        not is_bot(user_agent)
        and not is_api_request(accept, path)
        and not any(agent in user_agent for agent in NON_BROWSER_AGENTS)
        and "text/html" in accept
        and "Mozilla" in user_agent
    )


def detect_frontend(request: Request) -> str:
    user_agent = request.headers.get("user-agent", "")
    accept = request.headers.get("accept", "")
    react = supports_react(user_agent, accept, request.url.path)
    logger.debug(f"Client detection - UserAgent: {user_agent[:100]}, SupportsReact: {react}")
    return FRONTEND_REACT if react else FRONTEND_FALLBACK
