"""
Request gate: classifies every request before routing, authenticates API
calls, and redirects page requests that need a session.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from app.config import settings
from app.core.edge_auth import parse_subject_id
from app.core.security import get_request_token

logger = logging.getLogger(__name__)

PUBLIC_PATHS = ("/login", "/signup", "/health", "/docs", "/redoc", "/openapi.json")
AUTH_PAGE_PATHS = ("/login", "/signup")
API_PREFIX = "/api/"
AUTH_API_PREFIX = f"{settings.API_V1_STR}/auth/"

FORWARD = "forward"
UNAUTHORIZED = "unauthorized"
REDIRECT = "redirect"

@dataclass(frozen=True)
class GateDecision:
    action: str
    user_id: Optional[str] = None
    location: Optional[str] = None

def safe_return_path(target: Optional[str]) -> str:
    """Same-origin path to return to after login, or "/" for anything else"""
    if not target or not target.startswith("/") or target.startswith("//"):
        return "/"
    # browsers drop tabs and newlines and read a backslash as a slash
    if "\\" in target or any(c.isspace() or not c.isprintable() for c in target):
        return "/"
    return target

def _matches(path: str, prefixes) -> bool:
    return any(path == p or path.startswith(f"{p}/") for p in prefixes)

def decide(path: str, token: Optional[str], secret: Optional[str]) -> GateDecision:
    """Pure routing decision for one request path and optional token"""
    if path.startswith(API_PREFIX):
        if path.startswith(AUTH_API_PREFIX):
            return GateDecision(FORWARD)

        user_id = parse_subject_id(token, secret)
        if user_id is None:
            return GateDecision(UNAUTHORIZED)
        return GateDecision(FORWARD, user_id=user_id)

    user_id = parse_subject_id(token, secret)

    if _matches(path, AUTH_PAGE_PATHS):
        if user_id is not None:
            return GateDecision(REDIRECT, location="/")
        return GateDecision(FORWARD)

    if user_id is None and not _matches(path, PUBLIC_PATHS):
        return GateDecision(REDIRECT, location=f"/login?{urlencode({'from': safe_return_path(path)})}")

    return GateDecision(FORWARD, user_id=user_id)

async def request_gate(request: Request, call_next):
    """HTTP middleware wrapping decide()"""
    # Identity only ever comes from this gate
    request.state.user_id = None

    if request.method == "OPTIONS":
        return await call_next(request)

    path = request.url.path
    decision = decide(path, get_request_token(request), settings.SECRET_KEY)

    if decision.action == UNAUTHORIZED:
        logger.info(f"Rejected unauthenticated API request to {path}")
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Unauthorized"})

    if decision.action == REDIRECT:
        return RedirectResponse(decision.location, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    request.state.user_id = decision.user_id
    return await call_next(request)
