# auth.py
"""
Session context for API requests.

Sign-in happens at the identity provider; the API only receives a signed
token carrying the user id and email. Each request turns that token into an
explicit SessionContext which is passed to whatever needs to know who is
acting. Signing out revokes the token until it would have expired anyway.
"""
import time
from dataclasses import dataclass
from typing import Dict, Optional
from uuid import UUID

from fastapi import Depends, Request
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

import config
from errors import Forbidden, Unauthorized

COOKIE_NAME = "marketplace_session"

serializer = URLSafeTimedSerializer(config.SESSION_SECRET, salt="marketplace-session")

# token -> time it was revoked
_revoked_tokens: Dict[str, float] = {}


@dataclass(frozen=True)
class SessionContext:
    user_id: UUID
    email: Optional[str] = None
    is_admin: bool = False
    token: Optional[str] = None


def is_admin_email(email: Optional[str]) -> bool:
    if not email:
        return False
    email = email.strip().lower()
    if email in config.ADMIN_EMAILS:
        return True
    if config.ADMIN_EMAIL_DOMAIN:
        return email.endswith("@" + config.ADMIN_EMAIL_DOMAIN)
    return False


def sign_session(user_id: UUID, email: Optional[str]) -> str:
    return serializer.dumps({"u": str(user_id), "e": email})


def verify_session(token: str, max_age_seconds: Optional[int] = None) -> Optional[dict]:
    if token in _revoked_tokens:
        return None
    try:
        return serializer.loads(token, max_age=max_age_seconds or config.SESSION_MAX_AGE_SECONDS)
    except (BadSignature, SignatureExpired):
        return None


def revoke_session(token: str, now: Optional[float] = None) -> None:
    now = time.time() if now is None else now
    cutoff = now - config.SESSION_MAX_AGE_SECONDS
    for stale in [t for t, revoked_at in _revoked_tokens.items() if revoked_at < cutoff]:
        del _revoked_tokens[stale]
    _revoked_tokens[token] = now


def session_from_token(token: Optional[str]) -> Optional[SessionContext]:
    if not token:
        return None
    payload = verify_session(token)
    if not payload:
        return None
    try:
        user_id = UUID(payload["u"])
    except (KeyError, TypeError, ValueError):
        return None
    email = payload.get("e")
    return SessionContext(user_id=user_id, email=email, is_admin=is_admin_email(email), token=token)


def _request_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get(COOKIE_NAME)


def get_optional_session(request: Request) -> Optional[SessionContext]:
    return session_from_token(_request_token(request))


def get_session(session: Optional[SessionContext] = Depends(get_optional_session)) -> SessionContext:
    if session is None:
        raise Unauthorized("You must be signed in")
    return session


def get_admin_session(session: SessionContext = Depends(get_session)) -> SessionContext:
    if not session.is_admin:
        raise Forbidden("You don't have permission to access this page")
    return session
