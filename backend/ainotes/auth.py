from __future__ import annotations
import hmac, hashlib, logging, time
from typing import Optional
from fastapi import Header, HTTPException
from .config import DEFAULT_AUTH_SECRET, Settings, settings
from .models import User
from .storage.users import users

logger = logging.getLogger(__name__)

def check_auth_secret(s: Settings | None = None) -> bool:
    """Warns and returns False while tokens are signed with the built-in secret."""
    s = s or settings
    if not s.AUTH_SECRET or s.AUTH_SECRET == DEFAULT_AUTH_SECRET:
        logger.warning("AUTH_SECRET is not set; tokens are signed with the default secret and can be forged")
        return False
    return True

def _sign(body: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), body.encode("utf-8"), hashlib.sha256).hexdigest()

def issue_token(user_id: str, *, ttl_s: int | None = None, now: float | None = None) -> str:
    """Token format: <user_id>.<expiry epoch seconds>.<hex hmac-sha256>"""
    ttl = ttl_s if ttl_s is not None else settings.AUTH_TOKEN_TTL_S
    expires = int((now if now is not None else time.time()) + ttl)
    body = f"{user_id}.{expires}"
    return f"{body}.{_sign(body, settings.AUTH_SECRET)}"

def verify_token(token: str, *, now: float | None = None) -> Optional[str]:
    """Returns the user id, or None for a tampered, malformed or expired token."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    user_id, expires, sig = parts
    if not hmac.compare_digest(_sign(f"{user_id}.{expires}", settings.AUTH_SECRET), sig):
        return None
    try:
        if int(expires) < (now if now is not None else time.time()):
            return None
    except ValueError:
        return None
    return user_id

def current_user(authorization: Optional[str] = Header(default=None)) -> User:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="No token, authorization denied")
    user_id = verify_token(token.strip())
    user = users.get(user_id) if user_id else None
    if user is None:
        raise HTTPException(status_code=401, detail="Token is not valid")
    return user
