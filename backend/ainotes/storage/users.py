from __future__ import annotations
import hashlib, hmac, secrets, uuid
from datetime import datetime, timezone
from typing import Dict, Optional
from ..models import User

_ITERATIONS = 200_000

def hash_password(password: str, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), _ITERATIONS)
    return f"{salt}${digest.hex()}"

def verify_password(password: str, stored: str) -> bool:
    salt, _, _ = stored.partition("$")
    return hmac.compare_digest(hash_password(password, salt), stored)

class UserStore:
    def __init__(self) -> None:
        self._users: Dict[str, User] = {}
        self._by_email: Dict[str, str] = {}

    def create(self, *, name: str, email: str, password: str) -> Optional[User]:
        """Returns None when the email is already registered."""
        key = email.strip().lower()
        if key in self._by_email:
            return None
        user = User(
            id=uuid.uuid4().hex,
            name=name,
            email=key,
            password_hash=hash_password(password),
            created_at=datetime.now(timezone.utc),
        )
        self._users[user.id] = user
        self._by_email[key] = user.id
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user_id = self._by_email.get(email.strip().lower())
        if user_id is None:
            return None
        user = self._users[user_id]
        return user if verify_password(password, user.password_hash) else None

    def get(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

users = UserStore()
