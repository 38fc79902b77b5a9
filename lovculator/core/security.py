"""
Identity context for follow-graph requests.

Login and sessions live in the main Lovculator app.  This service only
verifies the bearer token that app issues and turns it into an
``IdentityContext``.  Tokens are HS256 JWTs whose ``sub`` claim is the
numeric user id.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from lovculator.core.config import settings
from lovculator.services.exceptions import UnauthenticatedError


@dataclass(frozen=True)
class IdentityContext:
    """Who is calling.  ``user_id`` is None for anonymous callers."""
    user_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def require_user_id(self) -> int:
        if self.user_id is None:
            raise UnauthenticatedError()
        return self.user_id


ANONYMOUS = IdentityContext()


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[int]:
    """Return the user id carried by ``token``, or None if it is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None


def identity_from_token(token: Optional[str]) -> IdentityContext:
    if not token:
        return ANONYMOUS
    user_id = decode_access_token(token)
    if user_id is None:
        return ANONYMOUS
    return IdentityContext(user_id=user_id)
