import jwt
from datetime import datetime, timezone, timedelta
from typing import Optional

from multistore.core.config import settings

REGISTRATION_SCOPE = "register"
DOWNLOAD_SCOPE = "download"

def create_token(user_id: str, role: str, impersonator_id: Optional[str] = None) -> str:
    payload = {
        "user_id": user_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.TOKEN_EXPIRE_HOURS),
    }
    if impersonator_id:
        payload["impersonator_id"] = impersonator_id
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

def create_scoped_token(scope: str, subject: str, seconds: int) -> str:
    """Short-lived token bound to a single purpose (registration, file download)."""
    payload = {
        "scope": scope,
        "sub": subject,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=seconds),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])

def decode_scoped_token(token: str, scope: str) -> Optional[str]:
    """Return the token subject, or None when the token is invalid, expired or for another scope."""
    try:
        payload = decode_token(token)
    except jwt.InvalidTokenError:
        return None
    if payload.get("scope") != scope:
        return None
    return payload.get("sub")
