from datetime import timedelta
from typing import Optional

from jose import jwt, JWTError

from main.config import settings
from app.libs.datetime_utils import utcnow


def create_access_token(sub: str, role: str = "USER") -> str:
    exp = utcnow() + timedelta(days=settings.JWT_EXPIRE_DAYS)
    payload = {"sub": str(sub), "role": role, "iat": utcnow(), "exp": exp}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the token payload, or None when the token is invalid or expired"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload


def token_from_request(request) -> Optional[str]:
    """Bearer token from the Authorization header, falling back to the token cookie"""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get("token")
