# wellness/core/tokens.py
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from wellness.core.config import settings

ROLE_ADMIN = "admin"
ROLE_PARTICIPANT = "participant"

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _exp(minutes: int = 15) -> datetime:
    return _now() + timedelta(minutes=minutes)

def create_access_token(*, sub: str, role: str = ROLE_PARTICIPANT, expires_minutes: Optional[int] = None) -> str:
    """Access token curto (minutos), assinado com SECRET_KEY.

    Issued by the auth layer; this service only verifies it.
    """
    expire_min = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload: Dict[str, Any] = {
        "type": "access",
        "sub": str(sub),
        "role": role,
        "jti": uuid.uuid4().hex,
        "iat": int(_now().timestamp()),
        "exp": int(_exp(expire_min).timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access(token: str) -> Optional[Dict[str, Any]]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get("type") != "access":
        return None
    if not payload.get("sub"):
        return None
    return payload
