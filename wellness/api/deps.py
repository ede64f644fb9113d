from fastapi import Depends, Header, HTTPException
from pydantic import ValidationError

from wellness.db.session import get_db  # noqa: F401  (re-export para os routers)
from wellness.core.tokens import decode_access
from wellness.schemas.token import CurrentUser, TokenPayload

# ----------------------------------------------------------------------
# Lê o Bearer do header Authorization (sem usar OAuth2PasswordBearer)
# ----------------------------------------------------------------------
def get_bearer_token(authorization: str = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header")
    return parts[1]

# ----------------------------------------------------------------------
# Usuário atual a partir do access token já emitido (sem consulta ao banco)
# ----------------------------------------------------------------------
def get_current_user(token: str = Depends(get_bearer_token)) -> CurrentUser:
    payload = decode_access(token)
    if payload is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        data = TokenPayload.model_validate(payload)
    except ValidationError:
        raise HTTPException(status_code=401, detail="Invalid token") from None
    return CurrentUser(id=data.sub, role=data.role)
