# wellness/schemas/token.py
from pydantic import BaseModel
from wellness.core.tokens import ROLE_PARTICIPANT

class TokenPayload(BaseModel):
    sub: str  # user id emitido pelo serviço de autenticação
    role: str = ROLE_PARTICIPANT
    exp: int

class CurrentUser(BaseModel):
    id: str
    role: str = ROLE_PARTICIPANT
