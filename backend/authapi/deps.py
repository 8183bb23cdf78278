import uuid
from fastapi import Depends, Header
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from .db.session import get_session
from .db import users as users_db
from .auth.jwt import decode_token
from .errors import AuthenticationFailed, credentials_required, credentials_bad_scheme, invalid_token
from .logs import get_logger
from .models import User

log = get_logger(__name__)

async def get_db(session: AsyncSession = Depends(get_session)) -> AsyncSession:
    return session

def bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise credentials_required()
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise credentials_bad_scheme()
    return parts[1]

async def get_current_user(authorization: str | None = Header(None), db: AsyncSession = Depends(get_db)) -> User:
    try:
        token = bearer_token(authorization)
        try:
            payload = decode_token(token)
        except ExpiredSignatureError:
            raise invalid_token("jwt expired")
        except JWTError:
            raise invalid_token()
        try:
            user_id = uuid.UUID(payload.get("sub") or "")
        except ValueError:
            raise invalid_token()
        user = await users_db.read_by_id(db, user_id)
        # a rotated token leaves older ones with a stale issue time
        if not user or payload.get("iat") != user.token_issued_at:
            raise invalid_token()
    except AuthenticationFailed as e:
        log.info("auth_rejected", code=e.code)
        raise
    return user
