from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from uuid import uuid4
from ..schemas import Credentials, UserResponse, user_to_json
from ..models import User
from ..auth.password import hash_password, verify_password, is_password_allowed
from ..auth.tokens import now_epoch, needs_rotation
from ..db import users as users_db
from ..deps import get_db, get_current_user
from ..errors import ValidationFailed
from ..logs import get_logger
from ..config import settings

router = APIRouter()
log = get_logger(__name__)

INVALID_CREDENTIALS = "username or password is invalid"

def _require_fields(body: Optional[Credentials]) -> tuple[str, str]:
    body = body or Credentials()
    if not body.username:
        raise ValidationFailed("username can't be blank")
    if not body.password:
        raise ValidationFailed("password can't be blank")
    return body.username, body.password

@router.post("/register", response_model=UserResponse)
async def register(body: Optional[Credentials] = None, db: AsyncSession = Depends(get_db)):
    username, password = _require_fields(body)
    if settings.enforce_password_strength and not is_password_allowed(password):
        log.info("register_rejected", username=username, reason="weak_password")
        raise ValidationFailed("password is not strong enough")
    if await users_db.read_by_username(db, username):
        log.info("register_rejected", username=username, reason="username_taken")
        raise ValidationFailed("username taken")
    user = User(
        id=uuid4(),
        username=username,
        password_hash=hash_password(password),
        token_issued_at=now_epoch(),
    )
    try:
        user = await users_db.insert(db, user)
    except IntegrityError:
        # lost a race with a concurrent register for the same name
        await db.rollback()
        log.info("register_rejected", username=username, reason="username_taken")
        raise ValidationFailed("username taken")
    log.info("user_registered", username=username, user_id=str(user.id))
    return UserResponse(user=user_to_json(user))

@router.post("/login", response_model=UserResponse)
async def login(body: Optional[Credentials] = None, db: AsyncSession = Depends(get_db)):
    username, password = _require_fields(body)
    user = await users_db.read_by_username(db, username)
    if not user or not verify_password(password, user.password_hash):
        log.info("login_failed", username=username)
        raise ValidationFailed(INVALID_CREDENTIALS)
    if needs_rotation(user.token_issued_at):
        user = await users_db.update(db, user, token_issued_at=now_epoch())
    log.info("user_login", username=username, user_id=str(user.id))
    return UserResponse(user=user_to_json(user))

@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    return UserResponse(user=user_to_json(user))
