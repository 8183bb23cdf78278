from pydantic import BaseModel
from typing import Optional
from .models import User
from .auth.jwt import create_access_token

class Credentials(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class UserOut(BaseModel):
    id: str
    username: str
    token: str

class UserResponse(BaseModel):
    user: UserOut

def user_to_json(user: User) -> UserOut:
    return UserOut(
        id=str(user.id),
        username=user.username,
        token=create_access_token(str(user.id), user.username, user.token_issued_at),
    )
