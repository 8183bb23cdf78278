from jose import jwt
from ..config import settings
from .tokens import token_expires_at

def create_access_token(sub: str, username: str, issued_at: int) -> str:
    # no random claims: the same user and issue time always sign to the same token
    payload = {
        "sub": sub,
        "username": username,
        "iat": issued_at,
        "exp": token_expires_at(issued_at),
    }
    return jwt.encode(payload, settings.app_jwt_secret, algorithm=settings.app_jwt_alg)

def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.app_jwt_secret, algorithms=[settings.app_jwt_alg])
