import re
from passlib.hash import argon2

def hash_password(password: str) -> str:
    return argon2.hash(password)

def verify_password(password: str, hashed: str) -> bool:
    return argon2.verify(password, hashed)

def is_password_allowed(password: str) -> bool:
    return (
        len(password) > 6
        and re.search(r"\W", password) is not None
        and re.search(r"\d", password) is not None
        and re.search(r"[A-Z]", password) is not None
        and re.search(r"[a-z]", password) is not None
    )
