from datetime import datetime, timezone
from ..config import settings

def now_epoch() -> int:
    return int(datetime.now(timezone.utc).timestamp())

def token_expires_at(issued_at: int) -> int:
    return issued_at + settings.access_token_expire_minutes * 60

def needs_rotation(issued_at: int, now: int | None = None) -> bool:
    if now is None:
        now = now_epoch()
    remaining = token_expires_at(issued_at) - now
    return remaining < settings.access_token_rotate_minutes * 60
