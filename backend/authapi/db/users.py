import uuid
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ..models import User

async def insert(db: AsyncSession, user: User) -> User:
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user

async def read_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()

async def read_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

async def update(db: AsyncSession, user: User, **values) -> User:
    for key, value in values.items():
        setattr(user, key, value)
    await db.commit()
    await db.refresh(user)
    return user
