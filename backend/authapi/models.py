import uuid
import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

class Base(DeclarativeBase):
    pass

class User(Base):
    __tablename__ = "users"
    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(sa.String, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(sa.String)
    # epoch seconds the current bearer token was issued at
    token_issued_at: Mapped[int] = mapped_column(sa.BigInteger)
    created_at: Mapped[str] = mapped_column(sa.DateTime(timezone=True), server_default=func.now())
