from sqlalchemy import create_engine
from alembic import context
from authapi.models import Base
from authapi.config import settings

config = context.config

target_metadata = Base.metadata

def sync_url() -> str:
    return settings.database_url.replace("+asyncpg", "").replace("+aiosqlite", "")

def run_migrations_offline():
    context.configure(url=sync_url(), target_metadata=target_metadata, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    connectable = create_engine(sync_url())
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
