import sys
from pathlib import Path

from sqlmodel import SQLModel, create_engine, Session

from src.server.settings.config import settings

connect_args = {}
if settings.is_sqlite:
    connect_args = {"check_same_thread": False}

# Supabase is reached through its Postgres connection string in DATABASE_URL
engine = create_engine(settings.database_url, echo=settings.debug, connect_args=connect_args)


def init_db() -> None:
    if settings.is_sqlite:
        Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
    print(f"[db] Using database at: {settings.database_url}", file=sys.stderr)

    # Make sure every table class is registered (once, via src.server.models)
    from src.server.models import __all_models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
