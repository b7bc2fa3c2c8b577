import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from lootledger.config import get_settings

settings = get_settings()

# SQLite braucht check_same_thread=False für FastAPI
connect_args = {"check_same_thread": False} if "sqlite" in settings.database_url else {}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    """Dependency für FastAPI - gibt eine Datenbank-Session zurück."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_sqlite_directory() -> None:
    """Legt das Verzeichnis der SQLite-Datei an (z.B. ./data)."""
    database = engine.url.database
    if engine.url.get_backend_name() == "sqlite" and database and database != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(database)), exist_ok=True)
