"""
Database Engine & Session Management
SQLAlchemy setup with dependency injection for FastAPI.
"""
import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from formpay.config import get_settings

settings = get_settings()

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")


def ensure_sqlite_dir(url: str) -> None:
    """Create the parent directory of a file-backed SQLite URL, if it has one."""
    if not url.startswith("sqlite") or ":memory:" in url:
        return
    db_dir = os.path.dirname(url.replace("sqlite:///", ""))
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)


ensure_sqlite_dir(settings.DATABASE_URL)

engine = create_engine(
    settings.DATABASE_URL,
    # Required for SQLite
    connect_args={"check_same_thread": False, "timeout": settings.DB_TIMEOUT_SECONDS} if _is_sqlite else {},
    pool_pre_ping=not _is_sqlite,
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a database session, auto-closes on finish."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables. Called once at application startup."""
    from formpay.models import payment as _payment_model        # noqa: F401
    from formpay.models import brochure as _brochure_model      # noqa: F401
    from formpay.models import contact as _contact_model        # noqa: F401
    from formpay.models import submission as _submission_model  # noqa: F401

    Base.metadata.create_all(bind=engine)
