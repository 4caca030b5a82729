"""
Database configuration and connection management
"""
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from food_ordering.core.config import settings

logger = logging.getLogger(__name__)

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # Sessions are handed across FastAPI's worker threads
    connect_args["check_same_thread"] = False

# SQLAlchemy setup
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.SQL_ECHO,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def generate_id() -> str:
    """Opaque identifier for new rows"""
    return uuid.uuid4().hex

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def get_db() -> Iterator[Session]:
    """Get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """Commit everything written inside the block, or nothing"""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise

def check_connection():
    """Fail fast if the database cannot be reached"""
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))

def create_tables():
    """Create all database tables"""
    # Models must be imported so they register on Base.metadata
    from food_ordering import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
