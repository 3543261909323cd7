"""
FastAPI dependencies.
"""

from datetime import date
from typing import Generator, Optional

from fastapi import Header
from sqlalchemy.orm import Session

from capital.cache import Cache, get_redis_client
from capital.config import settings
from capital.database import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database sessions.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_cache() -> Cache:
    return Cache(get_redis_client())


def get_user_id(x_user_id: Optional[str] = Header(None, max_length=36)) -> str:
    """Owner of the request, as forwarded by the authenticating gateway."""
    return x_user_id or settings.default_user_id


def get_today() -> date:
    return date.today()
