import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .metadata import metadata_obj  # noqa: F401
from .utils import resolve_sqlite_url

logger = logging.getLogger(__name__)

load_dotenv()
# Repo root; relative SQLite paths in DB_URL are resolved against it.
ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_SQLITE_URL = resolve_sqlite_url(
    os.getenv("DB_URL", "sqlite:///./drawlots.db"), ROOT_DIR
)


def is_memory_sqlite(url: str) -> bool:
    """``True`` for SQLite URLs that point at a private in-memory database."""
    if not url.startswith("sqlite"):
        return False
    _, _, path = url.partition(":///")
    return path in ("", ":memory:")


def make_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """Create the engine for the state store.

    In-memory SQLite shares one connection across the engine so the schema
    created on one session is visible to the next.
    """
    url = database_url or DEFAULT_SQLITE_URL
    kwargs = {}
    if is_memory_sqlite(url):
        kwargs = {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    logger.debug(f"Creating engine for {url}")
    return create_engine(url, echo=echo, future=True, **kwargs)


def get_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,  # rows stay readable after the save transaction
        future=True,
    )
