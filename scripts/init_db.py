from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from drawlots.db.engine import make_engine  # noqa: E402


def alembic_config(database_url: Optional[str] = None) -> Config:
    """Alembic configuration for the state store, optionally pinned to a URL."""
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    if database_url:
        cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return cfg


def upgrade_db(target_revision: str = "head", database_url: Optional[str] = None) -> None:
    """Apply Alembic migrations up to the requested revision."""
    command.upgrade(alembic_config(database_url), target_revision)


def print_tables(database_url: Optional[str] = None) -> None:
    """Print the tables present in the state store."""
    engine = make_engine(database_url)
    try:
        names = sorted(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    print("Current tables:", ", ".join(names))


def main() -> None:
    """Migrate the state store to head and report the resulting schema."""
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    upgrade_db()
    print_tables()


if __name__ == "__main__":
    main()
