from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .app_state import StoredAppState  # noqa: F401

__all__ = [
    "Base",
    "StoredAppState",
]
