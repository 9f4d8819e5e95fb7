"""Best-effort persistence of :class:`~drawlots.state.AppState`."""

from __future__ import annotations

import logging
import os
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .db.engine import get_sessionmaker, make_engine
from .models import Base, StoredAppState
from .state import AppState

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "drawLotsGeneratorState"


def default_storage_key() -> str:
    """Storage key from ``DRAWLOTS_STORAGE_KEY``, or the built-in default."""
    return os.getenv("DRAWLOTS_STORAGE_KEY") or DEFAULT_STORAGE_KEY


class StateStore:
    """Loads and saves the application state blob under a fixed key.

    Neither direction ever raises: a missing, unreadable or corrupt blob loads
    as ``None`` and a failed save is logged and reported as ``False``.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        storage_key: Optional[str] = None,
    ) -> None:
        """Create a store bound to a SQLAlchemy session factory.

        Parameters
        ----------
        session_factory : sessionmaker
            Factory producing sessions for the state database.
        storage_key : Optional[str], default: None
            Key of the blob. Defaults to :func:`default_storage_key`.
        """

        self._Session = session_factory
        self.storage_key = storage_key or default_storage_key()

    @classmethod
    def from_url(
        cls,
        database_url: Optional[str] = None,
        *,
        create_schema: bool = False,
        storage_key: Optional[str] = None,
    ) -> "StateStore":
        """Build a store for ``database_url`` (``DB_URL`` when omitted).

        ``create_schema`` creates missing tables directly, which is handy for
        SQLite files and tests; deployed databases are migrated with Alembic
        (``scripts/init_db.py``).
        """

        engine = make_engine(database_url)
        if create_schema:
            Base.metadata.create_all(engine)
        return cls(get_sessionmaker(engine), storage_key=storage_key)

    def load(self, *, base: Optional[AppState] = None) -> Optional[AppState]:
        """Return the stored state merged over ``base``, or ``None``.

        Parameters
        ----------
        base : Optional[AppState], default: None
            State whose values are kept for keys missing from the blob.
            Defaults to :class:`AppState` defaults.
        """

        try:
            with self._Session() as session:
                row = StoredAppState.get_by_key(session, self.storage_key)
                payload = row.payload if row is not None else None
        except SQLAlchemyError as exc:
            logger.error(f"Failed to load state '{self.storage_key}': {exc}")
            return None

        if payload is None:
            logger.debug(f"No stored state under '{self.storage_key}'")
            return None

        try:
            return AppState.from_json_str(payload, base=base)
        except (RecursionError, ValueError) as exc:
            logger.warning(
                f"Ignoring corrupt state blob under '{self.storage_key}': {exc}"
            )
            return None

    def save(self, state: AppState) -> bool:
        """Upsert ``state``; returns ``False`` (after logging) on failure."""

        try:
            payload = state.to_json_str()
            with self._Session.begin() as session:
                row = StoredAppState.get_by_key(session, self.storage_key)
                if row is None:
                    session.add(
                        StoredAppState(storage_key=self.storage_key, payload=payload)
                    )
                else:
                    row.payload = payload
        except (SQLAlchemyError, TypeError, ValueError) as exc:
            logger.error(f"Failed to save state '{self.storage_key}': {exc}")
            return False
        logger.debug(f"Saved state '{self.storage_key}' (version {state.version})")
        return True

    def clear(self) -> bool:
        """Delete the stored blob; returns ``False`` (after logging) on failure."""

        try:
            with self._Session.begin() as session:
                row = StoredAppState.get_by_key(session, self.storage_key)
                if row is not None:
                    session.delete(row)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to clear state '{self.storage_key}': {exc}")
            return False
        return True


__all__ = ["DEFAULT_STORAGE_KEY", "StateStore", "default_storage_key"]
