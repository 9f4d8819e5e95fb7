import tempfile
import unittest
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker

from drawlots.state import AppState
from drawlots.storage import StateStore

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class MigrationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.url = f"sqlite:///{Path(self.tmpdir.name) / 'state.db'}"
        self.cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
        self.cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
        self.cfg.set_main_option("sqlalchemy.url", self.url)

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_upgrade_creates_a_usable_state_table(self):
        command.upgrade(self.cfg, "head")

        engine = create_engine(self.url, future=True)
        try:
            inspector = inspect(engine)
            self.assertIn("app_state_blobs", inspector.get_table_names())
            columns = {c["name"] for c in inspector.get_columns("app_state_blobs")}
            self.assertEqual(columns, {"id", "storage_key", "payload", "updated_at"})

            store = StateStore(sessionmaker(bind=engine, future=True))
            self.assertTrue(store.save(AppState(names=("A",), name_pool=(0,))))
            self.assertEqual(store.load().names, ("A",))
        finally:
            engine.dispose()

    def test_downgrade_drops_the_table(self):
        command.upgrade(self.cfg, "head")
        command.downgrade(self.cfg, "base")

        engine = create_engine(self.url, future=True)
        try:
            self.assertNotIn("app_state_blobs", inspect(engine).get_table_names())
        finally:
            engine.dispose()


if __name__ == "__main__":
    unittest.main()
