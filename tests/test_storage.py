"""Tests for the storage layer."""

import asyncio
import importlib.util
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

from dcmstd.pipeline import build
from dcmstd.storage import (
    CiodRepository,
    DataElementRepository,
    StandardRepository,
    close_db,
    create_engine_for,
    get_session,
    init_db,
    session_factory_for,
)

MIGRATIONS_DIR = Path(__file__).parent.parent / "src" / "dcmstd" / "storage" / "migrations" / "versions"


@pytest.fixture
def standard(part03_tree, part06_tree):
    """Model built from both fixture parts."""
    return build([part03_tree, part06_tree]).standard


@pytest.fixture
def database_url(tmp_path):
    """Async URL of a throwaway sqlite database."""
    return f"sqlite+aiosqlite:///{tmp_path / 'model.db'}"


async def save_and_load(standard, database_url, saves=1):
    """Save the model one or more times and read it back."""
    engine = create_engine_for(database_url)
    factory = session_factory_for(engine)
    try:
        await init_db(engine)
        counts = []
        for _ in range(saves):
            async with get_session(factory) as session:
                counts.append(await StandardRepository(session).save(standard))
        async with get_session(factory) as session:
            loaded = await StandardRepository(session).load()
        return counts, loaded
    finally:
        await close_db(engine)


class TestStandardRepository:
    """Tests for saving and restoring a whole model."""

    def test_round_trip(self, standard, database_url):
        """A saved model loads back unchanged."""
        counts, loaded = asyncio.run(save_and_load(standard, database_url))

        assert counts == [{"ciods": 1, "imds": 4, "data_elements": 6}]
        assert loaded.ciods == standard.ciods
        assert loaded.imds == standard.imds
        assert loaded.data_elements == standard.data_elements

    def test_second_save_adds_nothing(self, standard, database_url):
        """Saving the same model twice stores nothing new."""
        counts, loaded = asyncio.run(save_and_load(standard, database_url, saves=2))

        assert counts[1] == {"ciods": 0, "imds": 0, "data_elements": 0}
        assert loaded.summary() == standard.summary()

    def test_include_entries_survive(self, standard, database_url):
        """Include entries keep their kind through storage."""
        _, loaded = asyncio.run(save_and_load(standard, database_url))

        assert loaded.imd("table_C.7-1").include_ids() == ["table_10-11"]


class TestRepositories:
    """Tests for single kind repositories."""

    def test_counts_and_lookup(self, standard, database_url):
        """Single kind repositories create, count and look up rows."""
        async def run():
            engine = create_engine_for(database_url)
            try:
                await init_db(engine)
                async with get_session(session_factory_for(engine)) as session:
                    ciods = CiodRepository(session)
                    await ciods.create(standard.ciod("table_A.2-1"))
                    elements = DataElementRepository(session)
                    await elements.create_batch(standard.data_elements)

                    stored = await ciods.get_by_id("table_A.2-1")
                    missing = await ciods.get_by_id("table_A.9-9")
                    by_keyword = await elements.get_by_keyword("OverlayData")
                    return (
                        CiodRepository.to_model(stored),
                        missing,
                        await ciods.count_all(),
                        [DataElementRepository.to_model(e) for e in by_keyword],
                    )
            finally:
                await close_db(engine)

        ciod, missing, count, overlays = asyncio.run(run())

        assert ciod == standard.ciod("table_A.2-1")
        assert missing is None
        assert count == 1
        assert len(overlays) == 1
        assert str(overlays[0].tag) == "(60xx,3000)"


class TestInitialMigration:
    """Tests for the schema migration script."""

    @pytest.fixture
    def migration(self):
        """The initial schema revision module."""
        (path,) = MIGRATIONS_DIR.glob("*_001_initial_schema.py")
        spec = importlib.util.spec_from_file_location("initial_schema", path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    def test_upgrade_creates_model_tables(self, migration):
        """Upgrade creates the three model tables in order."""
        with patch.object(migration, "op", MagicMock()) as mock_op:
            migration.upgrade()

        created = [c.args[0] for c in mock_op.create_table.call_args_list]
        assert created == ["ciods", "imds", "data_elements"]

    def test_downgrade_drops_tables(self, migration):
        """Downgrade drops the tables in reverse order."""
        with patch.object(migration, "op", MagicMock()) as mock_op:
            migration.downgrade()

        dropped = [c.args[0] for c in mock_op.drop_table.call_args_list]
        assert dropped == ["data_elements", "imds", "ciods"]

    def test_upgrade_and_downgrade_on_sqlite(self, migration):
        """The revision applies to a database without JSONB."""
        engine = sa.create_engine("sqlite://")
        try:
            with engine.begin() as connection:
                operations = Operations(MigrationContext.configure(connection))
                with patch.object(migration, "op", operations):
                    migration.upgrade()

                inspector = sa.inspect(connection)
                assert set(inspector.get_table_names()) == {"ciods", "imds", "data_elements"}
                columns = {c["name"] for c in inspector.get_columns("imds")}
                assert {"parent_ids", "items"} <= columns

                connection.execute(
                    sa.text("INSERT INTO ciods (id, caption, parent_ids, items) VALUES ('a', 'c', '[]', '[]')")
                )

                with patch.object(migration, "op", operations):
                    migration.downgrade()

                assert sa.inspect(connection).get_table_names() == []
        finally:
            engine.dispose()
