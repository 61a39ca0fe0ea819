"""Tests for SqlFileRegistry against SQLite catalogues."""

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from mdgate.config import DatabaseConfig
from mdgate.domain.shared.error import ConfigurationError, StorageUnavailableError
from mdgate.infrastructure.persistence.adapter.file_registry import SqlFileRegistry
from mdgate.infrastructure.persistence.adapter.resolver import LiteralPathResolver
from mdgate.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    create_tables,
)
from mdgate.infrastructure.persistence.tables import datasets_table, files_table


@pytest_asyncio.fixture
async def session() -> AsyncIterator[AsyncSession]:
    engine = create_db_engine(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    await create_tables(engine)
    async with create_session_factory(engine)() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def file_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    url = f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"
    engine = create_db_engine(DatabaseConfig(url=url))
    await create_tables(engine)
    yield engine
    await engine.dispose()


async def _count(session: AsyncSession, table) -> int:
    return (await session.execute(select(func.count()).select_from(table))).scalar_one()


class TestSqlFileRegistry:
    @pytest.mark.asyncio
    async def test_registers_dataset_and_files(self, session: AsyncSession):
        registry = SqlFileRegistry(session)

        did = await registry.register_files("e1", "p1", "t1", ["/data/f1", "/data/f2"])

        row = (
            await session.execute(
                select(datasets_table).where(datasets_table.c.dataset_id == int(did))
            )
        ).one()
        assert row.dataset == "/e1/p1/t1"
        assert (row.experiment, row.processing, row.tier) == ("e1", "p1", "t1")
        assert await _count(session, files_table) == 2

    @pytest.mark.asyncio
    async def test_same_dataset_reuses_did(self, session: AsyncSession):
        registry = SqlFileRegistry(session)

        first = await registry.register_files("e1", "p1", "t1", ["/data/f1"])
        second = await registry.register_files("e1", "p1", "t1", ["/data/f2"])

        assert first == second
        assert await _count(session, datasets_table) == 1
        assert await _count(session, files_table) == 2

    @pytest.mark.asyncio
    async def test_known_files_are_not_duplicated(self, session: AsyncSession):
        registry = SqlFileRegistry(session)

        await registry.register_files("e1", "p1", "t1", ["/data/f1"])
        await registry.register_files("e1", "p1", "t1", ["/data/f1", "/data/f1"])

        assert await _count(session, files_table) == 1

    @pytest.mark.asyncio
    async def test_other_dataset_gets_new_did(self, session: AsyncSession):
        registry = SqlFileRegistry(session)

        first = await registry.register_files("e1", "p1", "t1", ["/data/f1"])
        second = await registry.register_files("e2", "p1", "t1", ["/data/f2"])

        assert first != second

    @pytest.mark.asyncio
    async def test_database_error_becomes_storage_error(self):
        session = AsyncMock(spec=AsyncSession)
        session.bind = SimpleNamespace(dialect=SimpleNamespace(name="sqlite"))
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("locked"))
        registry = SqlFileRegistry(session)

        with pytest.raises(StorageUnavailableError) as exc_info:
            await registry.register_files("e1", "p1", "t1", ["/data/f1"])

        assert exc_info.value.code == "catalogue_unavailable"
        session.rollback.assert_awaited_once()


class TestConcurrentRegistration:
    """Each registration runs in its own session, as it does per HTTP request."""

    @staticmethod
    async def _register(engine: AsyncEngine, files: list[str]) -> str:
        async with create_session_factory(engine)() as session:
            return await SqlFileRegistry(session).register_files("e", "p", "t", files)

    @pytest.mark.asyncio
    async def test_new_dataset_gets_one_did(self, file_engine: AsyncEngine):
        dids = await asyncio.gather(*(self._register(file_engine, [f"/f{i}"]) for i in range(8)))

        assert len(set(dids)) == 1
        async with create_session_factory(file_engine)() as session:
            assert await _count(session, datasets_table) == 1
            assert await _count(session, files_table) == 8

    @pytest.mark.asyncio
    async def test_same_file_registered_once(self, file_engine: AsyncEngine):
        dids = await asyncio.gather(*(self._register(file_engine, ["/f"]) for _ in range(8)))

        assert len(set(dids)) == 1
        async with create_session_factory(file_engine)() as session:
            assert await _count(session, files_table) == 1


class TestCreateDbEngine:
    def test_unsupported_backend(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_db_engine(DatabaseConfig(url="mysql+aiomysql://u:p@localhost/catalog"))

        assert exc_info.value.code == "unsupported_database"


class TestLiteralPathResolver:
    def test_path_resolves_to_itself(self):
        assert LiteralPathResolver().resolve("/data/f1") == ["/data/f1"]

    def test_empty_path_has_no_files(self):
        assert LiteralPathResolver().resolve("") == []
