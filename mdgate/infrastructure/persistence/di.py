from typing import AsyncIterable

from dishka import provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from mdgate.config import Config
from mdgate.domain.ingest.port.file_registry import FileRegistry
from mdgate.domain.ingest.port.file_resolver import FileResolver
from mdgate.infrastructure.persistence.adapter.file_registry import SqlFileRegistry
from mdgate.infrastructure.persistence.adapter.resolver import LiteralPathResolver
from mdgate.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from mdgate.util.di.base import Provider
from mdgate.util.di.scope import Scope


class PersistenceProvider(Provider):
    # APP-scoped factories
    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config) -> AsyncIterable[AsyncEngine]:
        engine = create_db_engine(config.database)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # UOW-scoped session (one per unit of work)
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session

    @provide(scope=Scope.APP)
    def get_file_resolver(self) -> FileResolver:
        return LiteralPathResolver()

    file_registry = provide(SqlFileRegistry, scope=Scope.UOW, provides=FileRegistry)
