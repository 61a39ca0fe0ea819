from typing import AsyncIterable

from dishka import provide
from pymongo import AsyncMongoClient

from mdgate.config import Config
from mdgate.domain.ingest.port.metadata_store import MetadataStore
from mdgate.infrastructure.metadata.store import MongoMetadataStore
from mdgate.util.di.base import Provider
from mdgate.util.di.scope import Scope


class MetadataProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_mongo_client(self, config: Config) -> AsyncIterable[AsyncMongoClient]:
        """Shared Mongo client (connection pooling). Connects lazily on first use."""
        client: AsyncMongoClient = AsyncMongoClient(config.metadata.uri)
        yield client
        await client.close()

    metadata_store = provide(MongoMetadataStore, scope=Scope.APP, provides=MetadataStore)
