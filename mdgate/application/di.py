from dishka import AsyncContainer, from_context, make_async_container

from mdgate.config import Config
from mdgate.domain.auth.util.di import AuthProvider
from mdgate.domain.ingest.util.di import IngestProvider
from mdgate.infrastructure.kerberos import KerberosProvider
from mdgate.infrastructure.metadata import MetadataProvider
from mdgate.infrastructure.persistence import PersistenceProvider
from mdgate.util.di.base import Provider
from mdgate.util.di.scope import Scope


class ConfigProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)


def create_container(config: Config | None = None) -> AsyncContainer:
    config = config or Config()

    return make_async_container(
        ConfigProvider(),
        PersistenceProvider(),
        MetadataProvider(),
        KerberosProvider(),
        AuthProvider(),
        IngestProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
