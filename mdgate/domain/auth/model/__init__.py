from mdgate.domain.auth.model.principal import AuthMethod, Principal
from mdgate.domain.auth.model.value import (
    ClientOptions,
    CredentialResult,
    Credentials,
    RealmConfig,
    SessionToken,
)

__all__ = [
    "AuthMethod",
    "ClientOptions",
    "CredentialResult",
    "Credentials",
    "Principal",
    "RealmConfig",
    "SessionToken",
]
