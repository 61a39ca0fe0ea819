"""Value objects for the auth domain."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel


@dataclass(frozen=True)
class SessionToken:
    """A parsed ``auth-session`` cookie value: ``<username>-<suffix>``."""

    username: str
    suffix: str

    def __str__(self) -> str:
        return f"{self.username}-{self.suffix}"


@dataclass(frozen=True)
class Credentials:
    """Verified principal material returned by the ticket service.

    ``handle`` carries the protocol library's own ticket object and is never
    inspected outside the adapter that produced it.
    """

    username: str
    realm: str
    handle: Any = field(default=None, repr=False, compare=False)

    @property
    def principal(self) -> str:
        return f"{self.username}@{self.realm}" if self.realm else self.username


@dataclass(frozen=True)
class CredentialResult:
    """Outcome of a login handshake.

    A handshake can complete without error yet yield no credentials; callers
    must check ``empty`` before using ``credentials``.
    """

    credentials: Credentials | None = None

    @classmethod
    def of(cls, credentials: Credentials) -> "CredentialResult":
        return cls(credentials=credentials)

    @classmethod
    def none(cls) -> "CredentialResult":
        return cls(credentials=None)

    @property
    def empty(self) -> bool:
        return self.credentials is None


@dataclass(frozen=True)
class ClientOptions:
    """Options for password-based protocol clients."""

    disable_pa_fx_fast: bool = True


class RealmConfig(BaseModel):
    """Connection and policy settings of the ticket service (krb5.conf)."""

    default_realm: str | None = None
    kdcs: dict[str, list[str]] = {}  # realm -> ["host[:port]", ...]
    permitted_enctypes: list[str] = []

    def resolve_realm(self, realm: str | None) -> str:
        """Return ``realm`` or the configured default realm."""
        resolved = realm or self.default_realm
        if not resolved:
            raise ValueError("No realm given and no default_realm configured")
        return resolved

    def kdc_for(self, realm: str) -> str:
        """Return the first KDC address configured for ``realm``."""
        servers = self.kdcs.get(realm) or self.kdcs.get(realm.upper())
        if not servers:
            raise ValueError(f"No KDC configured for realm {realm}")
        return servers[0]
