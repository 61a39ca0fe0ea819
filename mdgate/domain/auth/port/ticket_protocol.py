"""Ticket protocol port for the auth domain."""

from abc import abstractmethod
from typing import Any, Protocol

from mdgate.domain.auth.model.value import ClientOptions, CredentialResult, RealmConfig
from mdgate.domain.shared.port import Port


class TicketClient(Protocol):
    """A protocol client bound to either a ticket cache or a password."""

    @abstractmethod
    async def login(self) -> CredentialResult:
        """Perform the login handshake.

        Returns:
            CredentialResult, possibly empty.

        Raises:
            Exception: Any protocol or network failure.
        """
        ...


class TicketProtocol(Port, Protocol):
    """Port for the external ticket-based credential protocol (Kerberos).

    Implementations are adapters in infrastructure/ (e.g., MiniKerberosProtocol).
    Errors raised by implementations are library specific; the CredentialBroker
    translates them into the credential error taxonomy.
    """

    @abstractmethod
    def load_config(self, path: str) -> RealmConfig:
        """Load realm configuration from ``path``."""
        ...

    @abstractmethod
    def load_ccache(self, path: str) -> Any:
        """Load a ticket cache from ``path``."""
        ...

    @abstractmethod
    def client_from_ccache(self, ccache: Any, config: RealmConfig) -> TicketClient:
        """Build a client that authenticates with a loaded ticket cache."""
        ...

    @abstractmethod
    def client_with_password(
        self,
        username: str,
        realm: str,
        password: str,
        config: RealmConfig,
        options: ClientOptions,
    ) -> TicketClient:
        """Build a client that authenticates with a username and password."""
        ...
