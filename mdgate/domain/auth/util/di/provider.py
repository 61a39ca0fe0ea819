"""DI provider for auth domain."""

from dishka import provide

from mdgate.config import Config
from mdgate.domain.auth.command.login import PasswordLoginHandler, TicketLoginHandler
from mdgate.domain.auth.port.ticket_protocol import TicketProtocol
from mdgate.domain.auth.service.credential import CredentialBroker
from mdgate.domain.auth.service.session import SessionService
from mdgate.util.di.base import Provider
from mdgate.util.di.scope import Scope


class AuthProvider(Provider):
    """DI provider for auth domain services and handlers."""

    # Command Handlers
    password_login_handler = provide(PasswordLoginHandler, scope=Scope.UOW)
    ticket_login_handler = provide(TicketLoginHandler, scope=Scope.UOW)

    @provide(scope=Scope.APP)
    def get_session_service(self, config: Config) -> SessionService:
        """Provide SessionService."""
        return SessionService(_config=config.auth.session)

    @provide(scope=Scope.APP)
    def get_credential_broker(self, config: Config, protocol: TicketProtocol) -> CredentialBroker:
        """Provide CredentialBroker."""
        return CredentialBroker(_protocol=protocol, _config=config.auth)
