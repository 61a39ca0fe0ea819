"""Login commands for password and uploaded-ticket authentication."""

import logging
from typing import ClassVar

from mdgate.domain.auth.model.principal import AuthMethod, Principal
from mdgate.domain.auth.service.credential import CredentialBroker
from mdgate.domain.auth.service.session import SessionService
from mdgate.domain.shared.command import Command, CommandHandler, Result

logger = logging.getLogger(__name__)


class PasswordLogin(Command):
    """Command to login with a username and password."""

    __public__: ClassVar[bool] = True

    name: str
    password: str


class TicketLogin(Command):
    """Command to login with ticket cache bytes posted by a client."""

    __public__: ClassVar[bool] = True

    name: str
    ticket: bytes


class LoginResult(Result):
    """Result containing the authenticated principal."""

    principal: Principal
    realm: str
    session_token: str | None = None  # Only issued for password logins


class PasswordLoginHandler(CommandHandler[PasswordLogin, LoginResult]):
    """Handler for PasswordLogin command. Issues a session cookie value."""

    credential_broker: CredentialBroker
    session_service: SessionService

    async def run(self, cmd: PasswordLogin) -> LoginResult:
        credentials = await self.credential_broker.from_password(cmd.name, cmd.password)
        session_token = self.session_service.issue(cmd.name)

        logger.info("User logged in: user=%s, principal=%s", cmd.name, credentials.principal)

        return LoginResult(
            principal=Principal(username=cmd.name, method=AuthMethod.PASSWORD),
            realm=credentials.realm,
            session_token=session_token,
        )


class TicketLoginHandler(CommandHandler[TicketLogin, LoginResult]):
    """Handler for TicketLogin command."""

    credential_broker: CredentialBroker

    async def run(self, cmd: TicketLogin) -> LoginResult:
        credentials = await self.credential_broker.from_uploaded_ticket(cmd.name, cmd.ticket)

        logger.info(
            "Ticket accepted: name=%s, principal=%s", cmd.name, credentials.principal
        )

        return LoginResult(
            principal=Principal(username=credentials.username, method=AuthMethod.TICKET),
            realm=credentials.realm,
        )
