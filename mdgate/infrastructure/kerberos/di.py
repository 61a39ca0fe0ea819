"""DI provider for the Kerberos adapter."""

from dishka import provide

from mdgate.domain.auth.port.ticket_protocol import TicketProtocol
from mdgate.infrastructure.kerberos.client import MiniKerberosProtocol
from mdgate.util.di.base import Provider
from mdgate.util.di.scope import Scope


class KerberosProvider(Provider):
    @provide(scope=Scope.APP)
    def get_ticket_protocol(self) -> TicketProtocol:
        return MiniKerberosProtocol()
