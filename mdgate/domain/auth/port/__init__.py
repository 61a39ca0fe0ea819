from mdgate.domain.auth.port.ticket_protocol import TicketClient, TicketProtocol

__all__ = ["TicketClient", "TicketProtocol"]
