from mdgate.domain.auth.command.login import (
    LoginResult,
    PasswordLogin,
    PasswordLoginHandler,
    TicketLogin,
    TicketLoginHandler,
)

__all__ = [
    "LoginResult",
    "PasswordLogin",
    "PasswordLoginHandler",
    "TicketLogin",
    "TicketLoginHandler",
]
