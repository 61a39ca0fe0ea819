"""Principal: the authenticated caller of a request."""

from dataclasses import dataclass
from enum import StrEnum


class AuthMethod(StrEnum):
    SESSION = "session"
    PASSWORD = "password"
    TICKET = "ticket"


@dataclass(frozen=True)
class Principal:
    """The authenticated identity of the current requester.

    Resolved per-request from the session cookie or a login. Immutable after creation.
    """

    username: str
    method: AuthMethod
