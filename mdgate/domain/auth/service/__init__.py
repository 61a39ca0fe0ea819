from mdgate.domain.auth.service.credential import CredentialBroker
from mdgate.domain.auth.service.session import SessionService, parse_session_token

__all__ = ["CredentialBroker", "SessionService", "parse_session_token"]
