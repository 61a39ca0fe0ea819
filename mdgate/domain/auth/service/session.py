"""Session service for ``auth-session`` cookie parsing and issuance."""

import hashlib
import hmac
import logging
import secrets
import time
from collections.abc import Mapping

from mdgate.config import SessionConfig
from mdgate.domain.auth.model.principal import AuthMethod, Principal
from mdgate.domain.auth.model.value import SessionToken
from mdgate.domain.shared.error import (
    ExpiredSessionError,
    MalformedSessionError,
    MissingSessionError,
    ValidationError,
)
from mdgate.domain.shared.service import Service

logger = logging.getLogger(__name__)

SEPARATOR = "-"
SIGNATURE_SEPARATOR = "."


def parse_session_token(value: str) -> SessionToken:
    """Split a cookie value into username and suffix.

    The value must consist of exactly two non-empty, dash-separated parts.

    Raises:
        MalformedSessionError: For any other shape.
    """
    parts = value.split(SEPARATOR)
    if len(parts) != 2 or not all(parts):
        raise MalformedSessionError("Unable to decrypt auth-session", code="malformed_session")
    return SessionToken(username=parts[0], suffix=parts[1])


class SessionService(Service):
    """Extracts and issues caller identities carried in the session cookie.

    - username: Parse (and, with a secret, verify) the session cookie
    - authenticate: Gate for pages that only need a plausible session
    - issue: Build a cookie value for a freshly logged-in user

    With ``secret`` configured the suffix is ``<issued>.<signature>``: the
    hex issue time and a hex HMAC-SHA256 over username and issue time.
    Such tokens are rejected once older than ``max_age``. Without a secret
    the suffix is random and cookies are only parsed.
    """

    _config: SessionConfig

    @property
    def cookie_name(self) -> str:
        return self._config.cookie_name

    @property
    def max_age(self) -> int:
        return self._config.max_age

    @property
    def signed(self) -> bool:
        return bool(self._config.secret)

    def username(self, cookies: Mapping[str, str]) -> str:
        """Return the username carried by the session cookie.

        Raises:
            MissingSessionError: If the cookie is absent
            MalformedSessionError: If the cookie cannot be parsed or verified
            ExpiredSessionError: If a signed cookie is older than ``max_age``
        """
        value = cookies.get(self._config.cookie_name)
        if value is None:
            raise MissingSessionError(
                f"No {self._config.cookie_name} cookie, please login",
                code="missing_session",
            )

        token = parse_session_token(value)
        if self.signed:
            self._verify(token)
        return token.username

    def authenticate(self, cookies: Mapping[str, str]) -> None:
        """Fail unless the request carries a usable session cookie."""
        self.username(cookies)

    def principal(self, cookies: Mapping[str, str]) -> Principal:
        return Principal(username=self.username(cookies), method=AuthMethod.SESSION)

    def issue(self, username: str) -> str:
        """Create a cookie value for ``username``.

        Raises:
            ValidationError: If the username could not be parsed back from a cookie
        """
        if not username or SEPARATOR in username:
            raise ValidationError(
                f"Username {username!r} cannot be stored in a session", field="name"
            )
        if self.signed:
            issued = format(int(time.time()), "x")
            suffix = f"{issued}{SIGNATURE_SEPARATOR}{self._sign(username, issued)}"
        else:
            suffix = secrets.token_hex(16)
        return str(SessionToken(username=username, suffix=suffix))

    def _verify(self, token: SessionToken) -> None:
        issued, _, signature = token.suffix.partition(SIGNATURE_SEPARATOR)
        try:
            issued_at = int(issued, 16)
        except ValueError:
            issued_at = None

        if issued_at is None or not hmac.compare_digest(
            signature.encode(), self._sign(token.username, issued).encode()
        ):
            logger.warning("Session signature verification failed for user=%s", token.username)
            raise MalformedSessionError("Unable to decrypt auth-session", code="malformed_session")

        if time.time() - issued_at > self._config.max_age:
            logger.warning("Session expired for user=%s", token.username)
            raise ExpiredSessionError(
                "Session has expired, please login again", code="expired_session"
            )

    def _sign(self, username: str, issued: str) -> str:
        payload = f"{username}|{issued}"
        return hmac.new(
            self._config.secret.encode(), payload.encode(), hashlib.sha256
        ).hexdigest()
