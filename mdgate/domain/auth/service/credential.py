"""Credential broker for ticket-cache, password and uploaded-ticket logins."""

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from mdgate.config import AuthConfig
from mdgate.domain.auth.model.value import (
    ClientOptions,
    CredentialResult,
    Credentials,
    RealmConfig,
)
from mdgate.domain.auth.port.ticket_protocol import TicketProtocol
from mdgate.domain.shared.error import (
    CacheLoadError,
    ConfigLoadError,
    CredentialError,
    EmptyCredentialError,
    LoginError,
    TempFileError,
)
from mdgate.domain.shared.service import Service

logger = logging.getLogger(__name__)


class CredentialBroker(Service):
    """Obtains verified credentials through the ticket protocol.

    - from_cache: Login with a ticket cache file
    - from_password: Login with username and password
    - from_uploaded_ticket: Login with ticket cache bytes posted by a client

    Nothing is cached between calls and no step is retried.
    """

    _protocol: TicketProtocol
    _config: AuthConfig

    async def from_cache(self, cache_file: str | Path) -> Credentials:
        """Login using the ticket cache stored in ``cache_file``.

        Raises:
            ConfigLoadError: If the realm configuration cannot be read
            CacheLoadError: If the ticket cache cannot be read
            LoginError: If the login handshake fails
            EmptyCredentialError: If login yields no credentials
        """
        cfg = self._load_config()

        try:
            ccache = self._protocol.load_ccache(str(cache_file))
        except Exception as e:
            raise CacheLoadError(f"Unable to load ticket cache: {e}", code="cache_load") from e

        try:
            client = self._protocol.client_from_ccache(ccache, cfg)
            result = await client.login()
        except Exception as e:
            raise LoginError(f"client login fails: {e}", code="login_failed") from e

        return _unwrap(result)

    async def from_password(self, user: str, password: str) -> Credentials:
        """Login with a username and password.

        Raises:
            ConfigLoadError: If the realm configuration cannot be read
            LoginError: If the login handshake fails
            EmptyCredentialError: If login yields no credentials
        """
        cfg = self._load_config()
        options = ClientOptions(disable_pa_fx_fast=self._config.disable_pa_fx_fast)

        try:
            realm = cfg.resolve_realm(self._config.realm)
            client = self._protocol.client_with_password(user, realm, password, cfg, options)
            result = await client.login()
        except Exception as e:
            logger.error("client login fails: user=%s, error=%s", user, e)
            raise LoginError("client login fails", code="login_failed") from e

        return _unwrap(result)

    async def from_uploaded_ticket(self, name: str, ticket: bytes) -> Credentials:
        """Login with ticket cache bytes uploaded by a non-browser client.

        The bytes are staged in a temporary file that is removed on every exit path.

        Raises:
            TempFileError: If the temporary file cannot be created or written
            EmptyCredentialError: If login yields no credentials
            CredentialError: If login with the staged ticket fails
        """
        with _staged_ticket(Path(self._config.ticket_dir), name, ticket) as path:
            try:
                return await self.from_cache(path)
            except EmptyCredentialError:
                raise
            except CredentialError as e:
                raise CredentialError("wrong user credentials", code="wrong_credentials") from e

    def _load_config(self) -> RealmConfig:
        try:
            return self._protocol.load_config(self._config.krb5_conf)
        except Exception as e:
            logger.error("reading krb5.conf fails: path=%s, error=%s", self._config.krb5_conf, e)
            raise ConfigLoadError("reading krb5.conf fails", code="config_load") from e


def _unwrap(result: CredentialResult) -> Credentials:
    if result.credentials is None:
        raise EmptyCredentialError("unable to obtain user credentials", code="empty_credentials")
    return result.credentials


@contextmanager
def _staged_ticket(directory: Path, name: str, ticket: bytes) -> Iterator[Path]:
    """Write ``ticket`` to a uniquely named file in ``directory`` and remove it afterwards."""
    # Only the basename of the caller's name is used, and mkstemp adds a random part
    prefix = f"{Path(name).name or 'ticket'}-"
    try:
        fd, raw_path = tempfile.mkstemp(prefix=prefix, suffix=".ccache", dir=directory)
    except (OSError, ValueError) as e:
        raise TempFileError(f"Unable to create tempfile: {e}", code="tempfile_create") from e

    path = Path(raw_path)
    try:
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(ticket)
        except OSError as e:
            raise TempFileError("unable to write kerberos ticket", code="tempfile_write") from e
        yield path
    finally:
        path.unlink(missing_ok=True)
