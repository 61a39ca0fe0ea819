"""Kerberos adapter for the TicketProtocol port, backed by minikerberos."""

import logging
from datetime import UTC, datetime
from typing import Any

from minikerberos.aioclient import AIOKerberosClient
from minikerberos.common.ccache import CCACHE, Credential
from minikerberos.common.creds import KerberosCredential
from minikerberos.common.spn import KerberosSPN
from minikerberos.common.target import KerberosTarget

from mdgate.domain.auth.model.value import (
    ClientOptions,
    CredentialResult,
    Credentials,
    RealmConfig,
)
from mdgate.domain.auth.port.ticket_protocol import TicketClient, TicketProtocol
from mdgate.domain.shared.error import LoginError
from mdgate.infrastructure.kerberos.realm import load_realm_config

logger = logging.getLogger(__name__)

KDC_PORT = 88
TGS_SERVICE = "krbtgt"


def _target(config: RealmConfig, realm: str) -> KerberosTarget:
    host, _, port = config.kdc_for(realm).partition(":")
    target = KerberosTarget(host)
    target.port = int(port) if port else KDC_PORT
    return target


def _tgs_principal(realm: str) -> str:
    return f"{TGS_SERVICE}/{realm}@{realm}"


def cached_tgt(ccache: CCACHE, principal: str, now: datetime | None = None) -> Credential:
    """Return the unexpired ticket-granting ticket of ``principal`` in ``ccache``.

    Raises:
        LoginError: If the cache holds no such ticket, or it has expired
    """
    for cred in ccache.credentials:
        service = [c.to_string() for c in cred.server.components]
        if service[:1] != [TGS_SERVICE] or cred.client.to_spn().upper() != principal.upper():
            continue

        endtime = cred.time.endtime
        if not endtime:
            raise LoginError(f"ticket for {principal} has no end time", code="ticket_expired")
        expires = datetime.fromtimestamp(endtime, UTC)
        if expires <= (now or datetime.now(UTC)):
            logger.warning("Expired ticket cache: principal=%s, endtime=%s", principal, expires)
            raise LoginError(
                f"ticket for {principal} expired at {expires.isoformat()}", code="ticket_expired"
            )
        return cred

    raise LoginError(f"no ticket-granting ticket for {principal}", code="no_tgt")


class MiniKerberosClient(TicketClient):
    """A single login attempt against a KDC.

    A password login performs the AS exchange. A ticket cache login checks
    the cached TGT's lifetime and then asks the KDC for a ``krbtgt`` service
    ticket with it, so a cache is only accepted once the KDC has honoured it.
    """

    def __init__(self, credential: KerberosCredential, target: KerberosTarget) -> None:
        self._credential = credential
        self._target = target

    async def login(self) -> CredentialResult:
        ccache = self._credential.ccache
        client = AIOKerberosClient(self._credential, self._target)
        if ccache is not None:
            client.ccache = self._tgt_only(ccache)

        await client.get_TGT()
        if client.kerberos_TGT is None:
            return CredentialResult.none()

        if ccache is not None:
            realm = self._credential.domain
            await client.get_TGS(KerberosSPN.from_spn(_tgs_principal(realm)))
            logger.debug(
                "KDC accepted cached TGT: user=%s, realm=%s", self._credential.username, realm
            )

        return CredentialResult.of(
            Credentials(
                username=self._credential.username,
                realm=self._credential.domain,
                handle=client.ccache,
            )
        )

    def _tgt_only(self, ccache: CCACHE) -> CCACHE:
        # Cached service tickets would otherwise answer get_TGS without the KDC
        principal = f"{self._credential.username}@{self._credential.domain}"
        verified = CCACHE()
        verified.primary_principal = ccache.primary_principal
        verified.credentials = [cached_tgt(ccache, principal)]
        return verified


class MiniKerberosProtocol(TicketProtocol):
    """TicketProtocol implementation using minikerberos and krb5.conf.

    minikerberos never negotiates FAST armoring, so ``disable_pa_fx_fast``
    needs no client-side switch.
    """

    def load_config(self, path: str) -> RealmConfig:
        return load_realm_config(path)

    def load_ccache(self, path: str) -> CCACHE:
        return CCACHE.from_file(path)

    def client_from_ccache(self, ccache: Any, config: RealmConfig) -> TicketClient:
        principal = ccache.primary_principal
        credential = KerberosCredential()
        credential.username = "/".join(c.to_string() for c in principal.components)
        credential.domain = principal.realm.to_string()
        credential.ccache = ccache
        credential.ccache_spn_strict_check = True
        return MiniKerberosClient(credential, _target(config, credential.domain))

    def client_with_password(
        self,
        username: str,
        realm: str,
        password: str,
        config: RealmConfig,
        options: ClientOptions,
    ) -> TicketClient:
        logger.debug(
            "Password client: user=%s, realm=%s, disable_pa_fx_fast=%s",
            username,
            realm,
            options.disable_pa_fx_fast,
        )
        credential = KerberosCredential()
        credential.username = username
        credential.domain = realm
        credential.password = password
        return MiniKerberosClient(credential, _target(config, realm))
