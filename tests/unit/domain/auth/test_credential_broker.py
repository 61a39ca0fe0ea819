"""Unit tests for CredentialBroker error taxonomy and ticket staging."""

import logging
from pathlib import Path
from typing import Any

import pytest

from mdgate.config import AuthConfig
from mdgate.domain.auth.model.value import (
    ClientOptions,
    CredentialResult,
    Credentials,
    RealmConfig,
)
from mdgate.domain.auth.service.credential import CredentialBroker
from mdgate.domain.shared.error import (
    CacheLoadError,
    ConfigLoadError,
    CredentialError,
    EmptyCredentialError,
    LoginError,
    TempFileError,
)

REALM = RealmConfig(default_realm="EXAMPLE.ORG", kdcs={"EXAMPLE.ORG": ["kdc.example.org"]})


class FakeClient:
    def __init__(self, result: CredentialResult | None = None, error: Exception | None = None):
        self.result = result
        self.error = error

    async def login(self) -> CredentialResult:
        if self.error:
            raise self.error
        return self.result or CredentialResult.none()


class FakeProtocol:
    """In-memory ticket protocol recording what the broker asked for."""

    def __init__(
        self,
        *,
        config_error: Exception | None = None,
        ccache_error: Exception | None = None,
        client: FakeClient | None = None,
    ) -> None:
        self.config_error = config_error
        self.ccache_error = ccache_error
        self.client = client or FakeClient(
            CredentialResult.of(Credentials(username="alice", realm="EXAMPLE.ORG"))
        )
        self.loaded_paths: list[str] = []
        self.ticket_bytes: list[bytes] = []
        self.password_calls: list[tuple[Any, ...]] = []

    def load_config(self, path: str) -> RealmConfig:
        if self.config_error:
            raise self.config_error
        return REALM

    def load_ccache(self, path: str) -> Any:
        self.loaded_paths.append(path)
        self.ticket_bytes.append(Path(path).read_bytes())
        if self.ccache_error:
            raise self.ccache_error
        return object()

    def client_from_ccache(self, ccache: Any, config: RealmConfig) -> FakeClient:
        return self.client

    def client_with_password(
        self,
        username: str,
        realm: str,
        password: str,
        config: RealmConfig,
        options: ClientOptions,
    ) -> FakeClient:
        self.password_calls.append((username, realm, password, options))
        return self.client


def make_broker(protocol: FakeProtocol, tmp_path: Path, **overrides: Any) -> CredentialBroker:
    config = AuthConfig(krb5_conf="/etc/krb5.conf", ticket_dir=str(tmp_path), **overrides)
    return CredentialBroker(_protocol=protocol, _config=config)


class TestFromCache:
    @pytest.mark.asyncio
    async def test_returns_credentials(self, tmp_path: Path):
        cache = tmp_path / "cache"
        cache.write_bytes(b"ticket")
        broker = make_broker(FakeProtocol(), tmp_path)

        credentials = await broker.from_cache(cache)

        assert credentials.username == "alice"
        assert credentials.principal == "alice@EXAMPLE.ORG"

    @pytest.mark.asyncio
    async def test_config_failure(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        broker = make_broker(FakeProtocol(config_error=OSError("missing")), tmp_path)

        with caplog.at_level(logging.ERROR), pytest.raises(ConfigLoadError):
            await broker.from_cache(tmp_path / "cache")

        assert "reading krb5.conf fails" in caplog.text

    @pytest.mark.asyncio
    async def test_cache_failure(self, tmp_path: Path):
        cache = tmp_path / "cache"
        cache.write_bytes(b"garbage")
        broker = make_broker(FakeProtocol(ccache_error=ValueError("bad ccache")), tmp_path)

        with pytest.raises(CacheLoadError):
            await broker.from_cache(cache)

    @pytest.mark.asyncio
    async def test_login_failure(self, tmp_path: Path):
        cache = tmp_path / "cache"
        cache.write_bytes(b"ticket")
        protocol = FakeProtocol(client=FakeClient(error=ConnectionError("kdc down")))
        broker = make_broker(protocol, tmp_path)

        with pytest.raises(LoginError):
            await broker.from_cache(cache)

    @pytest.mark.asyncio
    async def test_empty_credentials(self, tmp_path: Path):
        cache = tmp_path / "cache"
        cache.write_bytes(b"ticket")
        protocol = FakeProtocol(client=FakeClient(CredentialResult.none()))
        broker = make_broker(protocol, tmp_path)

        with pytest.raises(EmptyCredentialError) as exc_info:
            await broker.from_cache(cache)

        assert exc_info.value.message == "unable to obtain user credentials"


class TestFromPassword:
    @pytest.mark.asyncio
    async def test_uses_default_realm_and_options(self, tmp_path: Path):
        protocol = FakeProtocol()
        broker = make_broker(protocol, tmp_path)

        credentials = await broker.from_password("alice", "s3cret")

        assert credentials.username == "alice"
        username, realm, password, options = protocol.password_calls[0]
        assert (username, realm, password) == ("alice", "EXAMPLE.ORG", "s3cret")
        assert options.disable_pa_fx_fast is True

    @pytest.mark.asyncio
    async def test_configured_realm_wins(self, tmp_path: Path):
        protocol = FakeProtocol()
        broker = make_broker(protocol, tmp_path, realm="OTHER.ORG")

        await broker.from_password("alice", "s3cret")

        assert protocol.password_calls[0][1] == "OTHER.ORG"

    @pytest.mark.asyncio
    async def test_login_failure_is_logged(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ):
        protocol = FakeProtocol(client=FakeClient(error=PermissionError("bad password")))
        broker = make_broker(protocol, tmp_path)

        with caplog.at_level(logging.ERROR), pytest.raises(LoginError) as exc_info:
            await broker.from_password("alice", "wrong")

        assert exc_info.value.message == "client login fails"
        assert "client login fails" in caplog.text
        assert "wrong" not in caplog.text

    @pytest.mark.asyncio
    async def test_config_failure(self, tmp_path: Path):
        broker = make_broker(FakeProtocol(config_error=ValueError("bad")), tmp_path)

        with pytest.raises(ConfigLoadError):
            await broker.from_password("alice", "s3cret")

    @pytest.mark.asyncio
    async def test_empty_credentials(self, tmp_path: Path):
        broker = make_broker(FakeProtocol(client=FakeClient(CredentialResult.none())), tmp_path)

        with pytest.raises(EmptyCredentialError):
            await broker.from_password("alice", "s3cret")


class TestFromUploadedTicket:
    @pytest.mark.asyncio
    async def test_stages_ticket_and_removes_it(self, tmp_path: Path):
        protocol = FakeProtocol()
        broker = make_broker(protocol, tmp_path)

        credentials = await broker.from_uploaded_ticket("alice", b"ticket-bytes")

        assert credentials.username == "alice"
        assert protocol.ticket_bytes == [b"ticket-bytes"]
        staged = Path(protocol.loaded_paths[0])
        assert staged.parent == tmp_path
        assert staged.name.startswith("alice-")
        assert not staged.exists()
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_name_cannot_escape_ticket_dir(self, tmp_path: Path):
        protocol = FakeProtocol()
        broker = make_broker(protocol, tmp_path)

        await broker.from_uploaded_ticket("../../etc/alice", b"ticket")

        assert Path(protocol.loaded_paths[0]).parent == tmp_path

    @pytest.mark.asyncio
    async def test_removes_ticket_when_cache_is_invalid(self, tmp_path: Path):
        protocol = FakeProtocol(ccache_error=ValueError("bad ccache"))
        broker = make_broker(protocol, tmp_path)

        with pytest.raises(CredentialError) as exc_info:
            await broker.from_uploaded_ticket("alice", b"garbage")

        assert exc_info.value.message == "wrong user credentials"
        assert isinstance(exc_info.value.__cause__, CacheLoadError)
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_empty_credentials_pass_through(self, tmp_path: Path):
        protocol = FakeProtocol(client=FakeClient(CredentialResult.none()))
        broker = make_broker(protocol, tmp_path)

        with pytest.raises(EmptyCredentialError):
            await broker.from_uploaded_ticket("alice", b"ticket")

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_unwritable_ticket_dir(self, tmp_path: Path):
        broker = make_broker(FakeProtocol(), tmp_path / "does-not-exist")

        with pytest.raises(TempFileError):
            await broker.from_uploaded_ticket("alice", b"ticket")

    @pytest.mark.asyncio
    async def test_name_with_nul_byte(self, tmp_path: Path):
        protocol = FakeProtocol()
        broker = make_broker(protocol, tmp_path)

        with pytest.raises(TempFileError) as exc_info:
            await broker.from_uploaded_ticket("al\x00ice", b"ticket")

        assert exc_info.value.code == "tempfile_create"
        assert protocol.loaded_paths == []
        assert list(tmp_path.iterdir()) == []
