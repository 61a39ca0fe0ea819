"""Tests for the mdgate CLI commands."""

from pathlib import Path

import pytest

from mdgate.cli.main import check_config, init

KRB5_CONF = """\
[libdefaults]
    default_realm = EXAMPLE.ORG
[realms]
    EXAMPLE.ORG = {
        kdc = kdc.example.org
    }
"""


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    # Registered so the variable set by the command is restored afterwards
    monkeypatch.setenv("MDGATE_CONFIG_FILE", "")
    krb5 = tmp_path / "krb5.conf"
    krb5.write_text(KRB5_CONF)
    path = tmp_path / "mdgate.yaml"
    path.write_text(f"auth:\n  krb5_conf: {krb5}\n")
    return path


class TestCheckConfig:
    def test_valid_configuration(self, config_file: Path, capsys: pytest.CaptureFixture):
        check_config(config=config_file)

        out = capsys.readouterr().out
        assert "EXAMPLE.ORG" in out
        assert "kdc.example.org" in out
        assert "Configuration OK" in out

    def test_missing_krb5_conf(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MDGATE_CONFIG_FILE", "")
        path = tmp_path / "mdgate.yaml"
        path.write_text(f"auth:\n  krb5_conf: {tmp_path / 'absent.conf'}\n")

        with pytest.raises(SystemExit) as exc_info:
            check_config(config=path)

        assert exc_info.value.code == 1

    def test_missing_config_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MDGATE_CONFIG_FILE", "")

        with pytest.raises(SystemExit):
            check_config(config=tmp_path / "absent.yaml")


class TestInit:
    def test_writes_template(self, tmp_path: Path):
        path = tmp_path / "mdgate.yaml"

        init(path=path)

        assert "mandatory_attrs" in path.read_text()

    def test_refuses_to_overwrite(self, tmp_path: Path):
        path = tmp_path / "mdgate.yaml"
        path.write_text("keep me")

        with pytest.raises(SystemExit):
            init(path=path)

        assert path.read_text() == "keep me"
