"""Tests for Config loading from defaults, YAML and environment."""

from pathlib import Path

import pytest

from mdgate.config import Config


class TestDefaults:
    def test_attribute_schema_defaults(self) -> None:
        config = Config()

        assert config.attributes.mandatory_attrs == ["experiment", "processing", "tier", "path"]
        assert config.attributes.adjustable_attrs == []

    def test_session_defaults(self) -> None:
        config = Config()

        assert config.auth.session.cookie_name == "auth-session"
        assert config.auth.session.secret == ""
        assert config.auth.disable_pa_fx_fast is True

    def test_env_prefix_is_mdgate(self) -> None:
        assert Config.model_config.get("env_prefix") == "MDGATE_"


class TestSources:
    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MDGATE_AUTH__REALM", "EXAMPLE.ORG")
        monkeypatch.setenv("MDGATE_METADATA__COLLECTION", "records")

        config = Config()

        assert config.auth.realm == "EXAMPLE.ORG"
        assert config.metadata.collection == "records"

    def test_yaml_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "mdgate.yaml"
        path.write_text(
            "attributes:\n"
            "  mandatory_attrs: [path, tier]\n"
            "  adjustable_attrs: [run]\n"
            "auth:\n"
            "  ticket_dir: /var/tmp\n"
        )
        monkeypatch.setenv("MDGATE_CONFIG_FILE", str(path))

        config = Config()

        assert config.attributes.mandatory_attrs == ["path", "tier"]
        assert config.attributes.adjustable_attrs == ["run"]
        assert config.auth.ticket_dir == "/var/tmp"

    def test_env_beats_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "mdgate.yaml"
        path.write_text("metadata:\n  db_name: from_yaml\n")
        monkeypatch.setenv("MDGATE_CONFIG_FILE", str(path))
        monkeypatch.setenv("MDGATE_METADATA__DB_NAME", "from_env")

        assert Config().metadata.db_name == "from_env"

    def test_missing_yaml_file_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MDGATE_CONFIG_FILE", "/nonexistent/mdgate.yaml")

        assert Config().metadata.db_name == "mdgate"
