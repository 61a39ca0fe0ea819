import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by MDGATE_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("MDGATE_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class Server(BaseModel):
    """Server configuration (nested in Config, uses env_nested_delimiter)."""

    name: str = "Metadata Gateway"
    version: str = "0.1.0"
    description: str = "Authenticated registration of data files and their metadata"


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from MDGATE_LOG_FILE env var."""
        return os.environ.get("MDGATE_LOG_FILE")


# =============================================================================
# Authentication Configuration
# =============================================================================


class SessionConfig(BaseModel):
    """Session cookie configuration.

    When `secret` is empty, session cookies are parsed but not verified.
    """

    cookie_name: str = "auth-session"
    secret: str = ""
    max_age: int = 12 * 60 * 60  # seconds


class AuthConfig(BaseModel):
    """Kerberos authentication configuration."""

    krb5_conf: str = "/etc/krb5.conf"
    realm: str = ""  # Empty = use default_realm from krb5.conf
    disable_pa_fx_fast: bool = True
    ticket_dir: str = "/tmp"  # Where uploaded tickets are staged
    session: SessionConfig = SessionConfig()


# =============================================================================
# Storage Configuration
# =============================================================================


class AttributeSchemaConfig(BaseModel):
    """Attribute names a record must carry."""

    mandatory_attrs: list[str] = ["experiment", "processing", "tier", "path"]
    adjustable_attrs: list[str] = []


class DatabaseConfig(BaseModel):
    """File catalogue database configuration."""

    url: str = "sqlite+aiosqlite:///~/.local/share/mdgate/catalog.db"
    echo: bool = False
    auto_create: bool = True  # Create catalogue tables on startup


class MetadataConfig(BaseModel):
    """Metadata document store configuration."""

    uri: str = "mongodb://localhost:27017"
    db_name: str = "mdgate"
    collection: str = "meta"


class TemplatesConfig(BaseModel):
    """HTML template configuration."""

    directory: str | None = None  # Optional override, searched before built-in templates


class Config(BaseSettings):
    server: Server = Server()
    logging: LoggingConfig = LoggingConfig()
    auth: AuthConfig = AuthConfig()
    attributes: AttributeSchemaConfig = AttributeSchemaConfig()
    database: DatabaseConfig = DatabaseConfig()
    metadata: MetadataConfig = MetadataConfig()
    templates: TemplatesConfig = TemplatesConfig()

    model_config = {
        "env_prefix": "MDGATE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows MDGATE_AUTH__REALM override
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - MDGATE_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup so that all loggers
    pick up the configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("minikerberos").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
