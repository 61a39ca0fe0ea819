"""Main CLI application using Cyclopts.

- serve: Run the HTTP gateway under uvicorn
- check-config: Load the configuration and krb5.conf and print the result
- init: Write a starter YAML config
"""

import os
import sys
from pathlib import Path

import cyclopts
import logfire
import uvicorn
from pydantic import ValidationError as PydanticValidationError

from mdgate.cli.console import get_console
from mdgate.config import Config

app = cyclopts.App(
    name="mdgate",
    help="Metadata Gateway - authenticated registration of data files and metadata",
)

TEMPLATE = """\
# Metadata Gateway configuration

server:
  name: "Metadata Gateway"

auth:
  krb5_conf: /etc/krb5.conf
  # realm: EXAMPLE.ORG  # Defaults to default_realm in krb5.conf
  ticket_dir: /tmp
  session:
    cookie_name: auth-session
    # secret: change-me  # Sign session cookies

attributes:
  mandatory_attrs: [experiment, processing, tier, path]
  adjustable_attrs: []

database:
  url: "sqlite+aiosqlite:///~/.local/share/mdgate/catalog.db"

metadata:
  uri: "mongodb://localhost:27017"
  db_name: mdgate
  collection: meta
"""

DEFAULT_CONFIG_NAME = "mdgate.yaml"


def _use_config_file(config: Path | None) -> None:
    if config is None:
        return
    if not config.exists():
        get_console().error(f"Config file not found: {config}")
        sys.exit(1)
    os.environ["MDGATE_CONFIG_FILE"] = str(config.resolve())


@app.command
def serve(host: str = "0.0.0.0", port: int = 8000, config: Path | None = None) -> None:
    """Run the gateway in the foreground.

    Args:
        host: Host to bind to.
        port: Port to listen on.
        config: Path to a YAML config file (sets MDGATE_CONFIG_FILE).
    """
    _use_config_file(config)

    # Logfire must be configured before the app module is imported
    logfire.configure(send_to_logfire="if-token-present", service_name="mdgate")

    uvicorn.run("mdgate.application.api.rest.app:app", host=host, port=port)


@app.command(name="check-config")
def check_config(config: Path | None = None) -> None:
    """Validate the configuration and the Kerberos realm setup.

    Args:
        config: Path to a YAML config file (sets MDGATE_CONFIG_FILE).
    """
    from mdgate.infrastructure.kerberos.realm import load_realm_config

    console = get_console()
    _use_config_file(config)

    try:
        settings = Config()
    except PydanticValidationError as e:
        console.error("Invalid configuration", hint=str(e))
        sys.exit(1)

    try:
        realm_config = load_realm_config(settings.auth.krb5_conf)
        realm = realm_config.resolve_realm(settings.auth.realm or None)
        kdc = realm_config.kdc_for(realm)
    except (OSError, ValueError) as e:
        console.error(f"Unable to use {settings.auth.krb5_conf}", hint=str(e))
        sys.exit(1)

    console.table(
        [
            ("krb5.conf", settings.auth.krb5_conf),
            ("realm", realm),
            ("kdc", kdc),
            ("ticket_dir", settings.auth.ticket_dir),
            ("session cookie", settings.auth.session.cookie_name),
            ("mandatory attrs", ", ".join(settings.attributes.mandatory_attrs)),
            ("adjustable attrs", ", ".join(settings.attributes.adjustable_attrs)),
            ("database", settings.database.url),
            ("metadata", f"{settings.metadata.db_name}.{settings.metadata.collection}"),
        ],
        title=settings.server.name,
    )
    if not settings.auth.session.secret:
        console.warning("auth.session.secret is not set; session cookies are not signed")
    console.success("Configuration OK")


@app.command
def init(path: Path = Path(DEFAULT_CONFIG_NAME)) -> None:
    """Create a new config file from template.

    Args:
        path: Path for the config file. Defaults to ./mdgate.yaml
    """
    console = get_console()
    if path.exists():
        console.error(f"{path} already exists (refusing to overwrite)")
        sys.exit(1)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(TEMPLATE)
    console.success(f"Created config at {path}")
