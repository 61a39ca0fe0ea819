"""Centralized rendering of confirmations and errors.

Every outcome, failures included, is answered with HTTP 200 and a rendered
confirmation page (or a JSON body for callers that accept JSON).
"""

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response

from mdgate.config import Config
from mdgate.domain.shared.error import (
    AuthenticationError,
    CredentialError,
    InfrastructureError,
    MDGateError,
    NotFoundError,
    TempFileError,
    ValidationError,
)

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

SUCCESS_CLASS = "alert is-success is-large is-text-center"
ERROR_CLASS = "alert is-error is-large is-text-center"

# First matching class wins, so subclasses come before their bases
ERROR_HEADLINES: list[tuple[type[MDGateError], str]] = [
    (AuthenticationError, "authentication required"),
    (TempFileError, "unable to stage kerberos ticket"),
    (CredentialError, "wrong user credentials"),
    (ValidationError, "invalid record"),
    (NotFoundError, "no files found"),
    (InfrastructureError, "backend unavailable"),
]
DEFAULT_HEADLINE = "unable to process request"


def headline_for(error: BaseException) -> str:
    """Short user-facing summary for ``error``."""
    for error_type, headline in ERROR_HEADLINES:
        if isinstance(error, error_type):
            return headline
    return DEFAULT_HEADLINE


def wants_json(request: Request) -> bool:
    return "application/json" in request.headers.get("accept", "")


class ErrorPresenter:
    """Renders the confirmation template for successes and failures."""

    def __init__(self, config: Config) -> None:
        search_path = [str(TEMPLATES_DIR)]
        if config.templates.directory:
            search_path.insert(0, config.templates.directory)
        self._env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(["html"]),
        )
        self._title = config.server.name

    def render(self, message: str, css_class: str, details: str | None = None) -> str:
        template = self._env.get_template("confirm.html")
        return template.render(
            title=self._title,
            Message=message.upper(),
            Class=css_class,
            Details=details,
        )

    def confirm(self, request: Request, message: str, **data: str) -> Response:
        if wants_json(request):
            return JSONResponse(status_code=200, content={"status": "ok", "message": message, **data})
        details = "\n".join(f"{k}: {v}" for k, v in data.items()) or None
        return HTMLResponse(status_code=200, content=self.render(message, SUCCESS_CLASS, details))

    def error(self, request: Request, error: BaseException) -> Response:
        """Log ``error`` and answer with an error page."""
        headline = headline_for(error)
        if isinstance(error, MDGateError):
            code, details = error.code, error.message
            logger.error("%s: %s %s: %s", headline, request.method, request.url.path, error.message)
        else:
            code, details = "internal_error", None
            logger.error(
                "Unhandled exception on %s %s", request.method, request.url.path, exc_info=error
            )

        if wants_json(request):
            return JSONResponse(
                status_code=200,
                content={"status": "error", "code": code, "message": details or headline},
            )
        return HTMLResponse(status_code=200, content=self.render(headline, ERROR_CLASS, details))


def get_presenter(request: Request) -> ErrorPresenter:
    """The presenter installed on the application by create_app()."""
    return request.app.state.presenter
