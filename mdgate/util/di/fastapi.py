"""Dishka FastAPI integration using Scope.UOW."""

from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from dishka import AsyncContainer

from mdgate.util.di.scope import Scope as MDGateScope


class ContainerMiddleware:
    """ASGI middleware that opens a Scope.UOW container for each HTTP request.

    Replaces dishka.integrations.starlette.ContainerMiddleware, which opens
    dishka.Scope.REQUEST instead of our Scope.UOW.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        request = Request(scope, receive=receive, send=send)

        async with request.app.state.dishka_container(scope=MDGateScope.UOW) as request_container:
            request.state.dishka_container = request_container
            return await self.app(scope, receive, send)


def setup_dishka(container: AsyncContainer, app) -> None:
    """Setup Dishka DI with the Scope.UOW middleware.

    Args:
        container: The async DI container
        app: FastAPI or Starlette application
    """
    app.add_middleware(ContainerMiddleware)
    app.state.dishka_container = container
