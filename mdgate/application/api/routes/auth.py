"""Authentication routes: password login, logout and the session gate."""

import logging
from typing import Annotated

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter, Form, Request, Response

from mdgate.application.api.presenter import get_presenter
from mdgate.domain.auth.command.login import PasswordLogin, PasswordLoginHandler
from mdgate.domain.auth.service.session import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"], route_class=DishkaRoute)


@router.get("/")
async def index(
    request: Request,
    session_service: FromDishka[SessionService],
) -> Response:
    """Landing page; only reachable with a session cookie."""
    session_service.authenticate(request.cookies)
    return get_presenter(request).confirm(request, "ready to accept data")


@router.post("/login")
async def login(
    request: Request,
    handler: FromDishka[PasswordLoginHandler],
    session_service: FromDishka[SessionService],
    name: Annotated[str, Form()],
    password: Annotated[str, Form()],
) -> Response:
    """Login with username and password and set the session cookie."""
    result = await handler.run(PasswordLogin(name=name, password=password))

    response = get_presenter(request).confirm(
        request, f"welcome {result.principal.username}", realm=result.realm
    )
    response.set_cookie(
        session_service.cookie_name,
        result.session_token or "",
        max_age=session_service.max_age,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/logout")
async def logout(
    request: Request,
    session_service: FromDishka[SessionService],
) -> Response:
    """Clear the session cookie."""
    response = get_presenter(request).confirm(request, "logged out")
    response.delete_cookie(session_service.cookie_name)
    return response
