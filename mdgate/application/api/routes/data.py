"""Record submission routes for browsers (session cookie) and programs (uploaded ticket)."""

import json
import logging
from typing import Any

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter, Request, Response
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from mdgate.application.api.presenter import get_presenter
from mdgate.domain.auth.command.login import TicketLogin, TicketLoginHandler
from mdgate.domain.auth.service.session import SessionService
from mdgate.domain.ingest.command.insert import InsertRecord, InsertRecordHandler
from mdgate.domain.ingest.model.record import Record
from mdgate.domain.shared.error import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Data"], route_class=DishkaRoute)


def _to_record(payload: Any) -> Record:
    if not isinstance(payload, dict):
        raise ValidationError("Record must be a JSON object", field="record")
    try:
        return Record.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid record: {e}", field="record") from e


def _parse_record_json(raw: Any) -> Record:
    if not isinstance(raw, str) or not raw:
        raise ValidationError("Form field 'record' is required", field="record")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Record is not valid JSON: {e}", field="record") from e
    return _to_record(payload)


async def _read_record(request: Request) -> Record:
    """Record from a JSON body, or from plain form fields."""
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError as e:
            raise ValidationError(f"Record is not valid JSON: {e}", field="record") from e
        return _to_record(payload)

    form = await request.form()
    return _to_record({k: v for k, v in form.items() if isinstance(v, str)})


async def _ticket_bytes(ticket: Any) -> bytes:
    if isinstance(ticket, UploadFile):
        return await ticket.read()
    if isinstance(ticket, str) and ticket:
        return ticket.encode()
    raise ValidationError("Form field 'ticket' is required", field="ticket")


@router.post("/data")
async def insert_data(
    request: Request,
    session_service: FromDishka[SessionService],
    handler: FromDishka[InsertRecordHandler],
) -> Response:
    """Insert a record submitted by a logged-in browser user."""
    principal = session_service.principal(request.cookies)
    record = await _read_record(request)

    result = await handler.run(InsertRecord(record=record, principal=principal))

    return get_presenter(request).confirm(
        request, "data inserted", dataset=result.dataset, did=result.did, path=result.path
    )


@router.post("/api")
async def insert_data_with_ticket(
    request: Request,
    login_handler: FromDishka[TicketLoginHandler],
    handler: FromDishka[InsertRecordHandler],
) -> Response:
    """Insert a record for a client that authenticates with a posted ticket cache.

    Form fields: ``name`` (identity hint), ``ticket`` (ticket cache bytes,
    as text or file part) and ``record`` (JSON object).
    """
    form = await request.form()

    name = form.get("name")
    if not isinstance(name, str) or not name:
        raise ValidationError("Form field 'name' is required", field="name")

    ticket = await _ticket_bytes(form.get("ticket"))
    login = await login_handler.run(TicketLogin(name=name, ticket=ticket))

    record = _parse_record_json(form.get("record"))
    result = await handler.run(InsertRecord(record=record, principal=login.principal))

    return get_presenter(request).confirm(
        request, "data inserted", dataset=result.dataset, did=result.did, path=result.path
    )
