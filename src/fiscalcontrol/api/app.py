"""FastAPI application exposing the single JSON endpoint."""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaError
from starlette.concurrency import run_in_threadpool

from fiscalcontrol.api.schemas import ApiRequest, record_to_dict
from fiscalcontrol.database.base import RecordStore
from fiscalcontrol.database.factories import create_sqlite_store
from fiscalcontrol.domain.entities import Actor, PaymentStatus, PaymentType, Role
from fiscalcontrol.domain.errors import (
    DomainError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from fiscalcontrol.domain.lifecycle import PaymentLifecycleService
from fiscalcontrol.notifications.dispatcher import Dispatcher, create_dispatcher

logger = logging.getLogger(__name__)

# The endpoint is unauthenticated; registrations without an actor are
# attributed to an anonymous payer.
ANONYMOUS_PAYER = Actor(name="anonymous", role=Role.PAYER)

_ERROR_STATUS = {
    ValidationError: 400,
    ForbiddenError: 403,
    NotFoundError: 404,
    InvalidStateError: 409,
    StoreUnavailableError: 503,
}


def _error_response(error: DomainError, data: Any = None) -> JSONResponse:
    status_code = next(
        (code for kind, code in _ERROR_STATUS.items() if isinstance(error, kind)), 400
    )
    body: dict[str, Any] = {
        "result": "error",
        "error": type(error).__name__,
        "message": str(error),
    }
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=body)


def _success(data: Any) -> dict[str, Any]:
    return {"result": "success", "data": data}


def create_app(
    store: Optional[RecordStore] = None, dispatcher: Optional[Dispatcher] = None
) -> FastAPI:
    """Build the API application.

    Args:
        store: Record store; defaults to the configured SQLite store
        dispatcher: Dispatcher for review messages; defaults to create_dispatcher()
    """
    if store is None:
        store = create_sqlite_store()
    if dispatcher is None:
        dispatcher = create_dispatcher()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.connect()
        yield
        store.disconnect()

    app = FastAPI(
        title="FiscalControl API",
        description="Payment register with review workflow",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.lifecycle = PaymentLifecycleService(store, dispatcher)

    @app.get("/", tags=["system"])
    def alive():
        return {"status": "alive", "message": "Use POST to interact with data"}

    @app.get("/health", tags=["system"])
    def health():
        return {"status": "ok"}

    @app.post("/", tags=["payments"])
    async def handle(request: Request):
        # Browser clients post JSON as text/plain to skip the CORS preflight,
        # so the body is parsed regardless of content type.
        raw = await request.body()
        try:
            body = ApiRequest.model_validate(json.loads(raw or b"{}"))
        except json.JSONDecodeError as e:
            return _error_response(ValidationError(f"Request body is not valid JSON: {e}"))
        except SchemaError as e:
            return _error_response(ValidationError(_schema_message(e)))
        return await run_in_threadpool(_dispatch, request.app.state.lifecycle, body)

    return app


def _schema_message(error: SchemaError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in error.errors()
    )


def _dispatch(lifecycle: PaymentLifecycleService, body: ApiRequest):
    action = body.action.strip().lower()
    if action == "create":
        return _create(lifecycle, body)
    if action == "read":
        return _read(lifecycle, body)
    if action == "update":
        return _update(lifecycle, body)
    return JSONResponse(status_code=400, content={"result": "error", "message": "Invalid action"})


def _create(lifecycle: PaymentLifecycleService, body: ApiRequest):
    if body.data is None:
        return _error_response(ValidationError("Field 'data' is required for create"))
    try:
        actor = body.actor.to_actor() if body.actor else ANONYMOUS_PAYER
        record = lifecycle.register(body.data.to_input(), actor)
    except StoreUnavailableError as e:
        data = None
        if e.record is not None:
            data = {**record_to_dict(e.record), "savedLocally": True}
        return _error_response(e, data=data)
    except DomainError as e:
        return _error_response(e)
    except ValueError as e:
        return _error_response(ValidationError(str(e)))
    return _success(record_to_dict(record))


def _read(lifecycle: PaymentLifecycleService, body: ApiRequest):
    filters = body.filters
    try:
        if filters is None:
            records = lifecycle.list_records(refresh=True)
        else:
            records = lifecycle.list_records(
                search=filters.search,
                payment_type=PaymentType.parse(filters.payment_type) if filters.payment_type else None,
                status=PaymentStatus.parse(filters.status) if filters.status else None,
                start_date=filters.start_date,
                end_date=filters.end_date,
                newest_first=filters.newest_first,
                refresh=True,
            )
    except DomainError as e:
        return _error_response(e)
    except ValueError as e:
        return _error_response(ValidationError(str(e)))

    unsynced = {r.id for r in lifecycle.unsynced_records()}
    data = []
    for record in records:
        item = record_to_dict(record)
        if record.id in unsynced:
            item["savedLocally"] = True
        data.append(item)
    return _success(data)


def _update(lifecycle: PaymentLifecycleService, body: ApiRequest):
    if not body.id:
        return _error_response(ValidationError("Field 'id' is required for update"))
    if not body.transition:
        return _error_response(ValidationError("Field 'transition' is required for update"))
    if body.actor is None:
        return _error_response(ValidationError("Field 'actor' is required for update"))
    try:
        record = lifecycle.transition(body.id, body.transition, body.actor.to_actor())
    except DomainError as e:
        return _error_response(e)
    except ValueError as e:
        return _error_response(ValidationError(str(e)))
    return _success(record_to_dict(record))
