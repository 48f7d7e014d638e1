"""
FastAPI router factory for one entity type.

A ModelView binds a SQLAlchemy mapped class to a URL prefix and produces
the seven CRUD routes. All routes delegate to the CrudDispatcher. Error
mapping is handled by the centralized error handlers.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Path, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from slowapi import Limiter

from modelview.application.dispatcher import CrudDispatcher
from modelview.core.config import Settings
from modelview.domain.descriptor import ModelDescriptor
from modelview.domain.primary_key import WIRE_MAX
from modelview.infrastructure.introspection import describe_model
from modelview.infrastructure.repository import SqlAlchemyModelRepository
from modelview.interfaces.schemas import ErrorResponse

_NOT_FOUND = {404: {"model": ErrorResponse}}
_FAILURE = {500: {"model": ErrorResponse}}


def _json(payload: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))


class ModelView:
    """Registers a mapped class as a REST resource.

    Example:
        student_view = ModelView(Student, prefix="/student", order_by="id")
        app = create_app([student_view])

    Args:
        model: SQLAlchemy declarative class.
        prefix: URL prefix the routes are mounted under.
        order_by: Attribute used as the default sort column (descending).
        tags: OpenAPI tags; defaults to the model name.
        allow_composite_key: Use the first key column of a composite key.
    """

    def __init__(
        self,
        model: type,
        prefix: str,
        order_by: str,
        tags: Optional[list[str]] = None,
        allow_composite_key: bool = False,
    ) -> None:
        self.descriptor: ModelDescriptor = describe_model(
            model, order_by, allow_composite_key=allow_composite_key
        )
        stripped = prefix.strip("/")
        self.prefix = f"/{stripped}" if stripped else ""
        self.tags = tags or [self.descriptor.name]

    @property
    def name(self) -> str:
        return self.descriptor.name

    def get_dispatcher(self, request: Request) -> CrudDispatcher:
        """Build the dispatcher for one request from the application state."""
        database = request.app.state.database
        settings: Settings = request.app.state.settings
        return CrudDispatcher(
            self.descriptor,
            SqlAlchemyModelRepository(self.descriptor, database.session_factory),
            default_page_size=settings.default_page_size,
        )

    def router(self, settings: Settings, limiter: Limiter) -> APIRouter:
        """Build the APIRouter carrying every CRUD route of this view."""
        router = APIRouter(prefix=self.prefix, tags=self.tags)
        dispatcher_dependency = Depends(self.get_dispatcher)
        name = self.name

        async def list_records(
            request: Request,
            dispatcher: CrudDispatcher = dispatcher_dependency,
        ) -> Response:
            records = await dispatcher.list_records(dict(request.query_params))
            return _json(records)

        async def create_record(
            body: Any = Body(...),
            dispatcher: CrudDispatcher = dispatcher_dependency,
        ) -> Response:
            record = await dispatcher.create(body)
            return _json(record, status.HTTP_201_CREATED)

        async def delete_all_records(
            request: Request,
            dispatcher: CrudDispatcher = dispatcher_dependency,
        ) -> Response:
            await dispatcher.delete_all()
            return Response(status_code=status.HTTP_204_NO_CONTENT)

        async def retrieve_record(
            pk: int = Path(..., ge=0, le=WIRE_MAX),
            dispatcher: CrudDispatcher = dispatcher_dependency,
        ) -> Response:
            return _json(await dispatcher.retrieve(pk))

        async def update_record(
            pk: int = Path(..., ge=0, le=WIRE_MAX),
            body: Any = Body(...),
            dispatcher: CrudDispatcher = dispatcher_dependency,
        ) -> Response:
            return _json(await dispatcher.full_update(pk, body))

        async def partial_update_record(
            pk: int = Path(..., ge=0, le=WIRE_MAX),
            body: Any = Body(...),
            dispatcher: CrudDispatcher = dispatcher_dependency,
        ) -> Response:
            return _json(await dispatcher.partial_update(pk, body))

        async def delete_record(
            pk: int = Path(..., ge=0, le=WIRE_MAX),
            dispatcher: CrudDispatcher = dispatcher_dependency,
        ) -> Response:
            await dispatcher.delete(pk)
            return Response(status_code=status.HTTP_204_NO_CONTENT)

        heavy = limiter.limit(settings.rate_limit_heavy)
        routes = [
            ("/", "GET", list_records, 200, {}, heavy),
            ("/", "POST", create_record, 201, _FAILURE, None),
            ("/", "DELETE", delete_all_records, 204, {}, heavy),
            ("/{pk}", "GET", retrieve_record, 200, _NOT_FOUND, None),
            ("/{pk}", "PUT", update_record, 200, _NOT_FOUND, None),
            ("/{pk}", "PATCH", partial_update_record, 200, _NOT_FOUND, None),
            ("/{pk}", "DELETE", delete_record, 204, _NOT_FOUND, None),
        ]
        for path, method, endpoint, status_code, responses, decorate in routes:
            # Unique names keep operation ids and rate-limit scopes per view.
            endpoint.__name__ = f"{endpoint.__name__}_{name}"
            endpoint.__qualname__ = endpoint.__name__
            if decorate is not None:
                endpoint = decorate(endpoint)
            router.add_api_route(
                path,
                endpoint,
                methods=[method],
                status_code=status_code,
                responses=responses,
                summary=endpoint.__name__.replace("_", " "),
            )
        return router
