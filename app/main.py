"""Entry point for the FastAPI-powered movie wishlist API."""

from __future__ import annotations

import json
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError, model_validator

from .config import settings
from .database import Database
from .errors import InvalidArgument
from .schema import (
    Mutation,
    Operation,
    Query,
    QueryContext,
    QueryExecutor,
    build_registry,
)
from .selection import FieldSelection
from .services.library import ClientService, MovieService, ProfileService
from .services.watchmode import WatchModeClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


class OperationRequest(BaseModel):
    """A single root field as sent by API callers."""

    arguments: dict[str, Any] = Field(default_factory=dict)
    fields: list[str] = Field(default_factory=list)
    selection: dict[str, Any] | None = None

    def to_operation(self) -> Operation:
        if self.selection is not None:
            field_selection = FieldSelection.from_mapping(self.selection)
        else:
            field_selection = FieldSelection.from_paths(self.fields)
        return Operation(selection=field_selection, arguments=self.arguments)


class QueryRequest(BaseModel):
    """Body of ``POST /query``: either read operations or create operations."""

    query: dict[str, OperationRequest] | None = None
    mutation: dict[str, OperationRequest] | None = None

    @model_validator(mode="after")
    def _exactly_one_root(self) -> "QueryRequest":
        if (self.query is None) == (self.mutation is None):
            raise ValueError("Send exactly one of 'query' or 'mutation'")
        return self


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    watchmode_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.watchmode_api_url),
            timeout=httpx.Timeout(settings.provider_timeout_seconds, connect=5.0),
        )
    )
    database = Database(settings.database_url)
    await database.create_all()

    provider = WatchModeClient(settings, watchmode_http_client)
    context = QueryContext.build(
        provider,
        ClientService(database.session_factory),
        ProfileService(database.session_factory),
        MovieService(database.session_factory),
        similar_titles_concurrency=settings.similar_titles_concurrency,
    )

    fastapi_app.state.query_executor = QueryExecutor(build_registry(), context)
    fastapi_app.state.database = database

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await database.dispose()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Movie wishlists backed by WatchMode title metadata",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_query_executor(app: FastAPI) -> QueryExecutor:
    executor = getattr(app.state, "query_executor", None)
    if not isinstance(executor, QueryExecutor):
        raise RuntimeError("Query executor not initialised")
    return executor


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.post("/query")
    async def query_endpoint(request: Request) -> JSONResponse:
        executor = get_query_executor(fastapi_app)
        try:
            payload = await request.json()
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="Request body must be JSON")
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid payload")

        try:
            body = QueryRequest.model_validate(payload)
        except ValidationError as exc:
            raise HTTPException(
                status_code=400, detail=exc.errors(include_context=False)
            ) from exc

        if body.query is not None:
            root, requested = Query, body.query
        else:
            root, requested = Mutation, body.mutation or {}
        try:
            operations = {
                name: operation.to_operation() for name, operation in requested.items()
            }
        except InvalidArgument as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        return JSONResponse(await executor.execute(root, operations))


app = create_app()
