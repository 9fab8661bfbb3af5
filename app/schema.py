"""Resolver registry and query execution.

Every operation a caller can request, and every computed field, is a plain
async function registered against a static ``(parent type, field name)`` key.
Fields without a registered resolver are read straight from the model.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Awaitable, Callable, Mapping

from pydantic import BaseModel

from .errors import InvalidArgument, MovieWishlistError
from .models import SearchResult, TitleDetail
from .resolution import MetadataProvider, SimilarTitlesResolver, TitleDetailResolver
from .selection import EMPTY_SELECTION, FieldSelection
from .services.library import ClientService, MovieService, ProfileService

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?\d+")
_TITLE_ID_RE = re.compile(r"[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*")

# Identifiers are stored in signed 64-bit INTEGER columns.
MIN_INTEGER_ID = -(2**63)
MAX_INTEGER_ID = 2**63 - 1


class Query:
    """Root type for read operations."""


class Mutation:
    """Root type for create operations."""


@dataclass(slots=True)
class QueryContext:
    """Collaborators shared by every resolver; built once at startup."""

    provider: MetadataProvider
    clients: ClientService
    profiles: ProfileService
    movies: MovieService
    title_details: TitleDetailResolver
    similar_titles: SimilarTitlesResolver

    @classmethod
    def build(
        cls,
        provider: MetadataProvider,
        clients: ClientService,
        profiles: ProfileService,
        movies: MovieService,
        *,
        similar_titles_concurrency: int = 8,
    ) -> "QueryContext":
        return cls(
            provider=provider,
            clients=clients,
            profiles=profiles,
            movies=movies,
            title_details=TitleDetailResolver(provider),
            similar_titles=SimilarTitlesResolver(
                provider, concurrency=similar_titles_concurrency
            ),
        )


@dataclass(slots=True)
class ResolveInfo:
    field_name: str
    selection: FieldSelection
    context: QueryContext
    arguments: Mapping[str, Any] = field(default_factory=dict)
    path: tuple[str | int, ...] = ()


Resolver = Callable[[Any, ResolveInfo], Awaitable[Any]]


class ResolverRegistry:
    """Mapping of ``(parent type, field name)`` to a resolver function."""

    def __init__(self) -> None:
        self._resolvers: dict[tuple[type, str], Resolver] = {}

    def register(self, parent_type: type, field_name: str) -> Callable[[Resolver], Resolver]:
        def decorator(func: Resolver) -> Resolver:
            key = (parent_type, field_name)
            if key in self._resolvers:
                raise ValueError(
                    f"Resolver already registered for {parent_type.__name__}.{field_name}"
                )
            self._resolvers[key] = func
            return func

        return decorator

    def get(self, parent_type: type, field_name: str) -> Resolver | None:
        return self._resolvers.get((parent_type, field_name))


@dataclass(slots=True)
class Operation:
    """One requested root field with its arguments and child selection."""

    selection: FieldSelection = EMPTY_SELECTION
    arguments: Mapping[str, Any] = field(default_factory=dict)


def parse_integer_id(value: Any, argument: str) -> int:
    """Parse an integer identifier, rejecting anything that is not plainly numeric."""

    if isinstance(value, bool):
        raise InvalidArgument(f"Argument {argument!r} must be an integer")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and _INTEGER_RE.fullmatch(value):
        parsed = int(value)
    else:
        raise InvalidArgument(f"Argument {argument!r} must be an integer, got {value!r}")
    if not MIN_INTEGER_ID <= parsed <= MAX_INTEGER_ID:
        raise InvalidArgument(f"Argument {argument!r} is out of range")
    return parsed


def _required_string(info: ResolveInfo, argument: str) -> str:
    value = info.arguments.get(argument)
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"Argument {argument!r} must be a non-empty string")
    return value


def _optional_string(info: ResolveInfo, argument: str) -> str | None:
    value = info.arguments.get(argument)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgument(f"Argument {argument!r} must be a string")
    return value


async def resolve_clients(_: Any, info: ResolveInfo):
    return await info.context.clients.get_all()


async def resolve_client_by_id(_: Any, info: ResolveInfo):
    client_id = parse_integer_id(info.arguments.get("id"), "id")
    return await info.context.clients.find_by_id(client_id)


async def resolve_profiles(_: Any, info: ResolveInfo):
    return await info.context.profiles.get_all()


async def resolve_profile_by_name(_: Any, info: ResolveInfo):
    return await info.context.profiles.find_by_name(_required_string(info, "name"))


async def resolve_movies(_: Any, info: ResolveInfo):
    return await info.context.movies.get_all()


async def resolve_search_titles(_: Any, info: ResolveInfo):
    return await info.context.provider.search(_required_string(info, "title"))


async def resolve_networks(_: Any, info: ResolveInfo):
    return await info.context.provider.list_networks()


async def resolve_title_detail(_: Any, info: ResolveInfo):
    title_id = _required_string(info, "id").strip()
    if not _TITLE_ID_RE.fullmatch(title_id):
        raise InvalidArgument(f"Argument 'id' is not a valid title identifier: {title_id!r}")
    return await info.context.title_details.resolve_by_id(title_id, info.selection)


async def resolve_search_result_details(parent: SearchResult, info: ResolveInfo):
    return await info.context.title_details.resolve_from_search_result(
        parent, info.selection
    )


async def resolve_similar_titles(parent: TitleDetail, info: ResolveInfo):
    if info.selection.is_empty():
        raise InvalidArgument(
            "Field 'similarTitles' of type TitleDetail must have a selection of subfields"
        )
    return await info.context.similar_titles.resolve(parent, info.selection)


async def resolve_create_client(_: Any, info: ResolveInfo):
    return await info.context.clients.create(
        _required_string(info, "name"), _optional_string(info, "email")
    )


async def resolve_create_profile(_: Any, info: ResolveInfo):
    client_id = parse_integer_id(info.arguments.get("clientId"), "clientId")
    return await info.context.profiles.create(client_id, _required_string(info, "name"))


async def resolve_create_movie(_: Any, info: ResolveInfo):
    profile_id = parse_integer_id(info.arguments.get("profileId"), "profileId")
    watchmode_id = info.arguments.get("watchmodeId")
    if watchmode_id is not None:
        watchmode_id = parse_integer_id(watchmode_id, "watchmodeId")
    return await info.context.movies.create(
        profile_id, _required_string(info, "title"), watchmode_id
    )


def build_registry() -> ResolverRegistry:
    """Return the registry wiring every operation and computed field."""

    registry = ResolverRegistry()
    registry.register(Query, "clients")(resolve_clients)
    registry.register(Query, "clientById")(resolve_client_by_id)
    registry.register(Query, "profiles")(resolve_profiles)
    registry.register(Query, "profileByName")(resolve_profile_by_name)
    registry.register(Query, "movies")(resolve_movies)
    registry.register(Query, "searchTitles")(resolve_search_titles)
    registry.register(Query, "networks")(resolve_networks)
    registry.register(Query, "titleDetail")(resolve_title_detail)
    registry.register(SearchResult, "details")(resolve_search_result_details)
    registry.register(TitleDetail, "similarTitles")(resolve_similar_titles)
    registry.register(Mutation, "createClient")(resolve_create_client)
    registry.register(Mutation, "createProfile")(resolve_create_profile)
    registry.register(Mutation, "createMovie")(resolve_create_movie)
    return registry


@lru_cache(maxsize=None)
def _public_fields(model_type: type[BaseModel]) -> dict[str, str]:
    """Map public (camelCase) field names of ``model_type`` to attribute names."""

    return {
        info.serialization_alias or name: name
        for name, info in model_type.model_fields.items()
    }


class QueryExecutor:
    """Walk a requested selection, invoking resolvers and isolating field errors."""

    def __init__(self, registry: ResolverRegistry, context: QueryContext) -> None:
        self._registry = registry
        self._context = context

    async def execute(
        self, root: type, operations: Mapping[str, Operation]
    ) -> dict[str, Any]:
        errors: list[dict[str, Any]] = []
        data: dict[str, Any] = {}
        for name, operation in operations.items():
            data[name] = await self._resolve_field(
                None,
                root,
                name,
                operation.selection,
                operation.arguments,
                (name,),
                errors,
            )
        result: dict[str, Any] = {"data": data}
        if errors:
            result["errors"] = errors
        return result

    async def _resolve_field(
        self,
        parent: Any,
        parent_type: type,
        name: str,
        selection: FieldSelection,
        arguments: Mapping[str, Any],
        path: tuple[str | int, ...],
        errors: list[dict[str, Any]],
    ) -> Any:
        try:
            resolver = self._registry.get(parent_type, name)
            if resolver is not None:
                info = ResolveInfo(
                    field_name=name,
                    selection=selection,
                    context=self._context,
                    arguments=arguments,
                    path=path,
                )
                value = await resolver(parent, info)
            else:
                value = self._read_attribute(parent, parent_type, name)
            return await self._complete(value, name, selection, path, errors)
        except MovieWishlistError as exc:
            logger.info("Field %s failed: %s", ".".join(map(str, path)), exc)
            errors.append(
                {
                    "message": str(exc),
                    "path": list(path),
                    "extensions": exc.extensions(),
                }
            )
            return None

    async def _complete(
        self,
        value: Any,
        name: str,
        selection: FieldSelection,
        path: tuple[str | int, ...],
        errors: list[dict[str, Any]],
    ) -> Any:
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return [
                await self._complete(item, name, selection, (*path, index), errors)
                for index, item in enumerate(value)
            ]
        if isinstance(value, BaseModel):
            if selection.is_empty():
                raise InvalidArgument(
                    f"Field {name!r} of type {type(value).__name__} "
                    "must have a selection of subfields"
                )
            completed: dict[str, Any] = {}
            for child_name, child_selection in selection:
                completed[child_name] = await self._resolve_field(
                    value,
                    type(value),
                    child_name,
                    child_selection,
                    {},
                    (*path, child_name),
                    errors,
                )
            return completed
        if not selection.is_empty():
            raise InvalidArgument(f"Field {name!r} is a scalar and has no subfields")
        return value

    def _read_attribute(self, parent: Any, parent_type: type, name: str) -> Any:
        if parent is None or not isinstance(parent, BaseModel):
            raise InvalidArgument(
                f"Cannot query field {name!r} on type {parent_type.__name__}"
            )
        attribute = _public_fields(type(parent)).get(name)
        if attribute is None:
            raise InvalidArgument(
                f"Cannot query field {name!r} on type {parent_type.__name__}"
            )
        return getattr(parent, attribute)
