"""Persistence-backed lookups for clients, profiles and wishlist movies."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from ..db_models import Client, Movie, Profile
from ..errors import InvalidArgument
from ..models import ClientRecord, MovieRecord, ProfileRecord

logger = logging.getLogger(__name__)

_CLIENT_LOAD = selectinload(Client.profiles).selectinload(Profile.movies)
_PROFILE_LOAD = selectinload(Profile.movies)


class ClientService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_all(self) -> list[ClientRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Client).options(_CLIENT_LOAD).order_by(Client.id)
            )
            return [ClientRecord.model_validate(row) for row in result.scalars()]

    async def find_by_id(self, client_id: int) -> ClientRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Client).options(_CLIENT_LOAD).where(Client.id == client_id)
            )
            client = result.scalar_one_or_none()
            return ClientRecord.model_validate(client) if client else None

    async def create(self, name: str, email: str | None = None) -> ClientRecord:
        async with self._session_factory() as session:
            client = Client(name=name, email=email, profiles=[])
            session.add(client)
            await session.commit()
            logger.info("Created client %s", client.id)
            return ClientRecord.model_validate(client)


class ProfileService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_all(self) -> list[ProfileRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Profile).options(_PROFILE_LOAD).order_by(Profile.id)
            )
            return [ProfileRecord.model_validate(row) for row in result.scalars()]

    async def find_by_name(self, name: str) -> ProfileRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Profile).options(_PROFILE_LOAD).where(Profile.name == name)
            )
            profile = result.scalar_one_or_none()
            return ProfileRecord.model_validate(profile) if profile else None

    async def create(self, client_id: int, name: str) -> ProfileRecord:
        async with self._session_factory() as session:
            if await session.get(Client, client_id) is None:
                raise InvalidArgument(f"Client {client_id} does not exist")
            profile = Profile(client_id=client_id, name=name, movies=[])
            session.add(profile)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise InvalidArgument(f"Profile name {name!r} is already taken") from exc
            logger.info("Created profile %s for client %s", profile.id, client_id)
            return ProfileRecord.model_validate(profile)


class MovieService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_all(self) -> list[MovieRecord]:
        async with self._session_factory() as session:
            result = await session.execute(select(Movie).order_by(Movie.id))
            return [MovieRecord.model_validate(row) for row in result.scalars()]

    async def create(
        self, profile_id: int, title: str, watchmode_id: int | None = None
    ) -> MovieRecord:
        async with self._session_factory() as session:
            if await session.get(Profile, profile_id) is None:
                raise InvalidArgument(f"Profile {profile_id} does not exist")
            movie = Movie(profile_id=profile_id, title=title, watchmode_id=watchmode_id)
            session.add(movie)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise InvalidArgument(
                    f"{title!r} is already on profile {profile_id}"
                ) from exc
            return MovieRecord.model_validate(movie)
