from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from anime_catalog.core.config import Settings, get_settings
from anime_catalog.domain.ports.anime_repository import AnimeRepository
from anime_catalog.repositories.anime_repository_sqlalchemy import SqlAlchemyAnimeRepository
from anime_catalog.services.anime_service import AnimeService


def settings_dep() -> Settings:
    return get_settings()


def get_sessionmaker(request: Request) -> async_sessionmaker[AsyncSession]:
    sm: async_sessionmaker[AsyncSession] | None = getattr(request.app.state, "sessionmaker", None)
    if sm is None:
        raise RuntimeError("DB sessionmaker is not initialized")
    return sm


async def db_session_dep(request: Request) -> AsyncGenerator[AsyncSession, None]:
    sm = get_sessionmaker(request)
    async with sm() as session:
        yield session


def anime_repository_dep(
    session: AsyncSession = Depends(db_session_dep),
    settings: Settings = Depends(settings_dep),
) -> AnimeRepository:
    return SqlAlchemyAnimeRepository(session=session, timeout_seconds=settings.repository_timeout_seconds)


def anime_service_dep(repo: AnimeRepository = Depends(anime_repository_dep)) -> AnimeService:
    return AnimeService(repository=repo)
