from __future__ import annotations

import asyncio
import uuid
from collections.abc import AsyncIterator, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from anime_catalog.domain.entities import Anime
from anime_catalog.domain.ports.anime_repository import AnimeRepository
from anime_catalog.infrastructure.db.models import AnimeModel


def _to_entity(row: AnimeModel) -> Anime:
    return Anime(id=row.id, name=row.name)


class SqlAlchemyAnimeRepository(AnimeRepository):
    def __init__(self, *, session: AsyncSession, timeout_seconds: float) -> None:
        self._session = session
        self._timeout_seconds = float(timeout_seconds)

    async def find_all(self) -> AsyncIterator[Anime]:
        stmt = select(AnimeModel).order_by(AnimeModel.created_at, AnimeModel.id)
        rows = await asyncio.wait_for(self._session.stream_scalars(stmt), timeout=self._timeout_seconds)
        # each fetch from the server-side cursor gets its own deadline
        cursor = rows.__aiter__()
        while True:
            try:
                row = await asyncio.wait_for(cursor.__anext__(), timeout=self._timeout_seconds)
            except StopAsyncIteration:
                return
            yield _to_entity(row)

    async def find_by_id(self, id: uuid.UUID) -> Anime | None:  # noqa: A002
        stmt = select(AnimeModel).where(AnimeModel.id == id).limit(1)
        result = await asyncio.wait_for(self._session.execute(stmt), timeout=self._timeout_seconds)
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return _to_entity(row)

    async def save(self, anime: Anime) -> Anime:
        saved = await self._stage(anime)
        await asyncio.wait_for(self._session.commit(), timeout=self._timeout_seconds)
        return saved

    async def save_all(self, animes: Sequence[Anime]) -> list[Anime]:
        saved = [await self._stage(anime) for anime in animes]
        await asyncio.wait_for(self._session.commit(), timeout=self._timeout_seconds)
        return saved

    async def delete(self, anime: Anime) -> None:
        if anime.id is None:
            return
        stmt = delete(AnimeModel).where(AnimeModel.id == anime.id)
        await asyncio.wait_for(self._session.execute(stmt), timeout=self._timeout_seconds)
        await asyncio.wait_for(self._session.commit(), timeout=self._timeout_seconds)

    async def _stage(self, anime: Anime) -> Anime:
        # Unsaved entities get their id here; known ids are upserted through merge().
        if anime.id is None:
            anime = anime.with_id(uuid.uuid4())
            self._session.add(AnimeModel(id=anime.id, name=anime.name))
        else:
            await asyncio.wait_for(
                self._session.merge(AnimeModel(id=anime.id, name=anime.name)),
                timeout=self._timeout_seconds,
            )
        return anime
