from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncIterator, Sequence

from anime_catalog.core.errors import NotFoundError, ValidationError
from anime_catalog.domain.entities import Anime, validate_anime
from anime_catalog.domain.ports.anime_repository import AnimeRepository

logger = logging.getLogger(__name__)


def _ensure_valid(anime: Anime) -> Anime:
    violations = validate_anime(anime)
    if violations:
        raise ValidationError(violations[0])
    return anime


class AnimeService:
    """CRUD orchestration over an :class:`AnimeRepository`.

    Lookups that come back empty raise :class:`NotFoundError`; field rule
    violations raise :class:`ValidationError` before anything is persisted.
    Neither is handled here.
    """

    def __init__(self, *, repository: AnimeRepository) -> None:
        self._repo = repository

    async def find_all(self) -> AsyncIterator[Anime]:
        async for anime in self._repo.find_all():
            yield anime

    async def find_by_id(self, id: uuid.UUID | None) -> Anime:  # noqa: A002
        if id is None:
            raise ValidationError("id should not be null")
        anime = await self._repo.find_by_id(id)
        if anime is None:
            raise NotFoundError(f"could not find anime with id {id}")
        return anime

    async def save(self, anime: Anime) -> Anime:
        saved = await self._repo.save(_ensure_valid(anime))
        logger.info("anime_saved", extra={"anime_id": str(saved.id)})
        return saved

    async def save_all(self, animes: Sequence[Anime]) -> list[Anime]:
        # the whole batch is rejected before dispatch if any entity is invalid
        batch = [_ensure_valid(anime) for anime in animes]
        saved = await self._repo.save_all(batch)
        logger.info("anime_batch_saved", extra={"count": len(saved)})
        return saved

    async def update(self, anime: Anime) -> None:
        if anime.id is None:
            raise ValidationError("id should not be null")
        _ensure_valid(anime)
        await self.find_by_id(anime.id)
        await self._repo.save(anime)
        logger.info("anime_updated", extra={"anime_id": str(anime.id)})

    async def delete(self, id: uuid.UUID | None) -> None:  # noqa: A002
        anime = await self.find_by_id(id)
        await self._repo.delete(anime)
        logger.info("anime_deleted", extra={"anime_id": str(anime.id)})
