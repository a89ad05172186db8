from __future__ import annotations

import uuid
from collections.abc import AsyncIterator, Sequence
from typing import Protocol

from anime_catalog.domain.entities import Anime


class AnimeRepository(Protocol):
    def find_all(self) -> AsyncIterator[Anime]:
        ...

    async def find_by_id(self, id: uuid.UUID) -> Anime | None:  # noqa: A002
        ...

    async def save(self, anime: Anime) -> Anime:
        ...

    async def save_all(self, animes: Sequence[Anime]) -> list[Anime]:
        ...

    async def delete(self, anime: Anime) -> None:
        ...
