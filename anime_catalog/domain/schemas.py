from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from anime_catalog.domain.entities import Anime


class AnimeIn(BaseModel):
    # name rules are enforced by AnimeService so violations map to 400, not 422
    id: uuid.UUID | None = None
    name: str | None = None

    def to_entity(self) -> Anime:
        return Anime(id=self.id, name=self.name)


class AnimeOut(BaseModel):
    id: uuid.UUID
    name: str = Field(min_length=1)

    @classmethod
    def from_entity(cls, anime: Anime) -> AnimeOut:
        return cls(id=anime.id, name=anime.name)


class ErrorResponse(BaseModel):
    timestamp: datetime
    path: str
    status: int
    error: str
    message: str
    requestId: str
