import uuid
from unittest.mock import AsyncMock, MagicMock

from anime_catalog.domain.entities import Anime

ANIME_ID_1 = uuid.UUID("cb349efc-7411-45e0-941e-4514adb14811")
ANIME_NAME = "Tensei Shitara Slime Datta Ken"


def anime_to_be_saved() -> Anime:
    return Anime(name=ANIME_NAME)


def valid_anime() -> Anime:
    return Anime(id=ANIME_ID_1, name=ANIME_NAME)


def valid_updated_anime() -> Anime:
    return Anime(id=ANIME_ID_1, name=f"{ANIME_NAME} 2")


def async_iter(items):
    async def _gen():
        for item in items:
            yield item

    return _gen()


def make_repository() -> MagicMock:
    """Repository double whose writes echo their input back."""
    repo = MagicMock()
    repo.find_all = MagicMock(side_effect=lambda: async_iter([]))
    repo.find_by_id = AsyncMock(return_value=None)
    repo.save = AsyncMock(side_effect=lambda anime: anime)
    repo.save_all = AsyncMock(side_effect=lambda animes: list(animes))
    repo.delete = AsyncMock(return_value=None)
    return repo
