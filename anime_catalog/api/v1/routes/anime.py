from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status

from anime_catalog.core.deps import anime_service_dep
from anime_catalog.domain.schemas import AnimeIn, AnimeOut, ErrorResponse
from anime_catalog.services.anime_service import AnimeService

router = APIRouter(prefix="/animes")

_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}


@router.get("", response_model=list[AnimeOut])
async def list_all(service: AnimeService = Depends(anime_service_dep)) -> list[AnimeOut]:
    return [AnimeOut.from_entity(anime) async for anime in service.find_all()]


@router.get("/{id}", response_model=AnimeOut, responses=_ERRORS)
async def find_by_id(id: uuid.UUID, service: AnimeService = Depends(anime_service_dep)) -> AnimeOut:  # noqa: A002
    return AnimeOut.from_entity(await service.find_by_id(id))


@router.post("", response_model=AnimeOut, status_code=status.HTTP_201_CREATED, responses=_ERRORS)
async def save(body: AnimeIn, service: AnimeService = Depends(anime_service_dep)) -> AnimeOut:
    return AnimeOut.from_entity(await service.save(body.to_entity()))


@router.post("/batch", response_model=list[AnimeOut], status_code=status.HTTP_201_CREATED, responses=_ERRORS)
async def save_batch(body: list[AnimeIn], service: AnimeService = Depends(anime_service_dep)) -> list[AnimeOut]:
    saved = await service.save_all([item.to_entity() for item in body])
    return [AnimeOut.from_entity(anime) for anime in saved]


@router.put("/{id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, responses=_ERRORS)
async def update(
    id: uuid.UUID,  # noqa: A002
    body: AnimeIn,
    service: AnimeService = Depends(anime_service_dep),
) -> Response:
    await service.update(body.to_entity().with_id(id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, responses=_ERRORS)
async def delete(id: uuid.UUID, service: AnimeService = Depends(anime_service_dep)) -> Response:  # noqa: A002
    await service.delete(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
